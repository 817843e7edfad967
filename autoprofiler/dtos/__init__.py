"""
DTOs (Data Transfer Objects)
Internal objects for passing data between layers
"""
from autoprofiler.dtos.profile import (
    Strategy,
    StrategyList,
    Implementation,
    StrategyImplementation,
    StrategyGeneration,
    ThoughtResult,
    ValidationOutcome,
)

__all__ = [
    "Strategy",
    "StrategyList",
    "Implementation",
    "StrategyImplementation",
    "StrategyGeneration",
    "ThoughtResult",
    "ValidationOutcome",
]
