"""
Profile DTOs
"""
from autoprofiler.dtos.profile.strategy import (
    Strategy,
    StrategyList,
    Implementation,
    StrategyImplementation,
    StrategyGeneration,
    ThoughtResult,
)
from autoprofiler.dtos.profile.validation import ValidationOutcome

__all__ = [
    "Strategy",
    "StrategyList",
    "Implementation",
    "StrategyImplementation",
    "StrategyGeneration",
    "ThoughtResult",
    "ValidationOutcome",
]
