"""
SQL AutoProfiler

Generates optimization strategies for a SQL query, each with a validated
and formatted implementation.
"""
from autoprofiler.dtos import (
    Strategy,
    Implementation,
    StrategyImplementation,
    ThoughtResult,
    ValidationOutcome,
)
from autoprofiler.services import ProfileService, create_profile_service

__all__ = [
    "Strategy",
    "Implementation",
    "StrategyImplementation",
    "ThoughtResult",
    "ValidationOutcome",
    "ProfileService",
    "create_profile_service",
]
