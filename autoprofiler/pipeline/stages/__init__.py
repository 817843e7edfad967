"""
Pipeline stages (ordered execution flow)

1. strategy_generator → Generate optimization strategies
2. strategy_implementer → Implement, validate and format each strategy
"""
from autoprofiler.pipeline.stages.strategy_generator import generate_strategies
from autoprofiler.pipeline.stages.strategy_implementer import (
    implement_strategy,
    validate_implementation,
    format_implementation,
)

__all__ = [
    # Stage 1: Strategies
    "generate_strategies",
    # Stage 2: Implementation
    "implement_strategy",
    "validate_implementation",
    "format_implementation",
]
