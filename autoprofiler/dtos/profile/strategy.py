"""
Strategy and implementation DTOs
"""
from typing import List
from pydantic import BaseModel, Field


class Strategy(BaseModel):
    """An optimization technique proposed for the query"""
    name: str = Field(..., min_length=1, description="Name of the strategy")
    description: str = Field(..., min_length=1, description="Description of the strategy")


class StrategyList(BaseModel):
    """Strict parse target of the strategy generation response"""
    strategies: List[Strategy] = Field(..., min_length=1, description="Array of strategies")


class Implementation(BaseModel):
    """Concrete SQL realizing one strategy"""
    query: str = Field(..., min_length=1, description="The SQL query to execute")
    tables: List[str] = Field(
        ...,
        description="Modified table creation statements, including indexes"
    )


class StrategyImplementation(Strategy, Implementation):
    """A strategy paired with its validated and formatted implementation"""


class StrategyGeneration(BaseModel):
    """Output of the strategy generation stage"""
    think: str = ""
    strategies: List[Strategy]


class ThoughtResult(BaseModel):
    """
    Final response of a profiling run

    think is the reasoning trace of the strategy generation call only
    """
    think: str
    strategies: List[StrategyImplementation]
