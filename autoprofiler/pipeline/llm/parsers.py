"""
LLM response parsers
"""
from typing import List
from pydantic import BaseModel, ValidationError

from autoprofiler.core.errors import ResponseParseError
from autoprofiler.dtos import Implementation, Strategy, StrategyList

THINK_OPEN = "<think>"
THINK_CLOSE = "</think>"


class ThinkSplit(BaseModel):
    """Model output split into its reasoning trace and its answer"""
    has_reasoning: bool
    think: str
    rest: str


def split_think(response: str) -> ThinkSplit:
    """
    Split the reasoning segment off a model response

    Only the first <think> and the first </think> after it are honored.
    Without both markers the response is returned untouched as the answer.
    """
    start = response.find(THINK_OPEN)
    end = response.find(THINK_CLOSE, start + len(THINK_OPEN)) if start != -1 else -1

    if start == -1 or end == -1:
        return ThinkSplit(has_reasoning=False, think="", rest=response)

    think = response[start + len(THINK_OPEN):end].strip()
    rest = response[end + len(THINK_CLOSE):].strip()
    return ThinkSplit(has_reasoning=True, think=think, rest=rest)


def extract_json(response: str) -> str:
    """Return the text between the first '{' and the last '}' (inclusive)"""
    start = response.find("{")
    end = response.rfind("}")

    if start == -1 or end == -1 or end < start:
        return response

    return response[start:end + 1]


def clean_code_fences(content: str) -> str:
    """Removes markdown code fences (```sql ... ```)"""
    content = content.strip()
    if content.startswith("```"):
        content = content.strip("`")
        # Remove language identifier (e.g., "sql")
        if "\n" in content:
            lines = content.split("\n")
            if lines[0].strip().isalpha():
                content = "\n".join(lines[1:])

    return content.strip()


def parse_strategies(content: str) -> List[Strategy]:
    """Parse a strategy generation response, raising ResponseParseError"""
    try:
        return StrategyList.model_validate_json(content).strategies
    except ValidationError as e:
        raise ResponseParseError(f"Failed to parse strategies: {e}") from e


def parse_implementation(content: str) -> Implementation:
    """Parse a strategy implementation response, raising ResponseParseError"""
    try:
        return Implementation.model_validate_json(content)
    except ValidationError as e:
        raise ResponseParseError(f"Failed to parse implementation: {e}") from e
