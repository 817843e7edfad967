"""
JSON repair loop: re-prompts the model until its output matches a target schema
"""
import logging
from typing import Callable, TypeVar

from autoprofiler.core.errors import ResponseParseError, SchemaRepairExhausted
from autoprofiler.pipeline.llm.client import GenerativeModel
from autoprofiler.pipeline.llm.parsers import extract_json, split_think
from autoprofiler.pipeline.llm.prompts import build_json_repair_prompt

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_REPAIR_TRIES = 3


async def parse_with_repair(
    model: GenerativeModel,
    content: str,
    parser: Callable[[str], T],
    schema_name: str,
    schema_template: str,
    max_tries: int = MAX_REPAIR_TRIES
) -> T:
    """
    Parse model output, asking the model to fix it when parsing fails

    Steps:
    1. Apply parser directly
    2. On ResponseParseError, up to max_tries repair rounds (one model call each)
    3. Each round feeds the previous round's text and error back to the model

    Raises SchemaRepairExhausted when every round fails
    """
    try:
        return parser(content)
    except ResponseParseError as e:
        error = str(e)

    logger.warning(f"Failed to parse {schema_name} response: {error}")
    failing_text = content

    for attempt in range(1, max_tries + 1):
        logger.info(f"Trying to fix {schema_name} JSON response (try {attempt}/{max_tries})")

        prompt = build_json_repair_prompt(failing_text, error, schema_template)
        response = await model.invoke(prompt)
        candidate = extract_json(split_think(response).rest)

        try:
            return parser(candidate)
        except ResponseParseError as e:
            logger.warning(
                f"Failed to parse {schema_name} (try {attempt}/{max_tries}): {e}"
            )
            failing_text = candidate
            error = str(e)

    logger.error(f"Exhausted {max_tries} repair tries for {schema_name} response")
    raise SchemaRepairExhausted(schema_name, failing_text, error)
