"""
Stage 2: Strategy Implementation
Turns one strategy into a validated, formatted query and table statements
"""
import logging
from typing import List

from autoprofiler.dtos import Implementation, Strategy
from autoprofiler.pipeline.llm.client import GenerativeModel
from autoprofiler.pipeline.llm.parsers import extract_json, parse_implementation, split_think
from autoprofiler.pipeline.llm.prompts import (
    IMPLEMENTATION_SCHEMA_TEMPLATE,
    build_implementation_prompt,
)
from autoprofiler.pipeline.llm.repair import MAX_REPAIR_TRIES, parse_with_repair
from autoprofiler.pipeline.sql.oracle import SyntaxOracle
from autoprofiler.pipeline.sql.repair import SqlOperation, repair_sql
from autoprofiler.utils.async_utils import gather_or_cancel

logger = logging.getLogger(__name__)


async def _repair_implementation(
    model: GenerativeModel,
    oracle: SyntaxOracle,
    implementation: Implementation,
    operation: SqlOperation,
    max_tries: int
) -> Implementation:
    query = await repair_sql(model, oracle, implementation.query, operation, max_tries)
    tables = await gather_or_cancel(
        repair_sql(model, oracle, table, operation, max_tries)
        for table in implementation.tables
    )
    return Implementation(query=query, tables=tables)


async def validate_implementation(
    model: GenerativeModel,
    oracle: SyntaxOracle,
    implementation: Implementation,
    max_tries: int = MAX_REPAIR_TRIES
) -> Implementation:
    """Make the query, then every table statement, pass oracle validation"""
    validated = await _repair_implementation(
        model, oracle, implementation, SqlOperation.VALIDATE, max_tries
    )
    logger.info("Validated SQL query and tables")
    return validated


async def format_implementation(
    model: GenerativeModel,
    oracle: SyntaxOracle,
    implementation: Implementation,
    max_tries: int = MAX_REPAIR_TRIES
) -> Implementation:
    """Replace the query and table statements with the oracle's canonical form"""
    formatted = await _repair_implementation(
        model, oracle, implementation, SqlOperation.FORMAT, max_tries
    )
    logger.info("Formatted SQL query and tables")
    return formatted


async def implement_strategy(
    model: GenerativeModel,
    oracle: SyntaxOracle,
    strategy: Strategy,
    query: str,
    tables: List[str],
    max_tries: int = MAX_REPAIR_TRIES
) -> Implementation:
    """
    Implement one strategy

    Steps:
    1. Build implementation prompt and call LLM once
    2. Extract JSON (reasoning discarded) and parse with repair
    3. Validate query, then tables
    4. Format query, then tables

    Any terminal failure propagates; there is no fallback to the original query.
    """
    logger.info(f"Implementing strategy: {strategy.name}")

    prompt = build_implementation_prompt(
        strategy.name,
        strategy.description,
        query,
        tables
    )
    response = await model.invoke(prompt)
    content = extract_json(split_think(response).rest)

    try:
        logger.info("Parsing implementation response...")
        implementation = await parse_with_repair(
            model,
            content,
            parse_implementation,
            schema_name="implementation",
            schema_template=IMPLEMENTATION_SCHEMA_TEMPLATE,
            max_tries=max_tries
        )
        implementation = await validate_implementation(model, oracle, implementation, max_tries)
        return await format_implementation(model, oracle, implementation, max_tries)
    except Exception as e:
        logger.error(f"Strategy '{strategy.name}' failed: {e}")
        raise
