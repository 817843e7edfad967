"""
SQL repair loop: re-prompts the model with the oracle diagnostic until the
fragment passes the oracle
"""
import logging
from enum import Enum

from autoprofiler.core.errors import SqlRepairExhausted
from autoprofiler.dtos import ValidationOutcome
from autoprofiler.pipeline.llm.client import GenerativeModel
from autoprofiler.pipeline.llm.parsers import clean_code_fences, split_think
from autoprofiler.pipeline.llm.prompts import build_sql_repair_prompt
from autoprofiler.pipeline.llm.repair import MAX_REPAIR_TRIES
from autoprofiler.pipeline.sql.oracle import SyntaxOracle

logger = logging.getLogger(__name__)


class SqlOperation(str, Enum):
    VALIDATE = "validate"
    FORMAT = "format"


async def check_sql(oracle: SyntaxOracle, sql: str, operation: SqlOperation) -> ValidationOutcome:
    """Run the oracle check matching the operation"""
    if operation == SqlOperation.FORMAT:
        return await oracle.format(sql)
    return await oracle.validate(sql)


def _accepted(sql: str, outcome: ValidationOutcome, operation: SqlOperation) -> str:
    if operation == SqlOperation.FORMAT and outcome.text is not None:
        return outcome.text
    return sql


async def repair_sql(
    model: GenerativeModel,
    oracle: SyntaxOracle,
    sql: str,
    operation: SqlOperation = SqlOperation.VALIDATE,
    max_tries: int = MAX_REPAIR_TRIES
) -> str:
    """
    Return a version of sql the oracle accepts

    validate returns the accepted fragment, format returns the oracle's
    canonical text. No model call is made when the first check passes.
    """
    outcome = await check_sql(oracle, sql, operation)
    if outcome.valid:
        return _accepted(sql, outcome, operation)

    logger.info(f"Fixing SQL ({operation.value})...")
    current = sql
    diagnostic = outcome.diagnostic or ""

    for attempt in range(1, max_tries + 1):
        logger.info(f"Trying to fix SQL ({operation.value}) {attempt}/{max_tries}")

        response = await model.invoke(build_sql_repair_prompt(current, diagnostic))
        current = clean_code_fences(split_think(response).rest)

        outcome = await check_sql(oracle, current, operation)
        if outcome.valid:
            logger.info(f"SQL fixed on try {attempt}/{max_tries}")
            return _accepted(current, outcome, operation)

        diagnostic = outcome.diagnostic or ""
        logger.warning(f"SQL still invalid (try {attempt}/{max_tries}): {diagnostic[:200]}")

    logger.error(f"Failed to correct SQL ({operation.value}) after {max_tries} tries")
    raise SqlRepairExhausted(current, diagnostic, operation.value)
