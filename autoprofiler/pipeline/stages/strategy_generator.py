"""
Stage 1: Strategy Generation
Asks the model for an ordered list of optimization strategies
"""
import logging
from typing import List

from autoprofiler.dtos import StrategyGeneration
from autoprofiler.pipeline.llm.client import GenerativeModel
from autoprofiler.pipeline.llm.parsers import extract_json, parse_strategies, split_think
from autoprofiler.pipeline.llm.prompts import STRATEGY_SCHEMA_TEMPLATE, build_strategy_prompt
from autoprofiler.pipeline.llm.repair import MAX_REPAIR_TRIES, parse_with_repair

logger = logging.getLogger(__name__)


async def generate_strategies(
    model: GenerativeModel,
    query: str,
    tables: List[str],
    max_tries: int = MAX_REPAIR_TRIES,
    dialect: str = "postgres"
) -> StrategyGeneration:
    """
    Generate optimization strategies for a query

    Simple 4-step process:
    1. Build strategy prompt
    2. Call LLM once
    3. Split reasoning and extract JSON
    4. Parse (with repair) into strategies

    The reasoning of this call is the one surfaced in the final result.
    """
    logger.info(f"Generating strategies for: '{query[:50]}...'")

    # Step 1: Build prompt
    prompt = build_strategy_prompt(query, tables, dialect=dialect)

    # Step 2: Call LLM
    response = await model.invoke(prompt)

    # Step 3: Split reasoning, extract JSON
    split = split_think(response)
    content = extract_json(split.rest)

    # Step 4: Parse with repair
    strategies = await parse_with_repair(
        model,
        content,
        parse_strategies,
        schema_name="strategies",
        schema_template=STRATEGY_SCHEMA_TEMPLATE,
        max_tries=max_tries
    )

    logger.info(f"Found {len(strategies)} strategies")

    return StrategyGeneration(think=split.think, strategies=strategies)
