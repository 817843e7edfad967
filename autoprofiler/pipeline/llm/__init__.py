"""
LLM utilities (client, prompts, parsers, repair)
"""
from autoprofiler.pipeline.llm.client import (
    GenerativeModel,
    OllamaModel,
    AzureOpenAIModel,
    create_model,
)
from autoprofiler.pipeline.llm.prompts import (
    STRATEGY_SCHEMA_TEMPLATE,
    IMPLEMENTATION_SCHEMA_TEMPLATE,
    build_strategy_prompt,
    build_implementation_prompt,
    build_json_repair_prompt,
    build_sql_repair_prompt,
)
from autoprofiler.pipeline.llm.parsers import (
    ThinkSplit,
    split_think,
    extract_json,
    clean_code_fences,
    parse_strategies,
    parse_implementation,
)
from autoprofiler.pipeline.llm.repair import MAX_REPAIR_TRIES, parse_with_repair

__all__ = [
    "GenerativeModel",
    "OllamaModel",
    "AzureOpenAIModel",
    "create_model",
    "STRATEGY_SCHEMA_TEMPLATE",
    "IMPLEMENTATION_SCHEMA_TEMPLATE",
    "build_strategy_prompt",
    "build_implementation_prompt",
    "build_json_repair_prompt",
    "build_sql_repair_prompt",
    "ThinkSplit",
    "split_think",
    "extract_json",
    "clean_code_fences",
    "parse_strategies",
    "parse_implementation",
    "MAX_REPAIR_TRIES",
    "parse_with_repair",
]
