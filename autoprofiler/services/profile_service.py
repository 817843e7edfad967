"""
Service for profile orchestration
Composes input validation, strategy generation and strategy implementation
"""
import logging
from enum import Enum
from typing import List, Optional

from autoprofiler.core.config import settings
from autoprofiler.core.errors import InvalidInputSql
from autoprofiler.dtos import (
    StrategyImplementation,
    ThoughtResult,
    ValidationOutcome,
)
from autoprofiler.pipeline.llm.client import GenerativeModel, create_model
from autoprofiler.pipeline.llm.repair import MAX_REPAIR_TRIES
from autoprofiler.pipeline.sql.oracle import SyntaxOracle, create_oracle
from autoprofiler.pipeline.stages import generate_strategies, implement_strategy
from autoprofiler.utils.async_utils import gather_or_cancel

logger = logging.getLogger(__name__)


class ProfileState(str, Enum):
    VALIDATING_INPUT = "validating_input"
    GENERATING = "generating"
    IMPLEMENTING = "implementing"
    DONE = "done"
    FAILED = "failed"


class ProfileService:
    """
    Orchestrates the profiling pipeline

    Model and oracle are injected so that each call path can be built with
    fakes; nothing is shared between profile() calls.

    Example:
        service = ProfileService(model=create_model(), oracle=create_oracle())
        result = await service.profile(query, tables)
    """

    def __init__(
        self,
        model: GenerativeModel,
        oracle: SyntaxOracle,
        max_repair_tries: int = MAX_REPAIR_TRIES,
        dialect: str = "postgres"
    ):
        self.model = model
        self.oracle = oracle
        self.max_repair_tries = max_repair_tries
        self.dialect = dialect

    async def profile(self, query: str, tables: List[str]) -> ThoughtResult:
        """
        Main entry point

        States: validating_input → generating → implementing → done
        (failed from any state). Returns a complete ThoughtResult or raises
        the first terminal error.
        """
        state = ProfileState.VALIDATING_INPUT
        try:
            logger.info(f"[profile] {state.value}: query + {len(tables)} table(s)")
            await self._validate_input(query, tables)

            state = ProfileState.GENERATING
            logger.info(f"[profile] {state.value}")
            generation = await generate_strategies(
                self.model,
                query,
                tables,
                max_tries=self.max_repair_tries,
                dialect=self.dialect
            )

            state = ProfileState.IMPLEMENTING
            logger.info(f"[profile] {state.value}: {len(generation.strategies)} strategies")
            implementations = await gather_or_cancel(
                implement_strategy(
                    self.model,
                    self.oracle,
                    strategy,
                    query,
                    tables,
                    max_tries=self.max_repair_tries
                )
                for strategy in generation.strategies
            )

            state = ProfileState.DONE
            logger.info(f"[profile] {state.value}: processing completed")
            return ThoughtResult(
                think=generation.think,
                strategies=[
                    StrategyImplementation(
                        name=strategy.name,
                        description=strategy.description,
                        query=implementation.query,
                        tables=implementation.tables
                    )
                    for strategy, implementation in zip(generation.strategies, implementations)
                ]
            )
        except Exception as e:
            logger.error(f"[profile] {ProfileState.FAILED.value} during {state.value}: {e}")
            raise

    async def _validate_input(self, query: str, tables: List[str]) -> None:
        """Reject the call before any model work when the oracle refuses the input"""
        fragments = [query] + list(tables)
        outcomes: List[ValidationOutcome] = await gather_or_cancel(
            self.oracle.validate(fragment) for fragment in fragments
        )

        failures = []
        lines = []
        for index, (fragment, outcome) in enumerate(zip(fragments, outcomes)):
            if outcome.valid:
                continue
            label = "query" if index == 0 else f"table #{index}"
            failures.append((fragment, outcome.diagnostic or ""))
            lines.append(f"Invalid {label}: {fragment}\n{outcome.diagnostic}")

        if failures:
            logger.warning(f"Input rejected by oracle: {len(failures)} invalid fragment(s)")
            raise InvalidInputSql("\n".join(lines), failures)

        logger.info("Validated input query and tables")


def create_profile_service(
    model: Optional[GenerativeModel] = None,
    oracle: Optional[SyntaxOracle] = None
) -> ProfileService:
    """Build a ProfileService from settings, with optional overrides"""
    return ProfileService(
        model=model or create_model(settings),
        oracle=oracle or create_oracle(settings),
        max_repair_tries=settings.MAX_REPAIR_TRIES,
        dialect=settings.SQL_DIALECT
    )
