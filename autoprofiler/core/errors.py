"""
Error taxonomy for the profiling pipeline

Every error except ResponseParseError is terminal for a profile() call.
"""
from typing import List, Optional, Tuple


class ProfilerError(Exception):
    """Base class for all pipeline errors"""


class InvalidInputSql(ProfilerError):
    """The caller's query or a table definition was rejected by the oracle"""

    def __init__(self, diagnostic: str, failures: Optional[List[Tuple[str, str]]] = None):
        super().__init__(f"Invalid input SQL:\n{diagnostic}")
        self.diagnostic = diagnostic
        self.failures = failures or []


class ResponseParseError(ProfilerError):
    """A strict parser rejected model output (recoverable through repair)"""


class SchemaRepairExhausted(ProfilerError):
    def __init__(self, schema_name: str, raw_text: str, error: str):
        super().__init__(
            f"Failed to repair {schema_name} response: {error}\nLast response: {raw_text}"
        )
        self.schema_name = schema_name
        self.raw_text = raw_text
        self.error = error


class SqlRepairExhausted(ProfilerError):
    def __init__(self, fragment: str, diagnostic: str, operation: str):
        super().__init__(
            f"Failed to correct SQL ({operation}): {diagnostic}\nLast SQL: {fragment}"
        )
        self.fragment = fragment
        self.diagnostic = diagnostic
        self.operation = operation


class OracleInvocationError(ProfilerError):
    """The SQL linter process could not be executed"""


class ModelInvocationError(ProfilerError):
    """The generative model could not be reached or returned an unusable payload"""
