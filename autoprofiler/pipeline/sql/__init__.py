"""
SQL utilities (oracle, repair)
"""
from autoprofiler.pipeline.sql.oracle import SyntaxOracle, SqlFluffOracle, create_oracle
from autoprofiler.pipeline.sql.repair import SqlOperation, check_sql, repair_sql

__all__ = [
    "SyntaxOracle",
    "SqlFluffOracle",
    "create_oracle",
    "SqlOperation",
    "check_sql",
    "repair_sql",
]
