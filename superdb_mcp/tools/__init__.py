"""
Query engine tools for superdb-mcp.

- super: subprocess runner for the ``super`` binary
- query: run, validate and inspect queries
- db: pool management in a SuperDB lake
"""

from .db import super_db_create_pool, super_db_list, super_db_load, super_db_query
from .query import migration_suggestions, super_query, super_schema, super_validate
from .super import SuperExecutionError, SuperResult, parse_ndjson, run_super, run_super_db

__all__ = [
    "SuperExecutionError",
    "SuperResult",
    "run_super",
    "run_super_db",
    "parse_ndjson",
    "super_query",
    "super_validate",
    "super_schema",
    "migration_suggestions",
    "super_db_list",
    "super_db_query",
    "super_db_load",
    "super_db_create_pool",
]
