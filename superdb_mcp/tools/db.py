"""
Database Tools

Thin wrappers over ``super db`` for listing, querying, loading and creating
pools in a SuperDB lake.
"""

from ..config.settings import SuperSettings
from ..schemas.tools import (
    DbListOutput,
    DbMessageOutput,
    DbQueryOutput,
    OutputFormat,
)
from .query import output_from_result
from .super import format_args, run_super_db


async def super_db_list(lake: str | None = None, settings: SuperSettings | None = None) -> DbListOutput:
    """List all pools in a database."""
    result = await run_super_db("ls", [], lake=lake, settings=settings)

    if not result.ok:
        return DbListOutput(success=False, error=result.stderr.strip() or "Failed to list pools")

    pools = [line for line in result.stdout.strip().splitlines() if line]
    return DbListOutput(success=True, pools=pools)


def scope_query_to_pool(query: str, pool: str | None) -> str:
    """Prefix ``from <pool> |`` unless the query already has a FROM."""
    if pool and "from" not in query.lower():
        return f"from {pool} | {query}"
    return query


async def super_db_query(
    query: str,
    pool: str | None = None,
    lake: str | None = None,
    format: str = OutputFormat.JSON.value,
    settings: SuperSettings | None = None,
) -> DbQueryOutput:
    """Query data from a database pool."""
    try:
        args = format_args(format)
    except ValueError as e:
        return DbQueryOutput(success=False, error=str(e))
    args.extend(["-c", scope_query_to_pool(query, pool)])

    result = await run_super_db("query", args, lake=lake, settings=settings)

    if not result.ok:
        return DbQueryOutput(success=False, error=result.stderr.strip() or "Query failed")

    return DbQueryOutput(**output_from_result(result, format).model_dump())


async def super_db_load(
    pool: str,
    files: list[str] | None = None,
    data: str | None = None,
    lake: str | None = None,
    settings: SuperSettings | None = None,
) -> DbMessageOutput:
    """Load files or inline data into a pool."""
    if files:
        result = await run_super_db("load", [pool, *files], lake=lake, settings=settings)
    elif data is not None:
        result = await run_super_db("load", [pool, "-"], lake=lake, stdin=data, settings=settings)
    else:
        return DbMessageOutput(success=False, error="Provide files or data to load")

    if not result.ok:
        return DbMessageOutput(success=False, error=result.stderr.strip() or "Failed to load data")

    return DbMessageOutput(success=True, message=result.stdout.strip() or "Data loaded successfully")


async def super_db_create_pool(
    name: str,
    order_by: str | None = None,
    lake: str | None = None,
    settings: SuperSettings | None = None,
) -> DbMessageOutput:
    """Create a new pool, optionally ordered by a key."""
    args: list[str] = []
    if order_by:
        args.extend(["-orderby", order_by])
    args.append(name)

    result = await run_super_db("create", args, lake=lake, settings=settings)

    if not result.ok:
        return DbMessageOutput(success=False, error=result.stderr.strip() or "Failed to create pool")

    return DbMessageOutput(success=True, message=f"Pool '{name}' created successfully")
