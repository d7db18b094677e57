"""
Query Tools

Run, validate and inspect SuperSQL queries through the ``super`` binary.
Failed queries come back with the engine's error text and, where the error
looks like a zq-era habit, a hint on the SuperDB spelling.
"""

import logging
import os
import re

from ..config.settings import SuperSettings
from ..schemas.tools import (
    OutputFormat,
    QueryDiagnostic,
    QueryOutput,
    SchemaOutput,
    ShapeInfo,
    ValidateOutput,
)
from .super import SuperResult, format_args, parse_ndjson, run_super

logger = logging.getLogger(__name__)

SCHEMA_QUERY = "count(), any(this) by typeof(this) | sort -r count"

FROM_PATH_HINT = (
    "FROM clauses resolve paths relative to the server's working directory, "
    "not from the files parameter. Use absolute paths in FROM clauses."
)

_POSITION_RE = re.compile(r"line (\d+), column (\d+)")
_MISSING_FILE_RE = re.compile(r"file does not exist: (\S+)")


def migration_suggestions(error: str, query: str, files: list[str] | None = None) -> list[str]:
    """Suggest fixes for errors commonly caused by pre-SuperDB syntax."""
    suggestions: list[str] = []

    if "yield" in error:
        suggestions.append('Did you mean "values"? (yield was renamed to values in SuperDB)')
    if "over" in error:
        suggestions.append('Did you mean "unnest"? (over was renamed to unnest in SuperDB)')
    if re.search(r"/.*/", error):
        suggestions.append("Inline regex /pattern/ is not supported. Use string patterns: 'pattern'")
    if "func" in error:
        suggestions.append('Did you mean "fn"? (func was renamed to fn in SuperDB)')
    if "type mismatch" in error and "string + string" in error:
        suggestions.append(
            "The + operator no longer concatenates strings. Use f-string interpolation "
            "(preferred): f'{a}{b}', or || operator, or concat()"
        )
    if re.search(r"\bop\s+\w+\s*\(", query):
        suggestions.append(
            'Remove parentheses from operator definition: "op name(a, b):" should be "op name a, b:"'
        )
    if "file does not exist" in error and files:
        missing = _MISSING_FILE_RE.search(error)
        missing_name = missing.group(1) if missing else None
        match = next((f for f in files if os.path.basename(f) == missing_name), None) if missing_name else None
        if match:
            suggestions.append(
                f'The file "{missing_name}" was not found. '
                f'Use the absolute path in your FROM clause: FROM "{match}"'
            )
        else:
            suggestions.append(FROM_PATH_HINT)

    return suggestions


def build_query_args(
    query: str,
    files: list[str] | None = None,
    data: str | None = None,
    output_format: str = OutputFormat.JSON.value,
    input_format: str | None = None,
) -> list[str]:
    """Argument list for ``super`` running ``query`` over files or stdin."""
    args = format_args(output_format)
    if input_format:
        args.extend(["-i", input_format])
    args.extend(["-c", query])

    if files:
        args.extend(files)
    elif data is not None:
        args.append("-")

    return args


def output_from_result(result: SuperResult, output_format: str) -> QueryOutput:
    """Turn successful super output into a QueryOutput."""
    if output_format != OutputFormat.JSON.value:
        return QueryOutput(success=True, raw=result.stdout)

    try:
        rows = parse_ndjson(result.stdout)
    except ValueError:
        return QueryOutput(success=True, raw=result.stdout)

    return QueryOutput(success=True, data=rows, row_count=len(rows))


async def super_query(
    query: str,
    files: list[str] | None = None,
    data: str | None = None,
    format: str = OutputFormat.JSON.value,
    input_format: str | None = None,
    settings: SuperSettings | None = None,
) -> QueryOutput:
    """Execute a SuperSQL query over files or inline data."""
    try:
        args = build_query_args(query, files, data, format, input_format)
    except ValueError as e:
        return QueryOutput(success=False, error=str(e))

    result = await run_super(args, stdin=data if not files else None, settings=settings)

    if not result.ok:
        error = result.stderr.strip() or "Query failed with no error message"
        return QueryOutput(
            success=False,
            error=error,
            suggestions=migration_suggestions(error, query, files) or None,
        )

    return output_from_result(result, format)


def parse_compile_errors(error: str) -> list[QueryDiagnostic]:
    """Split compiler output into diagnostics, keeping any line/column it reports."""
    diagnostics: list[QueryDiagnostic] = []
    for message in (block.strip() for block in error.split("\n\n")):
        if not message:
            continue
        position = _POSITION_RE.search(message)
        diagnostics.append(QueryDiagnostic(
            message=message,
            line=int(position.group(1)) if position else None,
            column=int(position.group(2)) if position else None,
        ))
    return diagnostics


async def super_validate(query: str, settings: SuperSettings | None = None) -> ValidateOutput:
    """Check query syntax with ``super compile`` without reading any data."""
    result = await run_super(["compile", query], settings=settings)

    if result.ok:
        return ValidateOutput(success=True, valid=True)

    error = result.stderr.strip() or "Query failed to compile"
    return ValidateOutput(
        success=True,
        valid=False,
        error=error,
        diagnostics=parse_compile_errors(error),
        suggestions=migration_suggestions(error, query) or None,
    )


async def super_schema(file: str, settings: SuperSettings | None = None) -> SchemaOutput:
    """Find the distinct record types in a file, with counts and an example of each."""
    result = await run_super(["-j", "-c", SCHEMA_QUERY, file], settings=settings)

    if not result.ok:
        return SchemaOutput(success=False, error=result.stderr.strip() or "Failed to read file")

    try:
        rows = parse_ndjson(result.stdout)
        shapes = [
            ShapeInfo(type=str(row["typeof"]), count=int(row["count"]), example=row.get("any"))
            for row in rows
        ]
    except (ValueError, KeyError, TypeError) as e:
        return SchemaOutput(success=False, error=f"Failed to parse output: {e}")

    return SchemaOutput(
        success=True,
        shapes=shapes,
        total_records=sum(shape.count for shape in shapes),
    )
