"""
Query engine runner.

Builds argument lists for the ``super`` binary and executes it as a
subprocess. Arguments are passed as a list, never through a shell, so
query text needs no escaping.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any

from ..config.settings import SuperSettings

logger = logging.getLogger(__name__)


class SuperExecutionError(Exception):
    """Raised when the super binary cannot be run to completion."""

    def __init__(self, message: str, original_error: Exception | None = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)


@dataclass
class SuperResult:
    """Captured output of one super invocation."""
    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def format_args(output_format: str) -> list[str]:
    """Flags selecting an output format."""
    if output_format == "json":
        return ["-j"]
    if output_format == "sup":
        return ["-s"]
    if output_format in ("csv", "table"):
        return ["-f", output_format]
    raise ValueError(f"Unsupported output format: {output_format}")


async def run_super(
    args: list[str],
    stdin: str | None = None,
    settings: SuperSettings | None = None,
) -> SuperResult:
    """
    Execute the super binary with the given arguments.

    Args:
        args: Arguments after the binary name
        stdin: Optional text written to the process's stdin
        settings: Binary path and timeout (defaults from the environment)

    Raises:
        SuperExecutionError: if the binary cannot be spawned or times out
    """
    settings = settings or SuperSettings.from_env()
    start_time = time.time()

    try:
        process = await asyncio.create_subprocess_exec(
            settings.path,
            *args,
            stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise SuperExecutionError(f"Failed to spawn super: {e}", e) from e

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(stdin.encode("utf-8") if stdin is not None else None),
            timeout=settings.timeout_seconds,
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise SuperExecutionError(
            f"super timed out after {settings.timeout_seconds:g} seconds"
        ) from None

    exit_code = process.returncode if process.returncode is not None else 1
    logger.debug(
        "super %s exited with %d in %dms",
        " ".join(args[:2]),
        exit_code,
        int((time.time() - start_time) * 1000),
    )

    return SuperResult(
        stdout=stdout_bytes.decode("utf-8", errors="replace"),
        stderr=stderr_bytes.decode("utf-8", errors="replace"),
        exit_code=exit_code,
    )


async def run_super_db(
    subcommand: str,
    args: list[str],
    lake: str | None = None,
    stdin: str | None = None,
    settings: SuperSettings | None = None,
) -> SuperResult:
    """Execute ``super db <subcommand>``, adding ``-lake`` when a lake is given."""
    settings = settings or SuperSettings.from_env()
    lake = lake or settings.lake

    full_args = ["db", subcommand]
    if lake:
        full_args.extend(["-lake", lake])
    full_args.extend(args)
    return await run_super(full_args, stdin=stdin, settings=settings)


def parse_ndjson(output: str) -> list[Any]:
    """Parse newline-delimited JSON. Raises ValueError on a bad line."""
    return [json.loads(line) for line in output.strip().splitlines() if line.strip()]
