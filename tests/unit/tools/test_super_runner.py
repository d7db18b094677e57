"""Unit tests for the super binary runner."""

import sys
from unittest.mock import AsyncMock, patch

import pytest

from superdb_mcp.config.settings import SuperSettings
from superdb_mcp.tools.super import (
    SuperExecutionError,
    SuperResult,
    format_args,
    parse_ndjson,
    run_super,
    run_super_db,
)

# The Python interpreter stands in for the super binary
PYTHON = SuperSettings(path=sys.executable, timeout_seconds=10.0)


class TestFormatArgs:
    """Tests for format_args."""

    def test_formats(self):
        assert format_args("json") == ["-j"]
        assert format_args("sup") == ["-s"]
        assert format_args("csv") == ["-f", "csv"]
        assert format_args("table") == ["-f", "table"]

    def test_unknown(self):
        with pytest.raises(ValueError):
            format_args("xml")


class TestRunSuper:
    """Tests for run_super."""

    @pytest.mark.asyncio
    async def test_captures_output(self):
        result = await run_super(["-c", "import sys; print('out'); print('err', file=sys.stderr)"], settings=PYTHON)

        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"
        assert result.exit_code == 0
        assert result.ok is True

    @pytest.mark.asyncio
    async def test_nonzero_exit(self):
        result = await run_super(["-c", "raise SystemExit(2)"], settings=PYTHON)

        assert result.exit_code == 2
        assert result.ok is False

    @pytest.mark.asyncio
    async def test_stdin(self):
        result = await run_super(["-c", "import sys; print(sys.stdin.read().upper())"], stdin="abc", settings=PYTHON)

        assert result.stdout.strip() == "ABC"

    @pytest.mark.asyncio
    async def test_arguments_are_not_shell_interpreted(self):
        """Test quotes and pipes reach the binary verbatim."""
        query = "from 'a b.json' | where x=='$(rm -rf /)' | count()"

        result = await run_super(["-c", "import sys; print(sys.argv[1])", query], settings=PYTHON)

        assert result.stdout.strip() == query

    @pytest.mark.asyncio
    async def test_timeout(self):
        settings = SuperSettings(path=sys.executable, timeout_seconds=0.2)

        with pytest.raises(SuperExecutionError) as exc_info:
            await run_super(["-c", "import time; time.sleep(10)"], settings=settings)

        assert "timed out" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_binary(self, tmp_path):
        settings = SuperSettings(path=str(tmp_path / "no-super"))

        with pytest.raises(SuperExecutionError) as exc_info:
            await run_super(["-j", "-c", "count()"], settings=settings)

        assert "Failed to spawn super" in str(exc_info.value)
        assert isinstance(exc_info.value.original_error, OSError)


class TestRunSuperDb:
    """Tests for run_super_db."""

    @pytest.mark.asyncio
    async def test_lake_argument(self):
        with patch("superdb_mcp.tools.super.run_super", new=AsyncMock(return_value=SuperResult("", "", 0))) as mock_run:
            await run_super_db("ls", [], lake="/data/lake", settings=SuperSettings())

        assert mock_run.call_args.args[0] == ["db", "ls", "-lake", "/data/lake"]

    @pytest.mark.asyncio
    async def test_lake_from_settings(self):
        settings = SuperSettings(lake="/env/lake")
        with patch("superdb_mcp.tools.super.run_super", new=AsyncMock(return_value=SuperResult("", "", 0))) as mock_run:
            await run_super_db("query", ["-j", "-c", "count()"], settings=settings)

        assert mock_run.call_args.args[0] == ["db", "query", "-lake", "/env/lake", "-j", "-c", "count()"]

    @pytest.mark.asyncio
    async def test_no_lake(self):
        with patch("superdb_mcp.tools.super.run_super", new=AsyncMock(return_value=SuperResult("", "", 0))) as mock_run:
            await run_super_db("ls", [], settings=SuperSettings())

        assert mock_run.call_args.args[0] == ["db", "ls"]


class TestJsonHelpers:
    """Tests for parse_ndjson."""

    def test_parse_ndjson(self):
        assert parse_ndjson('{"a":1}\n{"a":2}\n\n') == [{"a": 1}, {"a": 2}]

    def test_parse_ndjson_empty(self):
        assert parse_ndjson("") == []

    def test_parse_ndjson_invalid(self):
        with pytest.raises(ValueError):
            parse_ndjson("{oops}")
