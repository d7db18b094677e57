"""Unit tests for the query tools."""

from unittest.mock import AsyncMock, patch

import pytest

from superdb_mcp.tools.query import (
    FROM_PATH_HINT,
    SCHEMA_QUERY,
    build_query_args,
    migration_suggestions,
    parse_compile_errors,
    super_query,
    super_schema,
    super_validate,
)
from superdb_mcp.tools.super import SuperResult

RUN_SUPER = "superdb_mcp.tools.query.run_super"


def ok(stdout: str = "") -> SuperResult:
    return SuperResult(stdout=stdout, stderr="", exit_code=0)


def failed(stderr: str, exit_code: int = 1) -> SuperResult:
    return SuperResult(stdout="", stderr=stderr, exit_code=exit_code)


class TestBuildQueryArgs:
    """Tests for build_query_args."""

    def test_files(self):
        args = build_query_args("count()", files=["a.json", "b.json"])
        assert args == ["-j", "-c", "count()", "a.json", "b.json"]

    def test_inline_data(self):
        args = build_query_args("count()", data='{"a":1}')
        assert args == ["-j", "-c", "count()", "-"]

    def test_formats_and_input_format(self):
        assert build_query_args("x", files=["f"], output_format="sup")[:1] == ["-s"]
        assert build_query_args("x", files=["f"], output_format="csv")[:2] == ["-f", "csv"]
        assert build_query_args("x", files=["f"], output_format="table", input_format="parquet") == [
            "-f", "table", "-i", "parquet", "-c", "x", "f",
        ]

    def test_query_only(self):
        assert build_query_args("values 1") == ["-j", "-c", "values 1"]


class TestMigrationSuggestions:
    """Tests for migration_suggestions."""

    def test_yield(self):
        suggestions = migration_suggestions("parse error at 'yield'", "yield 1")
        assert any('"values"' in s for s in suggestions)

    def test_over(self):
        suggestions = migration_suggestions("unknown operator over", "over a")
        assert any('"unnest"' in s for s in suggestions)

    def test_func(self):
        suggestions = migration_suggestions("unexpected func", "func f(x): (x)")
        assert any('"fn"' in s for s in suggestions)

    def test_regex(self):
        suggestions = migration_suggestions("syntax error near /foo.*/", "grep(/foo.*/)")
        assert any("Inline regex" in s for s in suggestions)

    def test_string_concatenation(self):
        suggestions = migration_suggestions("type mismatch: string + string", "values a + b")
        assert any("concat()" in s for s in suggestions)

    def test_operator_parentheses(self):
        suggestions = migration_suggestions("parse error", "op double(x): (x*2)")
        assert any("op name a, b:" in s for s in suggestions)

    def test_missing_file_with_match(self):
        suggestions = migration_suggestions(
            "file does not exist: data.json",
            "from data.json | count()",
            files=["/home/me/data.json"],
        )
        assert suggestions == [
            'The file "data.json" was not found. Use the absolute path in your FROM clause: FROM "/home/me/data.json"'
        ]

    def test_missing_file_without_match(self):
        suggestions = migration_suggestions(
            "file does not exist: other.json",
            "from other.json",
            files=["/home/me/data.json"],
        )
        assert suggestions == [FROM_PATH_HINT]

    def test_no_suggestions(self):
        assert migration_suggestions("divide by zero", "values 1/0") == []


class TestSuperQuery:
    """Tests for super_query."""

    @pytest.mark.asyncio
    async def test_json_rows(self):
        with patch(RUN_SUPER, new=AsyncMock(return_value=ok('{"a":1}\n{"a":2}\n'))) as mock_run:
            result = await super_query("values {a:1},{a:2}", files=["x.json"])

        assert result.success is True
        assert result.data == [{"a": 1}, {"a": 2}]
        assert result.row_count == 2
        assert mock_run.call_args.kwargs["stdin"] is None

    @pytest.mark.asyncio
    async def test_inline_data_goes_to_stdin(self):
        with patch(RUN_SUPER, new=AsyncMock(return_value=ok('{"n":1}\n'))) as mock_run:
            await super_query("count()", data='{"a":1}')

        assert mock_run.call_args.args[0][-1] == "-"
        assert mock_run.call_args.kwargs["stdin"] == '{"a":1}'

    @pytest.mark.asyncio
    async def test_raw_formats(self):
        with patch(RUN_SUPER, new=AsyncMock(return_value=ok("a\n1\n"))):
            result = await super_query("values {a:1}", data="", format="csv")

        assert result.success is True
        assert result.raw == "a\n1\n"
        assert result.data is None

    @pytest.mark.asyncio
    async def test_unparseable_json_falls_back_to_raw(self):
        with patch(RUN_SUPER, new=AsyncMock(return_value=ok("not json\n"))):
            result = await super_query("x", files=["f"])

        assert result.success is True
        assert result.raw == "not json\n"

    @pytest.mark.asyncio
    async def test_failure_with_suggestions(self):
        with patch(RUN_SUPER, new=AsyncMock(return_value=failed("parse error near yield"))):
            result = await super_query("yield 1", files=["f"])

        assert result.success is False
        assert result.error == "parse error near yield"
        assert result.suggestions

    @pytest.mark.asyncio
    async def test_failure_payload(self):
        with patch(RUN_SUPER, new=AsyncMock(return_value=failed("", exit_code=1))):
            payload = (await super_query("x", files=["f"])).to_result()

        assert payload == {
            "success": False,
            "error": "Query failed with no error message",
            "rowCount": 0,
        }

    @pytest.mark.asyncio
    async def test_unsupported_format(self):
        """Test an unknown output format fails without running super."""
        with patch(RUN_SUPER, new=AsyncMock()) as mock_run:
            result = await super_query("count()", data="{}", format="xml")

        assert result.success is False
        assert result.error == "Unsupported output format: xml"
        mock_run.assert_not_awaited()


class TestParseCompileErrors:
    """Tests for parse_compile_errors."""

    def test_position(self):
        diagnostics = parse_compile_errors("syntax error at line 1, column 12:\nfrom x | yield 1\n           ~")

        assert len(diagnostics) == 1
        assert diagnostics[0].line == 1
        assert diagnostics[0].column == 12

    def test_multiple_blocks(self):
        diagnostics = parse_compile_errors("first problem\n\nsecond at line 2, column 3")

        assert [d.message for d in diagnostics] == ["first problem", "second at line 2, column 3"]
        assert diagnostics[0].line is None
        assert diagnostics[1].line == 2

    def test_empty(self):
        assert parse_compile_errors("") == []


class TestSuperValidate:
    """Tests for super_validate."""

    @pytest.mark.asyncio
    async def test_valid(self):
        with patch(RUN_SUPER, new=AsyncMock(return_value=ok("from x | count()\n"))) as mock_run:
            result = await super_validate("from x | count()")

        assert result.success is True
        assert result.valid is True
        assert result.diagnostics == []
        assert mock_run.call_args.args[0] == ["compile", "from x | count()"]

    @pytest.mark.asyncio
    async def test_invalid(self):
        error = "unexpected func at line 1, column 1"
        with patch(RUN_SUPER, new=AsyncMock(return_value=failed(error))):
            result = await super_validate("func f(x): (x)")

        assert result.success is True
        assert result.valid is False
        assert result.error == error
        assert result.diagnostics[0].column == 1
        assert any('"fn"' in s for s in result.suggestions)


class TestSuperSchema:
    """Tests for super_schema."""

    @pytest.mark.asyncio
    async def test_shapes(self):
        stdout = (
            '{"typeof":"<{a:int64}>","count":3,"any":{"a":1}}\n'
            '{"typeof":"<{b:string}>","count":1,"any":{"b":"x"}}\n'
        )
        with patch(RUN_SUPER, new=AsyncMock(return_value=ok(stdout))) as mock_run:
            result = await super_schema("data.json")

        assert result.success is True
        assert result.total_records == 4
        assert [s.type for s in result.shapes] == ["<{a:int64}>", "<{b:string}>"]
        assert result.shapes[0].example == {"a": 1}
        assert mock_run.call_args.args[0] == ["-j", "-c", SCHEMA_QUERY, "data.json"]
        assert result.to_result()["totalRecords"] == 4

    @pytest.mark.asyncio
    async def test_missing_file(self):
        with patch(RUN_SUPER, new=AsyncMock(return_value=failed("file does not exist: data.json"))):
            result = await super_schema("data.json")

        assert result.success is False
        assert "does not exist" in result.error

    @pytest.mark.asyncio
    async def test_unexpected_output(self):
        with patch(RUN_SUPER, new=AsyncMock(return_value=ok('{"unexpected":true}\n'))):
            result = await super_schema("data.json")

        assert result.success is False
        assert result.error.startswith("Failed to parse output")
