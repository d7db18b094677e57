"""Unit tests for the MCP server wiring."""

from unittest.mock import MagicMock

import pytest

from superdb_mcp.config.settings import LSPSettings, Settings
from superdb_mcp.lsp.context import LSPContext
from superdb_mcp.server import SERVER_NAME, SuperDBMCPServer

TOOL_NAMES = {
    "super_query",
    "super_validate",
    "super_schema",
    "super_db_list",
    "super_db_query",
    "super_db_load",
    "super_db_create_pool",
    "super_lsp_status",
    "super_complete",
    "super_docs",
}


@pytest.fixture
def server():
    return SuperDBMCPServer(Settings())


class TestSuperDBMCPServer:
    """Tests for SuperDBMCPServer."""

    def test_name(self, server):
        assert server.mcp.name == SERVER_NAME

    @pytest.mark.asyncio
    async def test_registers_all_tools(self, server):
        tools = await server.mcp.list_tools()
        assert {tool.name for tool in tools} == TOOL_NAMES

    @pytest.mark.asyncio
    async def test_query_tool_parameters(self, server):
        tools = {tool.name: tool for tool in await server.mcp.list_tools()}
        schema = tools["super_query"].inputSchema

        assert schema["required"] == ["query"]
        assert set(schema["properties"]) == {"query", "files", "data", "format", "inputFormat"}

    @pytest.mark.asyncio
    async def test_position_tool_parameters(self, server):
        tools = {tool.name: tool for tool in await server.mcp.list_tools()}

        for name in ("super_complete", "super_docs"):
            schema = tools[name].inputSchema
            assert set(schema["required"]) == {"query", "line", "character"}

    @pytest.mark.asyncio
    async def test_descriptions(self, server):
        tools = {tool.name: tool for tool in await server.mcp.list_tools()}
        assert "SUPERDB_LSP_PATH" in tools["super_complete"].description
        assert "without executing" in tools["super_validate"].description

    def test_builds_context_from_settings(self):
        settings = Settings(lsp=LSPSettings(path="/opt/superdb-lsp"))
        server = SuperDBMCPServer(settings)
        assert server.lsp_context.settings.path == "/opt/superdb-lsp"

    def test_injected_context(self):
        context = MagicMock(spec=LSPContext)
        server = SuperDBMCPServer(Settings(), lsp_context=context)
        assert server.lsp_context is context

    def test_startup_does_not_probe(self):
        """Test the language server is only probed when a tool needs it."""
        prober = MagicMock()
        context = LSPContext(LSPSettings(), prober=prober)

        SuperDBMCPServer(Settings(), lsp_context=context)

        prober.assert_not_called()
