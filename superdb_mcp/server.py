"""
MCP server exposing SuperDB to AI assistants.

Every tool takes structured arguments and returns a JSON object with
``success`` and ``error`` fields, so query text never passes through a
shell. Runs over stdio.
"""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from . import __version__
from .config.settings import Settings, get_settings
from .lsp.context import LSPContext
from .lsp.tools import super_complete, super_docs, super_lsp_status
from .tools.db import super_db_create_pool, super_db_list, super_db_load, super_db_query
from .tools.query import super_query, super_schema, super_validate

logger = logging.getLogger(__name__)

SERVER_NAME = "superdb-mcp"


class SuperDBMCPServer:
    """The MCP server: owns settings and the LSP context, and registers the tools."""

    def __init__(self, settings: Settings | None = None, lsp_context: LSPContext | None = None):
        self.settings = settings or get_settings()
        self.lsp_context = lsp_context or LSPContext(self.settings.lsp)
        self._mcp = FastMCP(SERVER_NAME)
        self._register_tools()

    @property
    def mcp(self) -> FastMCP:
        return self._mcp

    def _register_tools(self) -> None:
        """Register all MCP tools."""
        engine = self.settings.engine

        @self._mcp.tool(name="super_query")
        async def super_query_tool(
            query: str,
            files: list[str] | None = None,
            data: str | None = None,
            format: str = "json",
            inputFormat: str | None = None,
        ) -> dict[str, Any]:
            """Execute a SuperDB/SuperSQL query on data files. Returns structured results without shell escaping issues.

            Args:
                query: The SuperSQL query to execute
                files: File paths to query (JSON, Parquet, CSV, SUP, etc.)
                data: Inline data to query (alternative to files)
                format: Output format: json, sup, csv or table (default: json)
                inputFormat: Force input format if auto-detection fails
            """
            result = await super_query(query, files, data, format, inputFormat, settings=engine)
            return result.to_result()

        @self._mcp.tool(name="super_validate")
        async def super_validate_tool(query: str) -> dict[str, Any]:
            """Validate SuperSQL query syntax without executing. Returns diagnostics with position info and migration suggestions for common zq-to-SuperDB errors.

            Args:
                query: The SuperSQL query to validate
            """
            result = await super_validate(query, settings=engine)
            return result.to_result()

        @self._mcp.tool(name="super_schema")
        async def super_schema_tool(file: str) -> dict[str, Any]:
            """Inspect the schema/types of a data file by finding all unique shapes (record types) with counts and examples.

            Args:
                file: Path to the data file
            """
            result = await super_schema(file, settings=engine)
            return result.to_result()

        @self._mcp.tool(name="super_db_list")
        async def super_db_list_tool(lake: str | None = None) -> dict[str, Any]:
            """List all pools in a SuperDB database.

            Args:
                lake: Lake path (default: uses SUPER_DB_LAKE env or ~/.super)
            """
            result = await super_db_list(lake, settings=engine)
            return result.to_result()

        @self._mcp.tool(name="super_db_query")
        async def super_db_query_tool(
            query: str,
            pool: str | None = None,
            lake: str | None = None,
            format: str = "json",
        ) -> dict[str, Any]:
            """Query data from a SuperDB database pool.

            Args:
                query: The SuperSQL query to execute
                pool: Pool name (can also use FROM in query)
                lake: Lake path (default: uses SUPER_DB_LAKE env or ~/.super)
                format: Output format: json, sup, csv or table (default: json)
            """
            result = await super_db_query(query, pool, lake, format, settings=engine)
            return result.to_result()

        @self._mcp.tool(name="super_db_load")
        async def super_db_load_tool(
            pool: str,
            files: list[str] | None = None,
            data: str | None = None,
            lake: str | None = None,
        ) -> dict[str, Any]:
            """Load data into a SuperDB database pool.

            Args:
                pool: Pool name to load data into
                files: File paths to load
                data: Inline data to load (alternative to files)
                lake: Lake path (default: uses SUPER_DB_LAKE env or ~/.super)
            """
            result = await super_db_load(pool, files, data, lake, settings=engine)
            return result.to_result()

        @self._mcp.tool(name="super_db_create_pool")
        async def super_db_create_pool_tool(
            name: str,
            orderBy: str | None = None,
            lake: str | None = None,
        ) -> dict[str, Any]:
            """Create a new pool in a SuperDB database.

            Args:
                name: Pool name
                orderBy: Pool key to order by, e.g. "ts:desc"
                lake: Lake path (default: uses SUPER_DB_LAKE env or ~/.super)
            """
            result = await super_db_create_pool(name, orderBy, lake, settings=engine)
            return result.to_result()

        @self._mcp.tool(name="super_lsp_status")
        def super_lsp_status_tool() -> dict[str, Any]:
            """Check if the SuperDB LSP is installed and get installation instructions if not. The LSP enables code completions and documentation lookup for SuperSQL queries."""
            return super_lsp_status(self.lsp_context).model_dump(mode="json")

        @self._mcp.tool(name="super_complete")
        async def super_complete_tool(query: str, line: int, character: int) -> dict[str, Any]:
            """Get code completions for a SuperSQL query at a position. Requires SUPERDB_LSP_PATH to be set.

            Args:
                query: The SuperSQL query text
                line: Line number (0-based)
                character: Character offset (0-based)
            """
            result = await super_complete(query, line, character, self.lsp_context)
            return result.to_result()

        @self._mcp.tool(name="super_docs")
        async def super_docs_tool(query: str, line: int, character: int) -> dict[str, Any]:
            """Get documentation for a symbol at a position in a SuperSQL query. Requires SUPERDB_LSP_PATH to be set.

            Args:
                query: The SuperSQL query text
                line: Line number (0-based)
                character: Character offset (0-based)
            """
            result = await super_docs(query, line, character, self.lsp_context)
            return result.to_result()

    def run(self) -> None:
        """Serve over stdio until the client disconnects."""
        logger.info("SuperDB MCP server %s running on stdio", __version__)
        self._mcp.run()
