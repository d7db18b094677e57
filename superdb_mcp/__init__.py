"""
superdb-mcp: SuperDB tools for AI assistants over the Model Context Protocol

Exposes the ``super`` query engine and the optional SuperDB language server
as structured MCP tools, so query text never goes through shell escaping.

Core Components:
- lsp: one-shot Language Server Protocol client (completions, hover)
- tools: query engine runner, query and database tools
- schemas: Pydantic schemas for tool outputs
- config: environment settings and logging
- server: FastMCP stdio server

Usage:
    from superdb_mcp.lsp import LSPClient
    items = await LSPClient().get_completions("from data.json | c", 0, 18)
"""

__version__ = "0.51231.3"

from .config import Settings, get_settings, setup_logging
from .lsp import (
    LSPClient,
    LSPClientConfig,
    LSPContext,
    LSPError,
    check_lsp_availability,
    get_lsp_context,
    reset_lsp_context,
)

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "setup_logging",
    "LSPClient",
    "LSPClientConfig",
    "LSPContext",
    "LSPError",
    "check_lsp_availability",
    "get_lsp_context",
    "reset_lsp_context",
]
