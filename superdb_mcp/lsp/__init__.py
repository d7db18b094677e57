"""
LSP (Language Server Protocol) Module for superdb-mcp

This module drives the optional SuperDB language server for:
- Code completion: Get suggestions while writing a query
- Hover information: Get documentation for functions and keywords

Each request runs in its own short-lived server process.
"""

from .client import LSPClient, LSPClientConfig
from .context import LSPContext, get_lsp_context, reset_lsp_context
from .errors import (
    LSPConfigurationError,
    LSPError,
    LSPProcessExitedError,
    LSPProtocolError,
    LSPSpawnError,
    LSPTimeoutError,
)
from .framing import MessageDecoder, encode_message
from .probe import LSPAvailability, check_lsp_availability, get_lsp_path
from .session import (
    CAPABILITY_REQUEST_ID,
    INITIALIZE_REQUEST_ID,
    LANGUAGE_ID,
    VIRTUAL_DOCUMENT_URI,
    LSPSession,
    SessionState,
)
from .types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    Diagnostic,
    DiagnosticSeverity,
    Hover,
    MarkupContent,
    Position,
    Range,
    normalize_completion_result,
    normalize_hover_result,
    parse_message,
)

__all__ = [
    # Client
    "LSPClient",
    "LSPClientConfig",
    "LSPContext",
    "get_lsp_context",
    "reset_lsp_context",
    # Session
    "LSPSession",
    "SessionState",
    "CAPABILITY_REQUEST_ID",
    "INITIALIZE_REQUEST_ID",
    "LANGUAGE_ID",
    "VIRTUAL_DOCUMENT_URI",
    # Framing
    "MessageDecoder",
    "encode_message",
    # Availability
    "LSPAvailability",
    "check_lsp_availability",
    "get_lsp_path",
    # Errors
    "LSPError",
    "LSPConfigurationError",
    "LSPSpawnError",
    "LSPTimeoutError",
    "LSPProtocolError",
    "LSPProcessExitedError",
    # Types
    "Position",
    "Range",
    "MarkupContent",
    "Diagnostic",
    "DiagnosticSeverity",
    "CompletionItem",
    "CompletionItemKind",
    "CompletionList",
    "Hover",
    "normalize_completion_result",
    "normalize_hover_result",
    "parse_message",
]
