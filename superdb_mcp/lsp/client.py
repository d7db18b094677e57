"""
LSP Client Implementation

This module provides a client for the SuperDB language server. Every
capability call runs in a fresh one-shot session (see ``session.py``), so
the client itself holds only configuration.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ..config.settings import LSPSettings
from .errors import LSPConfigurationError
from .probe import get_lsp_path
from .session import (
    DEFAULT_TIMEOUT,
    LANGUAGE_ID,
    VIRTUAL_DOCUMENT_URI,
    LSPSession,
)
from .types import (
    CompletionItem,
    Diagnostic,
    Hover,
    Position,
    TextDocumentIdentifier,
    TextDocumentPositionParams,
    normalize_completion_result,
    normalize_hover_result,
)

logger = logging.getLogger(__name__)


@dataclass
class LSPClientConfig:
    """Configuration for the LSP client."""
    lsp_path: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT
    wait_for_initialize: bool = False
    document_uri: str = VIRTUAL_DOCUMENT_URI
    language_id: str = LANGUAGE_ID

    @classmethod
    def from_settings(cls, settings: LSPSettings) -> "LSPClientConfig":
        return cls(
            lsp_path=settings.path,
            timeout_seconds=settings.timeout_seconds,
            wait_for_initialize=settings.wait_for_initialize,
        )


class LSPClient:
    """
    Language Server Protocol client for SuperSQL queries.

    Spawns the server once per request. Completion and hover never raise:
    failures are logged and reported as an empty list or None.
    """

    def __init__(self, config: LSPClientConfig | None = None):
        self.config = config or LSPClientConfig()
        lsp_path = self.config.lsp_path or get_lsp_path()
        if not lsp_path:
            raise LSPConfigurationError(
                "LSP path not configured. Set SUPERDB_LSP_PATH environment variable."
            )
        self.lsp_path = lsp_path
        self.timeout = self.config.timeout_seconds

    def _new_session(self) -> LSPSession:
        return LSPSession(
            self.lsp_path,
            timeout=self.timeout,
            wait_for_initialize=self.config.wait_for_initialize,
            document_uri=self.config.document_uri,
            language_id=self.config.language_id,
        )

    def _position_params(self, line: int, character: int) -> dict[str, Any]:
        return TextDocumentPositionParams(
            text_document=TextDocumentIdentifier(uri=self.config.document_uri),
            position=Position(line=line, character=character),
        ).to_dict()

    async def send_request(self, method: str, params: Any, query: str) -> Any:
        """
        Open ``query`` as the virtual document and send one request.

        Raises an ``LSPError`` subclass on any session failure.
        """
        return await self._new_session().request(method, params, query)

    async def get_completions(self, query: str, line: int, character: int) -> list[CompletionItem]:
        """Get completion items at a position. Returns [] on any failure."""
        try:
            result = await self.send_request(
                "textDocument/completion",
                self._position_params(line, character),
                query,
            )
            return normalize_completion_result(result)
        except Exception as e:
            logger.warning("LSP completion error: %s", e)
            return []

    async def get_hover(self, query: str, line: int, character: int) -> Hover | None:
        """Get hover information at a position. Returns None on any failure."""
        try:
            result = await self.send_request(
                "textDocument/hover",
                self._position_params(line, character),
                query,
            )
            return normalize_hover_result(result)
        except Exception as e:
            logger.warning("LSP hover error: %s", e)
            return None

    async def get_diagnostics(self, query: str) -> list[Diagnostic]:
        """
        Placeholder; always returns [].

        Servers push diagnostics as notifications after didOpen, which a
        one-shot session tears down before they arrive. Supporting them
        needs a long-lived session with a background reader that routes
        responses by id and notifications by method.
        """
        return []

    def __repr__(self) -> str:
        return f"<LSPClient: {self.lsp_path}>"
