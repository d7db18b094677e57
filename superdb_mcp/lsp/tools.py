"""
LSP Tools

Assistant-facing wrappers around the LSP client: completions, symbol
documentation and server status. Results are plain tool outputs; no
exception from the language server reaches the caller.
"""

import logging

from ..config.settings import LSP_PATH_ENV
from ..schemas.tools import (
    CompleteOutput,
    CompletionEntry,
    CursorPosition,
    DocsOutput,
    LspSetup,
    LspStatusOutput,
)
from .context import LSPContext, get_lsp_context
from .types import CompletionItem

logger = logging.getLogger(__name__)

LSP_RELEASES_URL = "https://github.com/chrismo/superdb-lsp/releases"


def _completion_entry(item: CompletionItem) -> CompletionEntry:
    return CompletionEntry(
        label=item.label,
        kind=item.kind.display_name if item.kind is not None else None,
        detail=item.detail,
        documentation=item.documentation_text,
        insert_text=item.insert_text,
    )


async def super_complete(
    query: str,
    line: int,
    character: int,
    context: LSPContext | None = None,
) -> CompleteOutput:
    """Get code completions for a query at a position."""
    context = context or get_lsp_context()
    client = context.get_client()

    if client is None:
        return CompleteOutput(
            success=False,
            lsp_available=False,
            error=context.availability.error or "LSP not available",
        )

    try:
        items = await client.get_completions(query, line, character)
    except Exception as e:
        logger.exception("super_complete failed")
        return CompleteOutput(success=False, lsp_available=True, error=str(e))

    return CompleteOutput(
        success=True,
        completions=[_completion_entry(item) for item in items],
        lsp_available=True,
    )


async def super_docs(
    query: str,
    line: int,
    character: int,
    context: LSPContext | None = None,
) -> DocsOutput:
    """Get documentation for the symbol at a position in a query."""
    context = context or get_lsp_context()
    client = context.get_client()
    position = CursorPosition(line=line, character=character)

    if client is None:
        return DocsOutput(
            success=False,
            query=query,
            position=position,
            lsp_available=False,
            error=context.availability.error or "LSP not available",
        )

    try:
        hover = await client.get_hover(query, line, character)
    except Exception as e:
        logger.exception("super_docs failed")
        return DocsOutput(
            success=False,
            query=query,
            position=position,
            lsp_available=True,
            error=str(e),
        )

    return DocsOutput(
        success=True,
        query=query,
        position=position,
        documentation=hover.contents if hover is not None else None,
        lsp_available=True,
    )


def lsp_setup_instructions() -> LspSetup:
    return LspSetup(
        recommendation="Install SuperDB LSP for enhanced query assistance",
        benefits=[
            "Better query suggestions via code completions",
            "Function and keyword documentation lookup",
            "Enhanced error diagnostics with fix suggestions",
        ],
        releases_url=LSP_RELEASES_URL,
        platforms={
            "macOS (Apple Silicon)": "superdb-lsp-darwin-arm64",
            "macOS (Intel)": "superdb-lsp-darwin-amd64",
            "Linux (x64)": "superdb-lsp-linux-amd64",
            "Linux (ARM64)": "superdb-lsp-linux-arm64",
            "Windows (x64)": "superdb-lsp-windows-amd64.exe",
        },
        install_steps=[
            "Download the appropriate binary for your platform from the releases page",
            "Make it executable: chmod +x superdb-lsp-*",
            "Move it to a location in your PATH or note its full path",
            f"Set the environment variable: export {LSP_PATH_ENV}=/path/to/superdb-lsp",
            "Add the export to your shell profile (~/.bashrc, ~/.zshrc, etc.) for persistence",
        ],
        env_var=LSP_PATH_ENV,
    )


def super_lsp_status(context: LSPContext | None = None) -> LspStatusOutput:
    """Report whether the language server is usable, with setup steps if it is not."""
    context = context or get_lsp_context()
    availability = context.availability
    return LspStatusOutput(
        available=availability.available,
        path=availability.path,
        error=availability.error,
        setup=None if availability.available else lsp_setup_instructions(),
    )
