"""
Tool Schemas for superdb-mcp

This module defines the Pydantic schemas returned by every MCP tool:
- Query tools: run, validate and inspect SuperSQL queries
- Database tools: list, query, load and create pools
- LSP tools: completions, documentation and server status
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    """Output formats understood by ``super``."""
    JSON = "json"
    SUP = "sup"
    CSV = "csv"
    TABLE = "table"


# =============================================================================
# Base Tool Schemas
# =============================================================================


class BaseToolOutput(BaseModel):
    """Base class for all tool outputs."""
    success: bool
    error: str | None = None

    def to_result(self) -> dict[str, Any]:
        """JSON-ready dict for the MCP response; unset optionals are dropped, ``error`` is kept."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        data.setdefault("error", None)
        return data


# =============================================================================
# Query Tool Schemas
# =============================================================================


class QueryOutput(BaseToolOutput):
    """Result of running a query."""
    data: list[Any] | None = None
    row_count: int = Field(default=0, serialization_alias="rowCount")
    raw: str | None = None
    suggestions: list[str] | None = None


class QueryDiagnostic(BaseModel):
    """A compile error located in the query text (1-indexed)."""
    message: str
    line: int | None = None
    column: int | None = None


class ValidateOutput(BaseToolOutput):
    """Result of validating a query without running it."""
    valid: bool
    diagnostics: list[QueryDiagnostic] = Field(default_factory=list)
    suggestions: list[str] | None = None


class ShapeInfo(BaseModel):
    """One distinct record type found in a file."""
    type: str
    count: int
    example: Any = None


class SchemaOutput(BaseToolOutput):
    """Unique shapes of a data file."""
    shapes: list[ShapeInfo] = Field(default_factory=list)
    total_records: int = Field(default=0, serialization_alias="totalRecords")


# =============================================================================
# Database Tool Schemas
# =============================================================================


class DbListOutput(BaseToolOutput):
    pools: list[str] = Field(default_factory=list)


class DbQueryOutput(QueryOutput):
    pass


class DbMessageOutput(BaseToolOutput):
    """Outcome of a db command that only reports a message (load, create)."""
    message: str = ""


# =============================================================================
# LSP Tool Schemas
# =============================================================================


class CompletionEntry(BaseModel):
    """A completion suggestion, flattened for the assistant."""
    label: str
    kind: str | None = None
    detail: str | None = None
    documentation: str | None = None
    insert_text: str | None = Field(default=None, serialization_alias="insertText")


class CompleteOutput(BaseToolOutput):
    completions: list[CompletionEntry] = Field(default_factory=list)
    lsp_available: bool = False


class CursorPosition(BaseModel):
    line: int
    character: int


class DocsOutput(BaseToolOutput):
    query: str
    position: CursorPosition
    documentation: str | None = None
    lsp_available: bool = False


class LspSetup(BaseModel):
    """Installation instructions shown when the language server is missing."""
    recommendation: str
    benefits: list[str]
    releases_url: str
    platforms: dict[str, str]
    install_steps: list[str]
    env_var: str


class LspStatusOutput(BaseModel):
    available: bool
    path: str | None = None
    error: str | None = None
    setup: LspSetup | None = None
