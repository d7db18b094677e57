"""Pydantic schemas for tool outputs."""

from .tools import (
    BaseToolOutput,
    CompleteOutput,
    CompletionEntry,
    CursorPosition,
    DbListOutput,
    DbMessageOutput,
    DbQueryOutput,
    DocsOutput,
    LspSetup,
    LspStatusOutput,
    OutputFormat,
    QueryDiagnostic,
    QueryOutput,
    SchemaOutput,
    ShapeInfo,
    ValidateOutput,
)

__all__ = [
    "OutputFormat",
    "BaseToolOutput",
    "QueryOutput",
    "QueryDiagnostic",
    "ValidateOutput",
    "ShapeInfo",
    "SchemaOutput",
    "DbListOutput",
    "DbQueryOutput",
    "DbMessageOutput",
    "CompletionEntry",
    "CompleteOutput",
    "CursorPosition",
    "DocsOutput",
    "LspSetup",
    "LspStatusOutput",
]
