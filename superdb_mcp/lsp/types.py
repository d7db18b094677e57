"""
LSP Type Definitions

This module defines the subset of Language Server Protocol types used by the
SuperDB bridge: positions, ranges, completion items, hover results, and the
JSON-RPC message envelope exchanged with the server.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Union

JSONRPC_VERSION = "2.0"


class DiagnosticSeverity(IntEnum):
    """Severity of a diagnostic."""
    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


class CompletionItemKind(IntEnum):
    """Kind of a completion item."""
    TEXT = 1
    METHOD = 2
    FUNCTION = 3
    CONSTRUCTOR = 4
    FIELD = 5
    VARIABLE = 6
    CLASS = 7
    INTERFACE = 8
    MODULE = 9
    PROPERTY = 10
    UNIT = 11
    VALUE = 12
    ENUM = 13
    KEYWORD = 14
    SNIPPET = 15
    COLOR = 16
    FILE = 17
    REFERENCE = 18
    FOLDER = 19
    ENUM_MEMBER = 20
    CONSTANT = 21
    STRUCT = 22
    EVENT = 23
    OPERATOR = 24
    TYPE_PARAMETER = 25

    @property
    def display_name(self) -> str:
        """camelCase name, as the protocol spells it."""
        head, *rest = self.name.lower().split("_")
        return head + "".join(part.capitalize() for part in rest)


@dataclass
class Position:
    """Position in a text document (0-indexed)."""
    line: int
    character: int

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}

    @classmethod
    def from_dict(cls, data: dict[str, int]) -> "Position":
        return cls(line=data["line"], character=data["character"])


@dataclass
class Range:
    """A range in a text document."""
    start: Position
    end: Position

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Range":
        return cls(
            start=Position.from_dict(data["start"]),
            end=Position.from_dict(data["end"]),
        )


def _optional_range(data: Any) -> Range | None:
    """Parse a range, or None if it is missing or malformed."""
    try:
        return Range.from_dict(data) if data else None
    except (KeyError, TypeError, ValueError):
        return None


@dataclass
class MarkupContent:
    """Structured documentation (``plaintext`` or ``markdown``)."""
    kind: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MarkupContent":
        return cls(kind=str(data.get("kind", "plaintext")), value=str(data.get("value", "")))


def markup_to_text(value: Any) -> str | None:
    """
    Flatten the documentation shapes a server may send into plain text.

    Accepts a string, a ``MarkupContent``/``MarkedString`` object, or a
    list of either. Returns None for anything else.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, MarkupContent):
        return value.value
    if isinstance(value, dict):
        if "value" in value:
            return str(value["value"])
        return None
    if isinstance(value, list):
        parts = [text for text in (markup_to_text(item) for item in value) if text]
        return "\n".join(parts)
    return None


@dataclass
class Diagnostic:
    """A diagnostic (error, warning, etc.)."""
    range: Range
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "range": self.range.to_dict(),
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.source is not None:
            result["source"] = self.source
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Diagnostic":
        return cls(
            range=Range.from_dict(data["range"]),
            message=data["message"],
            severity=DiagnosticSeverity(data.get("severity", 1)),
            source=data.get("source"),
        )


@dataclass
class CompletionItem:
    """A completion item."""
    label: str
    kind: CompletionItemKind | None = None
    detail: str | None = None
    documentation: str | MarkupContent | None = None
    insert_text: str | None = None

    @property
    def documentation_text(self) -> str | None:
        return markup_to_text(self.documentation)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"label": self.label}
        if self.kind is not None:
            result["kind"] = self.kind.value
        if self.detail is not None:
            result["detail"] = self.detail
        if isinstance(self.documentation, MarkupContent):
            result["documentation"] = self.documentation.to_dict()
        elif self.documentation is not None:
            result["documentation"] = self.documentation
        if self.insert_text is not None:
            result["insertText"] = self.insert_text
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompletionItem":
        kind = None
        try:
            if data.get("kind") is not None:
                kind = CompletionItemKind(data["kind"])
        except (TypeError, ValueError):
            kind = None

        documentation = data.get("documentation")
        if isinstance(documentation, dict):
            documentation = MarkupContent.from_dict(documentation)
        elif documentation is not None and not isinstance(documentation, str):
            documentation = None

        return cls(
            label=str(data.get("label", "")),
            kind=kind,
            detail=data.get("detail"),
            documentation=documentation,
            insert_text=data.get("insertText"),
        )


@dataclass
class CompletionList:
    """The ``{isIncomplete, items}`` form of a completion result."""
    items: list[CompletionItem] = field(default_factory=list)
    is_incomplete: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompletionList":
        items = data.get("items")
        if not isinstance(items, list):
            items = []
        return cls(
            items=[CompletionItem.from_dict(item) for item in items if isinstance(item, dict)],
            is_incomplete=bool(data.get("isIncomplete", False)),
        )


# textDocument/completion may answer with a bare item array or a CompletionList
CompletionResult = Union[list[CompletionItem], CompletionList, None]


def parse_completion_result(result: Any) -> CompletionResult:
    """Turn a raw completion payload into one of the CompletionResult variants."""
    if isinstance(result, list):
        return [CompletionItem.from_dict(item) for item in result if isinstance(item, dict)]
    if isinstance(result, dict) and "items" in result:
        return CompletionList.from_dict(result)
    return None


def normalize_completion_result(result: Any) -> list[CompletionItem]:
    """Flatten any completion result shape into a list of items."""
    parsed = parse_completion_result(result)
    if isinstance(parsed, CompletionList):
        return parsed.items
    if parsed is None:
        return []
    return parsed


@dataclass
class Hover:
    """Hover information."""
    contents: str
    range: Range | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"contents": self.contents}
        if self.range is not None:
            result["range"] = self.range.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Hover":
        return cls(
            contents=markup_to_text(data.get("contents")) or "",
            range=_optional_range(data.get("range")),
        )


def normalize_hover_result(result: Any) -> Hover | None:
    """Map a raw hover payload to a Hover, keeping null as None."""
    if not isinstance(result, dict):
        return None
    return Hover.from_dict(result)


@dataclass
class TextDocumentIdentifier:
    """Identifies a text document."""
    uri: str

    def to_dict(self) -> dict[str, str]:
        return {"uri": self.uri}


@dataclass
class TextDocumentItem:
    """An item to transfer a text document from client to server."""
    uri: str
    language_id: str
    version: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "uri": self.uri,
            "languageId": self.language_id,
            "version": self.version,
            "text": self.text,
        }


@dataclass
class TextDocumentPositionParams:
    """Document plus cursor, the params shape of completion and hover."""
    text_document: TextDocumentIdentifier
    position: Position

    def to_dict(self) -> dict[str, Any]:
        return {
            "textDocument": self.text_document.to_dict(),
            "position": self.position.to_dict(),
        }


# =============================================================================
# JSON-RPC messages
# =============================================================================


@dataclass
class ResponseError:
    """The error member of a failed response."""
    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResponseError":
        try:
            code = int(data.get("code", 0))
        except (TypeError, ValueError):
            code = 0
        return cls(
            code=code,
            message=str(data.get("message", "Unknown error")),
            data=data.get("data"),
        )


@dataclass
class RequestMessage:
    """A request; the server must answer with a response carrying the same id."""
    id: int | str
    method: str
    params: Any = None

    def to_dict(self) -> dict[str, Any]:
        message: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": self.id, "method": self.method}
        if self.params is not None:
            message["params"] = self.params
        return message


@dataclass
class NotificationMessage:
    """A notification; no response is expected."""
    method: str
    params: Any = None

    def to_dict(self) -> dict[str, Any]:
        message: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": self.method}
        if self.params is not None:
            message["params"] = self.params
        return message


@dataclass
class ResponseMessage:
    """A response to a request, holding either a result or an error."""
    id: int | str | None
    result: Any = None
    error: ResponseError | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        message: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": self.id}
        if self.error is not None:
            message["error"] = self.error.to_dict()
        else:
            message["result"] = self.result
        return message


ProtocolMessage = Union[RequestMessage, NotificationMessage, ResponseMessage]


def parse_message(data: Any) -> ProtocolMessage | None:
    """Classify a decoded JSON-RPC body. Returns None if it is none of the three kinds."""
    if not isinstance(data, dict):
        return None

    method = data.get("method")
    has_id = "id" in data and data["id"] is not None

    if isinstance(method, str):
        if has_id:
            return RequestMessage(id=data["id"], method=method, params=data.get("params"))
        return NotificationMessage(method=method, params=data.get("params"))

    if "result" in data or "error" in data:
        error_data = data.get("error")
        return ResponseMessage(
            id=data.get("id"),
            result=data.get("result"),
            error=ResponseError.from_dict(error_data) if isinstance(error_data, dict) else None,
        )

    return None
