"""
LSP Message Framing

Encodes and decodes the base protocol framing used by language servers:

    Content-Length: <N>\\r\\n
    \\r\\n
    <N bytes of UTF-8 JSON>

Decoding is incremental. Bytes are fed as they arrive from the server and
every complete message is handed back; partial frames stay buffered.
"""

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

HEADER_ENCODING = "ascii"
CONTENT_ENCODING = "utf-8"

# Content-Length, then any further header lines, then the blank line
_HEADER_RE = re.compile(
    rb"Content-Length:[ \t]*(\d+)[ \t]*\r\n(?:[A-Za-z0-9-]+:[^\r\n]*\r\n)*\r\n",
    re.IGNORECASE,
)


def encode_message(message: dict[str, Any]) -> bytes:
    """Serialize a JSON-RPC message into a framed byte string."""
    body = json.dumps(message, separators=(",", ":"), ensure_ascii=False).encode(CONTENT_ENCODING)
    header = f"Content-Length: {len(body)}\r\n\r\n".encode(HEADER_ENCODING)
    return header + body


class MessageDecoder:
    """
    Incremental decoder for Content-Length framed messages.

    Never blocks and never raises on bad input: text before a header is
    ignored, and a body that is not a JSON object is dropped.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of bytes buffered but not yet consumed."""
        return len(self._buffer)

    def feed(self, data: bytes) -> list[dict[str, Any]]:
        """Append bytes and return every message that is now complete."""
        if data:
            self._buffer.extend(data)
        return self.decode()

    def decode(self) -> list[dict[str, Any]]:
        """Extract all complete messages from the buffer, in order."""
        messages: list[dict[str, Any]] = []

        while True:
            match = _HEADER_RE.search(self._buffer)
            if match is None:
                break

            length = int(match.group(1))
            start = match.end()
            end = start + length
            if len(self._buffer) < end:
                break

            body = bytes(self._buffer[start:end])
            del self._buffer[:end]

            message = self._parse_body(body)
            if message is not None:
                messages.append(message)

        return messages

    def clear(self) -> None:
        self._buffer.clear()

    @staticmethod
    def _parse_body(body: bytes) -> dict[str, Any] | None:
        try:
            message = json.loads(body.decode(CONTENT_ENCODING))
        except (UnicodeDecodeError, ValueError) as e:
            logger.debug("Skipping undecodable LSP frame (%d bytes): %s", len(body), e)
            return None

        if not isinstance(message, dict):
            logger.debug("Skipping non-object LSP frame: %r", message)
            return None

        return message
