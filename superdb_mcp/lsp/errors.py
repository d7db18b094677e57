"""Exceptions raised by the LSP client."""

from typing import Any


class LSPError(Exception):
    """Base class for every failure of an LSP session."""


class LSPConfigurationError(LSPError):
    """No language server executable is configured."""


class LSPSpawnError(LSPError):
    """The operating system could not start the language server."""

    def __init__(self, path: str, original_error: OSError):
        self.path = path
        self.original_error = original_error
        super().__init__(f"LSP process error: {original_error}")


class LSPTimeoutError(LSPError):
    """No matching response arrived before the session deadline."""

    def __init__(self, method: str, timeout: float):
        self.method = method
        self.timeout = timeout
        super().__init__(f"LSP request {method} timed out after {timeout:g}s")


class LSPProtocolError(LSPError):
    """The server answered the request with an error object."""

    def __init__(self, code: int, message: str, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(message)


class LSPProcessExitedError(LSPError):
    """The server exited before answering the request."""

    def __init__(self, exit_code: int | None, stderr: str = ""):
        self.exit_code = exit_code
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        if exit_code is None:
            super().__init__(f"LSP server closed its output before responding{detail}")
        else:
            super().__init__(f"LSP process exited with code {exit_code}{detail}")
