"""
One-shot LSP session.

Each session spawns the language server, performs the handshake, issues a
single capability request, waits for the matching response and tears the
process down again. Sessions are never reused; concurrent calls simply run
as independent sessions, each with its own process and deadline.
"""

import asyncio
import logging
import os
import time
from collections import deque
from enum import Enum
from typing import Any

from .errors import (
    LSPProcessExitedError,
    LSPProtocolError,
    LSPSpawnError,
    LSPTimeoutError,
)
from .framing import MessageDecoder, encode_message
from .types import (
    NotificationMessage,
    RequestMessage,
    ResponseMessage,
    TextDocumentItem,
    parse_message,
)

logger = logging.getLogger(__name__)

VIRTUAL_DOCUMENT_URI = "file:///virtual/query.spq"
LANGUAGE_ID = "spq"

INITIALIZE_REQUEST_ID = 1
# Fixed id of the one capability request; never shared with initialize
CAPABILITY_REQUEST_ID = 3

DEFAULT_TIMEOUT = 5.0
READ_CHUNK_SIZE = 65536
TERMINATE_GRACE_SECONDS = 1.0


class SessionState(str, Enum):
    """Lifecycle of a session. The last four are terminal."""
    SPAWNED = "spawned"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"
    AWAITING_RESPONSE = "awaiting_response"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    PROCESS_ERROR = "process_error"
    EXITED_EARLY = "exited_early"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset({
    SessionState.COMPLETED,
    SessionState.TIMED_OUT,
    SessionState.PROCESS_ERROR,
    SessionState.EXITED_EARLY,
})


class LSPSession:
    """
    A single capability round trip against a language server.

    The handshake is pipelined by default: initialize, initialized and
    didOpen are written back to back, followed by the capability request,
    without waiting for the initialize response. Pass
    ``wait_for_initialize=True`` for servers that reject requests sent
    before the initialize response.

    Usage:
        session = LSPSession("/usr/local/bin/superdb-lsp", timeout=5.0)
        result = await session.request("textDocument/hover", params, query)
    """

    def __init__(
        self,
        server_path: str,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        wait_for_initialize: bool = False,
        document_uri: str = VIRTUAL_DOCUMENT_URI,
        language_id: str = LANGUAGE_ID,
    ):
        self.server_path = server_path
        self.timeout = timeout
        self.wait_for_initialize = wait_for_initialize
        self.document_uri = document_uri
        self.language_id = language_id

        self.state: SessionState | None = None

        self._process: asyncio.subprocess.Process | None = None
        self._decoder = MessageDecoder()
        self._inbox: deque[dict[str, Any]] = deque()
        self._stderr_chunks: list[bytes] = []
        self._stderr_task: asyncio.Task[None] | None = None

    @property
    def process(self) -> asyncio.subprocess.Process | None:
        return self._process

    @property
    def stderr(self) -> str:
        """Diagnostic output captured from the server so far."""
        return b"".join(self._stderr_chunks).decode("utf-8", errors="replace")

    async def request(self, method: str, params: Any, document_text: str) -> Any:
        """
        Run the session and return the result of ``method``.

        Raises:
            LSPSpawnError: the server could not be started
            LSPTimeoutError: no matching response before the deadline
            LSPProcessExitedError: the server exited before responding
            LSPProtocolError: the server responded with an error object
        """
        if self.state is not None:
            raise RuntimeError("LSPSession is single-use; create a new session per request")

        started = time.monotonic()
        await self._spawn()

        try:
            return await asyncio.wait_for(
                self._exchange(method, params, document_text),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            self.state = SessionState.TIMED_OUT
            raise LSPTimeoutError(method, self.timeout) from None
        finally:
            await self._terminate()
            logger.debug(
                "LSP session %s finished in %.0fms (state=%s)",
                method,
                (time.monotonic() - started) * 1000,
                self.state.value if self.state else None,
            )

    async def _spawn(self) -> None:
        try:
            self._process = await asyncio.create_subprocess_exec(
                self.server_path,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            self.state = SessionState.PROCESS_ERROR
            raise LSPSpawnError(self.server_path, e) from e

        self.state = SessionState.SPAWNED
        self._stderr_task = asyncio.create_task(self._collect_stderr())

    async def _exchange(self, method: str, params: Any, document_text: str) -> Any:
        self.state = SessionState.INITIALIZING
        self._write(RequestMessage(
            id=INITIALIZE_REQUEST_ID,
            method="initialize",
            params={
                "processId": os.getpid(),
                "clientInfo": {"name": "superdb-mcp"},
                "capabilities": {},
                "rootUri": None,
            },
        ))

        if self.wait_for_initialize:
            await self._drain()
            init_response = await self._await_response(INITIALIZE_REQUEST_ID)
            if init_response.is_error:
                self.state = SessionState.COMPLETED
                raise LSPProtocolError(
                    init_response.error.code,
                    init_response.error.message,
                    init_response.error.data,
                )

        self._write(NotificationMessage(method="initialized", params={}))
        self._write(NotificationMessage(
            method="textDocument/didOpen",
            params={
                "textDocument": TextDocumentItem(
                    uri=self.document_uri,
                    language_id=self.language_id,
                    version=1,
                    text=document_text,
                ).to_dict(),
            },
        ))
        self.state = SessionState.INITIALIZED

        self._write(RequestMessage(id=CAPABILITY_REQUEST_ID, method=method, params=params))
        await self._drain()
        self.state = SessionState.AWAITING_RESPONSE

        response = await self._await_response(CAPABILITY_REQUEST_ID)
        self.state = SessionState.COMPLETED
        if response.is_error:
            raise LSPProtocolError(response.error.code, response.error.message, response.error.data)
        return response.result

    async def _await_response(self, request_id: int) -> ResponseMessage:
        """Read until the response to ``request_id`` arrives or stdout closes."""
        assert self._process is not None and self._process.stdout is not None

        while True:
            while self._inbox:
                message = parse_message(self._inbox.popleft())
                if isinstance(message, ResponseMessage) and message.id == request_id:
                    return message
                if isinstance(message, RequestMessage):
                    # workspace/configuration, window/workDoneProgress/create, ...
                    self._write(ResponseMessage(id=message.id, result=None))
                elif message is not None:
                    logger.debug("Ignoring LSP message while waiting for id %s: %s", request_id, message)

            chunk = await self._process.stdout.read(READ_CHUNK_SIZE)
            if not chunk:
                # A server can close stdout and keep running; teardown kills it
                try:
                    exit_code: int | None = await asyncio.wait_for(
                        self._process.wait(), timeout=TERMINATE_GRACE_SECONDS
                    )
                except asyncio.TimeoutError:
                    exit_code = None
                else:
                    await self._finish_stderr()
                self.state = SessionState.EXITED_EARLY
                raise LSPProcessExitedError(exit_code, self.stderr)

            self._inbox.extend(self._decoder.feed(chunk))

    def _write(self, message: RequestMessage | NotificationMessage | ResponseMessage) -> None:
        assert self._process is not None and self._process.stdin is not None
        if self._process.stdin.is_closing():
            return
        self._process.stdin.write(encode_message(message.to_dict()))

    async def _drain(self) -> None:
        assert self._process is not None and self._process.stdin is not None
        try:
            await self._process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            # The server is gone; the read side reports it as an early exit
            logger.debug("LSP server closed stdin: %s", e)

    async def _collect_stderr(self) -> None:
        assert self._process is not None and self._process.stderr is not None
        while True:
            chunk = await self._process.stderr.read(READ_CHUNK_SIZE)
            if not chunk:
                return
            self._stderr_chunks.append(chunk)

    async def _finish_stderr(self) -> None:
        if self._stderr_task is not None and not self._stderr_task.done():
            await asyncio.wait({self._stderr_task}, timeout=TERMINATE_GRACE_SECONDS)

    async def _terminate(self) -> None:
        """Stop the server process. Safe to call on every exit path."""
        process = self._process
        if process is None:
            return

        if process.stdin is not None and not process.stdin.is_closing():
            process.stdin.close()

        if process.returncode is None:
            try:
                process.terminate()
            except ProcessLookupError:
                pass
            try:
                await asyncio.wait_for(process.wait(), timeout=TERMINATE_GRACE_SECONDS)
            except asyncio.TimeoutError:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()

        if self._stderr_task is not None and not self._stderr_task.done():
            self._stderr_task.cancel()
            try:
                await self._stderr_task
            except asyncio.CancelledError:
                pass
