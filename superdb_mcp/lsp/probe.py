"""
Language server availability probe.

Decides cheaply, without an LSP handshake, whether the configured server
executable can be started at all.
"""

import logging
import os
import subprocess
from dataclasses import asdict, dataclass

from ..config.settings import LSP_PATH_ENV

logger = logging.getLogger(__name__)

DEFAULT_PROBE_FLAG = "--help"
DEFAULT_PROBE_TIMEOUT = 2.0


@dataclass
class LSPAvailability:
    """Result of an availability probe."""
    available: bool
    path: str | None
    error: str | None

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def get_lsp_path() -> str | None:
    """Get the configured language server path, or None."""
    return os.environ.get(LSP_PATH_ENV) or None


def check_lsp_availability(
    lsp_path: str | None = None,
    probe_flag: str = DEFAULT_PROBE_FLAG,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> LSPAvailability:
    """
    Check whether the language server is usable.

    Runs ``<lsp_path> <probe_flag>`` with stdin closed and output captured.
    A spawn error, a non-zero exit or exceeding ``timeout`` all count as
    unavailable.

    Known limitation: language servers rarely implement a real ``--help``
    fast path. One that ignores the flag and waits on stdin sees EOF and may
    exit non-zero, or may keep running until the timeout. Either way it is
    reported unavailable even though an LSP session would work.

    Nothing is cached here; see ``LSPContext`` for the once-per-process check.
    """
    lsp_path = lsp_path or get_lsp_path()

    if not lsp_path:
        return LSPAvailability(
            available=False,
            path=None,
            error=(
                f"{LSP_PATH_ENV} environment variable not set. "
                "Install superdb-lsp for enhanced features."
            ),
        )

    try:
        result = subprocess.run(
            [lsp_path, probe_flag],
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.info("LSP probe of %s timed out after %ss", lsp_path, timeout)
        return LSPAvailability(
            available=False,
            path=lsp_path,
            error=f"LSP server at {lsp_path} is not working: probe timed out after {timeout:g}s",
        )
    except OSError as e:
        logger.info("LSP probe of %s failed to start: %s", lsp_path, e)
        return LSPAvailability(
            available=False,
            path=lsp_path,
            error=f"LSP server at {lsp_path} is not working: {e}",
        )

    if result.returncode != 0:
        detail = (result.stderr or "").strip() or f"exit code {result.returncode}"
        return LSPAvailability(
            available=False,
            path=lsp_path,
            error=f"LSP server at {lsp_path} is not working: {detail}",
        )

    return LSPAvailability(available=True, path=lsp_path, error=None)
