"""
LSP Context

Holds the process-wide language server state: the availability status,
checked once, and the lazily constructed client. Tools receive a context
explicitly; the module keeps one default instance for the server.
"""

import logging
from typing import Callable

from ..config.settings import LSPSettings
from .client import LSPClient, LSPClientConfig
from .errors import LSPConfigurationError
from .probe import LSPAvailability, check_lsp_availability

logger = logging.getLogger(__name__)

Prober = Callable[..., LSPAvailability]


class LSPContext:
    """
    Cached availability plus a lazily built ``LSPClient``.

    The availability probe runs at most once per context. ``reset()``
    forgets both the status and the client.
    """

    def __init__(
        self,
        settings: LSPSettings | None = None,
        prober: Prober = check_lsp_availability,
    ):
        self.settings = settings or LSPSettings.from_env()
        self._prober = prober
        self._availability: LSPAvailability | None = None
        self._client: LSPClient | None = None

    @property
    def checked(self) -> bool:
        return self._availability is not None

    @property
    def availability(self) -> LSPAvailability:
        """Probe the server on first access and cache the status."""
        if self._availability is None:
            self._availability = self._prober(
                self.settings.path,
                probe_flag=self.settings.probe_flag,
                timeout=self.settings.probe_timeout_seconds,
            )
            if self._availability.available:
                logger.info("SuperDB LSP available at %s", self._availability.path)
            else:
                logger.info("SuperDB LSP unavailable: %s", self._availability.error)
        return self._availability

    def get_client(self) -> LSPClient | None:
        """Get the LSP client, or None if the server is not available."""
        if not self.availability.available:
            return None

        if self._client is None:
            config = LSPClientConfig.from_settings(self.settings)
            config.lsp_path = config.lsp_path or self.availability.path
            try:
                self._client = LSPClient(config)
            except LSPConfigurationError as e:
                self._availability = LSPAvailability(
                    available=False,
                    path=self._availability.path if self._availability else None,
                    error=str(e),
                )
                return None

        return self._client

    def reset(self) -> None:
        """Forget the cached status and client."""
        self._availability = None
        self._client = None


_default_context: LSPContext | None = None


def get_lsp_context() -> LSPContext:
    """Get the process-wide default context, creating it on first use."""
    global _default_context
    if _default_context is None:
        _default_context = LSPContext()
    return _default_context


def reset_lsp_context() -> None:
    """Drop the default context so the next call re-reads settings and re-probes. For tests."""
    global _default_context
    _default_context = None
