"""
Settings Configuration for superdb-mcp

This module provides centralized settings management with:
- Environment variable loading
- Default values
- Validation
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

LSP_PATH_ENV = "SUPERDB_LSP_PATH"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


@dataclass
class LSPSettings:
    """Language server settings."""

    path: str | None = None
    timeout_seconds: float = 5.0
    probe_flag: str = "--help"
    probe_timeout_seconds: float = 2.0
    wait_for_initialize: bool = False

    @classmethod
    def from_env(cls) -> "LSPSettings":
        """Load language server settings from environment variables."""
        return cls(
            path=os.environ.get(LSP_PATH_ENV) or None,
            timeout_seconds=float(os.environ.get("SUPERDB_LSP_TIMEOUT", "5")),
            probe_flag=os.environ.get("SUPERDB_LSP_PROBE_FLAG", "--help"),
            probe_timeout_seconds=float(os.environ.get("SUPERDB_LSP_PROBE_TIMEOUT", "2")),
            wait_for_initialize=_env_bool("SUPERDB_LSP_WAIT_FOR_INITIALIZE"),
        )

@dataclass
class SuperSettings:
    """Query engine settings."""

    path: str = "super"
    lake: str | None = None
    timeout_seconds: float = 60.0

    @classmethod
    def from_env(cls) -> "SuperSettings":
        """Load query engine settings from environment variables."""
        return cls(
            path=os.environ.get("SUPER_PATH") or "super",
            lake=os.environ.get("SUPER_DB_LAKE") or None,
            timeout_seconds=float(os.environ.get("SUPER_TIMEOUT", "60")),
        )


@dataclass
class LoggingSettings:
    """Logging settings."""

    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        return cls(
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            log_format=os.environ.get("LOG_FORMAT", "text").lower(),
        )


@dataclass
class Settings:
    """
    Centralized settings for superdb-mcp.

    Combines all setting categories and provides validation.
    """

    lsp: LSPSettings = field(default_factory=LSPSettings)
    engine: SuperSettings = field(default_factory=SuperSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load all settings from environment variables."""
        return cls(
            lsp=LSPSettings.from_env(),
            engine=SuperSettings.from_env(),
            logging=LoggingSettings.from_env(),
        )

    def validate(self) -> list[str]:
        """
        Validate settings and return list of errors.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.lsp.timeout_seconds <= 0:
            errors.append("SUPERDB_LSP_TIMEOUT must be positive.")

        if self.lsp.probe_timeout_seconds <= 0:
            errors.append("SUPERDB_LSP_PROBE_TIMEOUT must be positive.")

        if self.engine.timeout_seconds <= 0:
            errors.append("SUPER_TIMEOUT must be positive.")

        if self.logging.log_format not in ("text", "json"):
            errors.append("LOG_FORMAT must be 'text' or 'json'.")

        return errors

    def is_valid(self) -> bool:
        """Check if settings are valid."""
        return len(self.validate()) == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary for logging."""
        return {
            "lsp": {
                "path": self.lsp.path,
                "timeout_seconds": self.lsp.timeout_seconds,
                "probe_flag": self.lsp.probe_flag,
                "probe_timeout_seconds": self.lsp.probe_timeout_seconds,
                "wait_for_initialize": self.lsp.wait_for_initialize,
            },
            "engine": {
                "path": self.engine.path,
                "lake": self.engine.lake,
                "timeout_seconds": self.engine.timeout_seconds,
            },
            "logging": {
                "log_level": self.logging.log_level,
                "log_format": self.logging.log_format,
            },
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings loaded once from the environment. Call ``get_settings.cache_clear()`` to reload."""
    return Settings.from_env()
