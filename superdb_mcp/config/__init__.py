"""
Configuration Module for superdb-mcp

This module provides configuration management including:
- Environment variable loading
- Logging setup
"""

from .logging import JSONFormatter, setup_logging
from .settings import (
    LSP_PATH_ENV,
    LoggingSettings,
    LSPSettings,
    Settings,
    SuperSettings,
    get_settings,
)

__all__ = [
    "LSP_PATH_ENV",
    "LSPSettings",
    "SuperSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
    "JSONFormatter",
    "setup_logging",
]
