"""Shared fixtures."""

import json
import stat
import sys
from pathlib import Path

import pytest

from superdb_mcp.config.settings import LSP_PATH_ENV, get_settings
from superdb_mcp.lsp.context import reset_lsp_context

FAKE_LSP_SERVER = Path(__file__).parent / "fixtures" / "fake_lsp_server.py"


class FakeServer(str):
    """Executable path of a fake language server, plus where it records what it received."""

    def __new__(cls, path: str, record_path: Path):
        obj = super().__new__(cls, path)
        obj.record_path = record_path
        return obj

    def received(self) -> list[dict]:
        if not self.record_path.exists():
            return []
        return [json.loads(line) for line in self.record_path.read_text().splitlines() if line]


@pytest.fixture(autouse=True)
def clean_lsp_state(monkeypatch):
    """Every test starts without a configured server and with fresh caches."""
    monkeypatch.delenv(LSP_PATH_ENV, raising=False)
    reset_lsp_context()
    get_settings.cache_clear()
    yield
    reset_lsp_context()
    get_settings.cache_clear()


@pytest.fixture
def fake_lsp(tmp_path):
    """
    Factory for an executable that runs the fake language server.

    Usage:
        path = fake_lsp("completion-list")
        path = fake_lsp("silent", record=True)
        path.received()  # messages the server read, in order
    """

    def _make(mode: str = "completion-array", record: bool = False, help_exit: int = 0) -> FakeServer:
        script = tmp_path / f"fake-lsp-{mode}"
        record_path = tmp_path / f"{mode}.jsonl"
        extra = f' --record "{record_path}"' if record else ""
        script.write_text(
            "#!/bin/sh\n"
            f'exec "{sys.executable}" "{FAKE_LSP_SERVER}" --mode {mode} --help-exit {help_exit}{extra} "$@"\n'
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return FakeServer(str(script), record_path)

    return _make
