"""Shared test fixtures for chronos_auth.

Provides fixtures for isolating configuration, managing the global output
state, building mock HTTP transports, and running CLI commands.  These
fixtures are discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from chronos_auth.models import GlobalConfig, RequestConfig
from chronos_auth.output import OutputFormat, OutputManager, reset_output, set_output

API_URL = "https://chronos.example.com"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Install a quiet output manager and reset it after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; resetting forces a fresh manager for the next test.
    """
    set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    tests never touch real user config, and clears all CHRONOS_* variables.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("chronos_auth.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ("CHRONOS_API_URL", "CHRONOS_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def config() -> GlobalConfig:
    """A resolved configuration pointing at the test backend."""
    return GlobalConfig(api_url=API_URL, request=RequestConfig(timeout=5))


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory for :class:`RecordingTransport` instances."""
    return RecordingTransport


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
