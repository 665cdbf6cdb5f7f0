"""Shared test fixtures for authchoice.

Provides isolated config/data directories, recording fakes for the
prompter and runtime collaborators, output state management, and a CLI
runner. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from authchoice.output import OutputFormat, OutputManager, reset_output, set_output
from authchoice.prompter import ProgressSink, Prompter, Runtime

PROVIDER_ENV_VARS = [
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "OPENROUTER_API_KEY",
]


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams and the
    test finishes, the cached references become stale. Resetting forces a
    fresh manager on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and agent state to a temporary directory.

    Forces the XDG code path, points XDG_CONFIG_HOME / XDG_DATA_HOME at
    subdirectories of tmp_path, and clears AUTHCHOICE_* and provider API
    key variables so the developer's environment never leaks in.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("authchoice.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["AUTHCHOICE_CONFIG_PATH", "AUTHCHOICE_AGENT_DIR", *PROVIDER_ENV_VARS]:
        # setenv first so keys written straight to os.environ are undone too
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Prompter / runtime fakes
# ---------------------------------------------------------------------------


@pytest.fixture
def progress() -> MagicMock:
    """A recording ProgressSink."""
    return MagicMock(spec=ProgressSink)


@pytest.fixture
def prompter(progress: MagicMock) -> MagicMock:
    """A recording Prompter whose ``progress()`` returns the ``progress`` fixture.

    Tests script answers through ``prompter.text.side_effect`` and
    ``prompter.confirm.return_value``.
    """
    fake = MagicMock(spec=Prompter)
    fake.progress.return_value = progress
    fake.confirm.return_value = True
    return fake


@pytest.fixture
def runtime() -> MagicMock:
    """A recording Runtime. ``exit`` records the call and returns."""
    return MagicMock(spec=Runtime)


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
