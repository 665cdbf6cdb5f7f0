"""Terminal output for authchoice: data on stdout, everything else on stderr.

``authchoice config show`` and the agent override printed by ``onboard``
are the only data this CLI produces; they go to stdout so wrapper scripts
can capture them. Status lines, warnings, errors and hints go to stderr,
next to the interactive prompts drawn by :mod:`authchoice.prompter`.

Data is rendered as JSON (``--json``), tab-separated ``key<TAB>value``
lines (``--plain`` or piped stdout), or highlighted JSON on a terminal.
``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` turn colour off.

:func:`~authchoice.app.main_callback` installs one :class:`OutputManager`
per invocation with :func:`set_output`; the module-level helpers delegate
to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console


class OutputFormat(str, Enum):
    """How stdout data is rendered. ``AUTO`` picks ``RICH`` on a colour TTY."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Holds the resolved format, the two Rich consoles and the quiet/verbose flags.

    Args:
        format: Requested format for stdout data.
        no_color: Strip colour and markup from every stream.
        quiet: Hide info, success and hint lines. Errors and warnings stay.
        verbose: Show debug lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            format = OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def stderr_console(self) -> Console:
        """The stderr console, shared with :class:`~authchoice.prompter.RichPrompter`."""
        return self._stderr

    # --- stdout ---

    def format_response(self, data: Any) -> None:
        """Render *data* (usually a config dict) to stdout in the active format."""
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        else:
            self._stdout.print_json(data=data, default=str)

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    # --- stderr ---

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, style="green")

    def warning(self, message: str) -> None:
        self._diagnostic(message, style="yellow", prefix="Warning:")

    def error(self, message: str) -> None:
        self._diagnostic(message, style="bold red", prefix="Error:")

    def suggest(self, message: str) -> None:
        """Print a next-step hint such as a flag to add."""
        if not self._quiet:
            self._diagnostic(f"→ {message}", style="dim")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic(f"[debug] {message}", style="dim")

    def _diagnostic(self, message: str, style: Optional[str] = None, prefix: str = "") -> None:
        if self._no_color:
            text = f"{prefix} {message}" if prefix else message
            print(text, file=sys.stderr, flush=True)
            return
        # Messages carry user input (URLs, keys, brackets), never markup.
        self._stderr.print(f"{prefix} {message}" if prefix else message, style=style, markup=False)


def _plain_lines(data: Any) -> list[str]:
    """Flatten *data* to lines: dict items as ``key<TAB>value``, nested values as JSON."""
    if isinstance(data, dict):
        lines = []
        for key, value in data.items():
            if isinstance(value, (dict, list)):
                value = json.dumps(value, ensure_ascii=False, default=str)
            lines.append(f"{key}\t{value}")
        return lines
    if isinstance(data, list):
        return [str(item) for item in data]
    return [str(data)]


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager so the next call builds one on the current streams."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
