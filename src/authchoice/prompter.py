"""Interactive prompter and process runtime used by the auth-choice handlers.

The handlers in :mod:`authchoice.choices` never talk to the terminal
directly. They receive two collaborators:

- :class:`Prompter` -- asks questions (``text``, ``confirm``), shows
  ``note`` panels, and hands out :class:`ProgressSink` spinners.
- :class:`Runtime` -- reports fatal errors and terminates the process
  (``log``, ``error``, ``exit``).

:class:`RichPrompter` and :class:`CliRuntime` are the terminal
implementations wired up by ``authchoice onboard``. Tests pass mocks that
record calls instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.status import Status

from authchoice.exceptions import PromptCancelledError
from authchoice.output import error as output_error
from authchoice.output import get_output, info

Validator = Callable[[str], Optional[str]]
"""Returns an error message for invalid input, or ``None`` when valid."""


def require_non_empty(value: str) -> Optional[str]:
    """Validator rejecting blank input."""
    return None if value and value.strip() else "Required"


class ProgressSink(ABC):
    """An update-in-place status line with a terminal stop message."""

    @abstractmethod
    def update(self, message: str) -> None:
        """Replace the current status text."""
        ...

    @abstractmethod
    def stop(self, message: Optional[str] = None) -> None:
        """Stop the spinner, optionally leaving *message* as the final line."""
        ...


class Prompter(ABC):
    """Interactive question/answer surface. Every method may block on the user."""

    @abstractmethod
    def text(
        self,
        message: str,
        validate: Optional[Validator] = None,
        initial_value: Optional[str] = None,
        placeholder: Optional[str] = None,
    ) -> str:
        """Ask for free-form text, re-asking until *validate* accepts it.

        Raises:
            PromptCancelledError: If the user aborts the prompt.
        """
        ...

    @abstractmethod
    def confirm(self, message: str, initial_value: bool = True) -> bool:
        """Ask a yes/no question.

        Raises:
            PromptCancelledError: If the user aborts the prompt.
        """
        ...

    @abstractmethod
    def note(self, message: str, title: Optional[str] = None) -> None:
        """Show an informational panel."""
        ...

    @abstractmethod
    def progress(self, message: str) -> ProgressSink:
        """Start a spinner showing *message* and return its handle."""
        ...


class Runtime(ABC):
    """Process-level reporting and termination."""

    @abstractmethod
    def log(self, message: str) -> None: ...

    @abstractmethod
    def error(self, message: str) -> None: ...

    @abstractmethod
    def exit(self, code: int) -> None:
        """Terminate the current command with *code*."""
        ...


# ------------------------------------------------------------------ #
# Terminal implementations
# ------------------------------------------------------------------ #


class _RichProgress(ProgressSink):
    def __init__(self, console: Console, message: str) -> None:
        self._console = console
        self._status: Optional[Status] = Status(message, console=console, spinner="dots")
        self._status.start()

    def update(self, message: str) -> None:
        if self._status is not None:
            self._status.update(message)
        else:
            self._console.print(message)

    def stop(self, message: Optional[str] = None) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None
        if message:
            self._console.print(message)


class RichPrompter(Prompter):
    """Terminal prompter drawn on stderr with Rich.

    Args:
        console: Console to draw on. Defaults to the global output manager's
            stderr console so prompts share colour settings with diagnostics.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or get_output().stderr_console

    def text(
        self,
        message: str,
        validate: Optional[Validator] = None,
        initial_value: Optional[str] = None,
        placeholder: Optional[str] = None,
    ) -> str:
        label = message
        if placeholder and not initial_value:
            label = f"{message} [dim](e.g. {placeholder})[/dim]"
        while True:
            try:
                if initial_value is not None:
                    value = Prompt.ask(label, console=self._console, default=initial_value)
                else:
                    value = Prompt.ask(label, console=self._console)
            except (EOFError, KeyboardInterrupt):
                raise PromptCancelledError("Prompt cancelled.") from None
            problem = validate(value) if validate else None
            if problem is None:
                return value
            self._console.print(f"[red]{problem}[/red]")

    def confirm(self, message: str, initial_value: bool = True) -> bool:
        try:
            return Confirm.ask(message, console=self._console, default=initial_value)
        except (EOFError, KeyboardInterrupt):
            raise PromptCancelledError("Prompt cancelled.") from None

    def note(self, message: str, title: Optional[str] = None) -> None:
        self._console.print(Panel(message, title=title, expand=False))

    def progress(self, message: str) -> ProgressSink:
        return _RichProgress(self._console, message)


class CliRuntime(Runtime):
    """Runtime backed by :mod:`authchoice.output` and ``typer.Exit``."""

    def log(self, message: str) -> None:
        info(message)

    def error(self, message: str) -> None:
        output_error(message)

    def exit(self, code: int) -> None:
        raise typer.Exit(code=code)
