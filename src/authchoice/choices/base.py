"""Handler interface and request/result types for auth-choice application.

Every auth choice the onboarding wizard offers is implemented by an
:class:`AuthChoiceHandler`. A handler declares which
:class:`~authchoice.models.AuthChoice` values it serves and turns an
:class:`ApplyAuthChoiceParams` into an :class:`ApplyAuthChoiceResult`.

Handlers never mutate ``params.config``; they return a new config (or the
same object when nothing changed). See :mod:`authchoice.merge`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from authchoice.models import AuthChoice, AuthOptions, Config
from authchoice.prompter import Prompter, Runtime


@dataclass
class ApplyAuthChoiceParams:
    """Everything a handler needs to apply one auth choice.

    Attributes:
        auth_choice: The choice the user made.
        config: The current configuration. Never mutated.
        prompter: Interactive prompt surface.
        runtime: Error reporting and process exit.
        set_default_model: When ``True`` the chosen model becomes the
            global default; otherwise it is returned as an override for
            the agent being onboarded.
        agent_dir: Agent state directory for credential storage.
        agent_id: Agent being onboarded, used in notes.
        opts: Values supplied up front (CLI flags) that replace prompts.
    """

    auth_choice: AuthChoice
    config: Config
    prompter: Prompter
    runtime: Runtime
    set_default_model: bool = True
    agent_dir: Optional[Path] = None
    agent_id: Optional[str] = None
    opts: Optional[AuthOptions] = None

    @property
    def options(self) -> AuthOptions:
        """``opts``, or an empty :class:`AuthOptions` when none were given."""
        return self.opts or AuthOptions()


@dataclass(frozen=True)
class ApplyAuthChoiceResult:
    """Outcome of applying an auth choice.

    Attributes:
        config: The resulting configuration.
        agent_model_override: ``providerId/modelId`` to use for this agent
            only, set when ``set_default_model`` was ``False``.
    """

    config: Config
    agent_model_override: Optional[str] = None


class AuthChoiceHandler(ABC):
    """Base class for auth-choice handlers."""

    @property
    @abstractmethod
    def choices(self) -> tuple[AuthChoice, ...]:
        """The auth choices this handler serves."""
        ...

    @abstractmethod
    def apply(self, params: ApplyAuthChoiceParams) -> Optional[ApplyAuthChoiceResult]:
        """Apply ``params.auth_choice``.

        Returns:
            The result, or ``None`` if the handler declines the choice.
        """
        ...


def report_missing_options(runtime: Runtime, names: Iterable[str]) -> None:
    """Report missing required options and exit with status 1."""
    runtime.error(f"Missing required options: {', '.join(names)}")
    runtime.exit(1)
