"""Auth choice dispatcher -- registry of handlers keyed by auth choice.

:func:`apply_auth_choice` is the single entry point the onboarding command
calls. It resolves the generic ``api-key`` choice through
``opts.token_provider`` and hands the request to whichever handler
registered the choice.

For most use cases, call :func:`create_default_dispatcher` to get a
dispatcher pre-loaded with every built-in handler.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from authchoice.choices.api_key import choice_for_token_provider
from authchoice.choices.base import (
    ApplyAuthChoiceParams,
    ApplyAuthChoiceResult,
    AuthChoiceHandler,
)
from authchoice.models import AuthChoice

logger = logging.getLogger(__name__)


class SkipChoiceHandler(AuthChoiceHandler):
    """``skip``: leave authentication for later."""

    @property
    def choices(self) -> tuple[AuthChoice, ...]:
        return (AuthChoice.SKIP,)

    def apply(self, params: ApplyAuthChoiceParams) -> Optional[ApplyAuthChoiceResult]:
        if params.auth_choice is not AuthChoice.SKIP:
            return None
        return ApplyAuthChoiceResult(config=params.config)


class AuthChoiceDispatcher:
    """Registry and dispatcher for :class:`AuthChoiceHandler` instances.

    Example::

        dispatcher = AuthChoiceDispatcher()
        dispatcher.register(SkipChoiceHandler())
        result = dispatcher.apply(params)
    """

    def __init__(self) -> None:
        self._handlers: dict[AuthChoice, AuthChoiceHandler] = {}

    def register(self, handler: AuthChoiceHandler) -> None:
        """Register *handler* for each of its choices, replacing earlier ones."""
        for choice in handler.choices:
            self._handlers[choice] = handler

    def get_handler(self, choice: AuthChoice) -> Optional[AuthChoiceHandler]:
        return self._handlers.get(choice)

    def list_choices(self) -> list[str]:
        """Return the registered choice values, sorted."""
        return sorted(choice.value for choice in self._handlers)

    def resolve_choice(self, params: ApplyAuthChoiceParams) -> AuthChoice:
        """Resolve ``api-key`` + ``token_provider`` to a provider-specific choice."""
        if params.auth_choice is not AuthChoice.API_KEY:
            return params.auth_choice
        resolved = choice_for_token_provider(params.options.token_provider)
        if resolved is not None and resolved in self._handlers:
            return resolved
        return params.auth_choice

    def apply(self, params: ApplyAuthChoiceParams) -> Optional[ApplyAuthChoiceResult]:
        """Apply the choice, or return ``None`` if no handler claims it."""
        choice = self.resolve_choice(params)
        if choice is not params.auth_choice:
            params = replace(params, auth_choice=choice)
        handler = self._handlers.get(choice)
        if handler is None:
            logger.debug("No auth-choice handler registered for %s", choice.value)
            return None
        return handler.apply(params)


def create_default_dispatcher() -> AuthChoiceDispatcher:
    """Create an :class:`AuthChoiceDispatcher` with all built-in handlers.

    - ``openai-api-key``, ``anthropic-api-key``, ``gemini-api-key``,
      ``openrouter-api-key`` -- API keys stored in the shared env file.
    - ``openai-private-endpoint`` -- self-hosted OpenAI-compatible provider.
    - ``openai-codex`` -- ChatGPT sign-in via OAuth.
    - ``skip``.
    """
    from authchoice.choices.api_key import ApiKeyChoiceHandler
    from authchoice.choices.openai_codex import OpenAICodexChoiceHandler
    from authchoice.choices.private_endpoint import PrivateEndpointChoiceHandler

    dispatcher = AuthChoiceDispatcher()
    dispatcher.register(ApiKeyChoiceHandler())
    dispatcher.register(PrivateEndpointChoiceHandler())
    dispatcher.register(OpenAICodexChoiceHandler())
    dispatcher.register(SkipChoiceHandler())
    return dispatcher


def apply_auth_choice(
    params: ApplyAuthChoiceParams,
    dispatcher: Optional[AuthChoiceDispatcher] = None,
) -> ApplyAuthChoiceResult:
    """Apply one auth choice interactively.

    Returns the unchanged config when no handler claims the choice.
    """
    dispatcher = dispatcher or create_default_dispatcher()
    result = dispatcher.apply(params)
    if result is None:
        return ApplyAuthChoiceResult(config=params.config)
    return result
