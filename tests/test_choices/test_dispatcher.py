"""Tests for the auth choice dispatcher."""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock

from authchoice.choices.base import (
    ApplyAuthChoiceParams,
    ApplyAuthChoiceResult,
    AuthChoiceHandler,
)
from authchoice.choices.dispatcher import (
    AuthChoiceDispatcher,
    SkipChoiceHandler,
    apply_auth_choice,
    create_default_dispatcher,
)
from authchoice.env_file import read_shared_env_var
from authchoice.models import AuthChoice, AuthOptions, Config


class _RecordingHandler(AuthChoiceHandler):
    def __init__(self, *choices: AuthChoice) -> None:
        self._choices = choices
        self.seen: list[AuthChoice] = []

    @property
    def choices(self) -> tuple[AuthChoice, ...]:
        return self._choices

    def apply(self, params: ApplyAuthChoiceParams) -> Optional[ApplyAuthChoiceResult]:
        self.seen.append(params.auth_choice)
        return ApplyAuthChoiceResult(config=params.config, agent_model_override="x/y")


def _params(prompter, runtime, choice, opts=None) -> ApplyAuthChoiceParams:
    return ApplyAuthChoiceParams(
        auth_choice=choice, config=Config(), prompter=prompter, runtime=runtime, opts=opts
    )


class TestAuthChoiceDispatcher:
    def test_routes_to_registered_handler(self, prompter, runtime) -> None:
        handler = _RecordingHandler(AuthChoice.OPENAI_CODEX)
        dispatcher = AuthChoiceDispatcher()
        dispatcher.register(handler)

        result = dispatcher.apply(_params(prompter, runtime, AuthChoice.OPENAI_CODEX))

        assert result is not None
        assert result.agent_model_override == "x/y"
        assert handler.seen == [AuthChoice.OPENAI_CODEX]

    def test_unregistered_choice_returns_none(self, prompter, runtime) -> None:
        dispatcher = AuthChoiceDispatcher()
        assert dispatcher.apply(_params(prompter, runtime, AuthChoice.OPENAI_CODEX)) is None

    def test_later_registration_wins(self) -> None:
        dispatcher = AuthChoiceDispatcher()
        first = _RecordingHandler(AuthChoice.SKIP)
        second = _RecordingHandler(AuthChoice.SKIP)
        dispatcher.register(first)
        dispatcher.register(second)
        assert dispatcher.get_handler(AuthChoice.SKIP) is second

    def test_api_key_aliased_through_token_provider(self, prompter, runtime) -> None:
        handler = _RecordingHandler(AuthChoice.ANTHROPIC_API_KEY)
        dispatcher = AuthChoiceDispatcher()
        dispatcher.register(handler)

        params = _params(prompter, runtime, AuthChoice.API_KEY, AuthOptions(token_provider="anthropic"))
        dispatcher.apply(params)

        assert handler.seen == [AuthChoice.ANTHROPIC_API_KEY]
        assert params.auth_choice is AuthChoice.API_KEY

    def test_api_key_without_provider_is_unhandled(self, prompter, runtime) -> None:
        dispatcher = create_default_dispatcher()
        params = _params(prompter, runtime, AuthChoice.API_KEY)
        assert dispatcher.resolve_choice(params) is AuthChoice.API_KEY
        assert dispatcher.apply(params) is None


class TestDefaultDispatcher:
    def test_all_concrete_choices_registered(self) -> None:
        assert create_default_dispatcher().list_choices() == sorted(
            c.value for c in AuthChoice if c is not AuthChoice.API_KEY
        )

    def test_skip_returns_config(self, prompter, runtime) -> None:
        params = _params(prompter, runtime, AuthChoice.SKIP)
        result = SkipChoiceHandler().apply(params)
        assert result is not None
        assert result.config is params.config


class TestApplyAuthChoice:
    def test_unknown_choice_returns_unchanged_config(self, prompter, runtime) -> None:
        params = _params(prompter, runtime, AuthChoice.OPENAI_CODEX)
        result = apply_auth_choice(params, AuthChoiceDispatcher())
        assert result.config is params.config
        assert result.agent_model_override is None

    def test_generic_api_key_end_to_end(self, isolated_config: Path, prompter, runtime) -> None:
        opts = AuthOptions(token="sk-generic", token_provider="openrouter")
        params = _params(prompter, runtime, AuthChoice.API_KEY, opts)

        result = apply_auth_choice(params)

        assert result.config is params.config
        assert read_shared_env_var("OPENROUTER_API_KEY") == "sk-generic"
        prompter.text.assert_not_called()

    def test_passes_through_handler_result(self, prompter, runtime) -> None:
        dispatcher = AuthChoiceDispatcher()
        handler = MagicMock(spec=AuthChoiceHandler)
        handler.choices = (AuthChoice.SKIP,)
        expected = ApplyAuthChoiceResult(config=Config(), agent_model_override="a/b")
        handler.apply.return_value = expected
        dispatcher.register(handler)

        assert apply_auth_choice(_params(prompter, runtime, AuthChoice.SKIP), dispatcher) is expected
