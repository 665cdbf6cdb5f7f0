"""Tests for the API-key auth choices."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from authchoice.auth.api_keys import validate_api_key_input
from authchoice.choices.api_key import ApiKeyChoiceHandler, choice_for_token_provider
from authchoice.choices.base import ApplyAuthChoiceParams
from authchoice.env_file import get_shared_env_path, read_shared_env_var, upsert_shared_env_var
from authchoice.merge import apply_primary_model
from authchoice.models import AuthChoice, AuthOptions, Config


def _params(prompter, runtime, choice=AuthChoice.OPENAI_API_KEY, opts=None, config=None):
    return ApplyAuthChoiceParams(
        auth_choice=choice,
        config=config or apply_primary_model(Config(), "keep/this"),
        prompter=prompter,
        runtime=runtime,
        opts=opts,
    )


class TestExistingKeyReuse:
    def test_reuse_env_key(self, isolated_config: Path, monkeypatch, prompter, runtime) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env-abcdef1234")
        params = _params(prompter, runtime)

        result = ApiKeyChoiceHandler().apply(params)

        assert result is not None
        assert result.config == params.config
        assert result.agent_model_override is None
        prompter.confirm.assert_called_once_with(
            "Use existing OPENAI_API_KEY (env: OPENAI_API_KEY, sk-e…1234)?",
            initial_value=True,
        )
        prompter.text.assert_not_called()
        assert read_shared_env_var("OPENAI_API_KEY") == "sk-env-abcdef1234"
        message, = prompter.note.call_args.args
        assert message == (
            f"Copied OPENAI_API_KEY to {get_shared_env_path()} for launchd compatibility."
        )
        assert prompter.note.call_args.kwargs["title"] == "OpenAI API key"

    def test_reuse_keeps_process_env(self, isolated_config: Path, monkeypatch, prompter, runtime) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env-abcdef1234")
        ApiKeyChoiceHandler().apply(_params(prompter, runtime))
        assert os.environ["OPENAI_API_KEY"] == "sk-env-abcdef1234"

    def test_reuse_from_shared_env_file(self, isolated_config: Path, prompter, runtime) -> None:
        upsert_shared_env_var("OPENAI_API_KEY", "sk-file-abcdef9876")

        ApiKeyChoiceHandler().apply(_params(prompter, runtime))

        message = prompter.confirm.call_args.args[0]
        assert f"({get_shared_env_path()}, sk-f…9876)" in message
        assert os.environ["OPENAI_API_KEY"] == "sk-file-abcdef9876"

    def test_declined_reuse_prompts(self, isolated_config: Path, monkeypatch, prompter, runtime) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env-abcdef1234")
        prompter.confirm.return_value = False
        prompter.text.return_value = "  sk-typed  "

        ApiKeyChoiceHandler().apply(_params(prompter, runtime))

        prompter.text.assert_called_once_with("Enter OpenAI API key", validate=validate_api_key_input)
        assert read_shared_env_var("OPENAI_API_KEY") == "sk-typed"
        assert os.environ["OPENAI_API_KEY"] == "sk-typed"


class TestNewKey:
    def test_prompted_key_is_saved(self, isolated_config: Path, prompter, runtime) -> None:
        prompter.text.return_value = "export OPENAI_API_KEY=sk-new"
        params = _params(prompter, runtime)

        result = ApiKeyChoiceHandler().apply(params)

        assert result is not None
        assert result.config is params.config
        prompter.confirm.assert_not_called()
        assert read_shared_env_var("OPENAI_API_KEY") == "sk-new"
        assert os.environ["OPENAI_API_KEY"] == "sk-new"
        assert prompter.note.call_args.args[0].startswith("Saved OPENAI_API_KEY to ")

    def test_token_with_matching_provider(self, isolated_config: Path, prompter, runtime) -> None:
        opts = AuthOptions(token="sk-token", token_provider="OpenAI")
        ApiKeyChoiceHandler().apply(_params(prompter, runtime, opts=opts))
        prompter.text.assert_not_called()
        assert read_shared_env_var("OPENAI_API_KEY") == "sk-token"

    def test_token_for_other_provider_is_ignored(self, isolated_config: Path, prompter, runtime) -> None:
        prompter.text.return_value = "sk-prompted"
        opts = AuthOptions(token="sk-ant", token_provider="anthropic")
        ApiKeyChoiceHandler().apply(_params(prompter, runtime, opts=opts))
        prompter.text.assert_called_once()
        assert read_shared_env_var("OPENAI_API_KEY") == "sk-prompted"

    def test_provider_option(self, isolated_config: Path, prompter, runtime) -> None:
        opts = AuthOptions(openai_api_key="sk-flag")
        ApiKeyChoiceHandler().apply(_params(prompter, runtime, opts=opts))
        prompter.text.assert_not_called()
        assert read_shared_env_var("OPENAI_API_KEY") == "sk-flag"

    @pytest.mark.parametrize(
        "choice,env_var,label",
        [
            (AuthChoice.ANTHROPIC_API_KEY, "ANTHROPIC_API_KEY", "Anthropic"),
            (AuthChoice.GEMINI_API_KEY, "GEMINI_API_KEY", "Gemini"),
            (AuthChoice.OPENROUTER_API_KEY, "OPENROUTER_API_KEY", "OpenRouter"),
        ],
    )
    def test_other_providers(self, isolated_config: Path, prompter, runtime, choice, env_var, label) -> None:
        prompter.text.return_value = "secret"
        ApiKeyChoiceHandler().apply(_params(prompter, runtime, choice=choice))
        assert prompter.text.call_args.args[0] == f"Enter {label} API key"
        assert read_shared_env_var(env_var) == "secret"
        assert prompter.note.call_args.kwargs["title"] == f"{label} API key"


class TestHandlerRouting:
    def test_declines_other_choices(self, prompter, runtime) -> None:
        assert ApiKeyChoiceHandler().apply(_params(prompter, runtime, choice=AuthChoice.SKIP)) is None

    def test_choice_for_token_provider(self) -> None:
        assert choice_for_token_provider(" Anthropic ") is AuthChoice.ANTHROPIC_API_KEY
        assert choice_for_token_provider("mystery") is None
        assert choice_for_token_provider(None) is None
