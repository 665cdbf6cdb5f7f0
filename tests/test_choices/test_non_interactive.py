"""Tests for flag-only auth choice application."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from authchoice.choices.non_interactive import apply_non_interactive_auth_choice
from authchoice.env_file import read_shared_env_var
from authchoice.merge import apply_primary_model
from authchoice.models import AuthChoice, AuthOptions, Config

FULL_PRIVATE = {
    "openai_private_provider_id": "ni-provider",
    "openai_private_base_url": "https://ni-endpoint.example/v1",
    "openai_private_api_key": "ni-key",
    "openai_private_model_id": "ni-model",
}


class TestPrivateEndpoint:
    def test_all_options(self, runtime) -> None:
        result = apply_non_interactive_auth_choice(
            Config(), AuthChoice.OPENAI_PRIVATE_ENDPOINT, AuthOptions(**FULL_PRIVATE), runtime
        )

        assert result is not None
        assert result.agents.defaults.model.primary == "ni-provider/ni-model"
        provider = result.models.providers["ni-provider"]
        assert provider.base_url == "https://ni-endpoint.example/v1"
        assert provider.api_key == "ni-key"
        runtime.error.assert_not_called()
        runtime.exit.assert_not_called()

    @pytest.mark.parametrize("missing_field", sorted(FULL_PRIVATE))
    def test_any_missing_option_fails(self, runtime, missing_field: str) -> None:
        config = apply_primary_model(Config(), "keep/this")
        opts = AuthOptions(**{k: v for k, v in FULL_PRIVATE.items() if k != missing_field})

        result = apply_non_interactive_auth_choice(
            config, AuthChoice.OPENAI_PRIVATE_ENDPOINT, opts, runtime
        )

        assert result is None
        message = runtime.error.call_args.args[0]
        assert "Missing required options" in message
        assert "--" + missing_field.replace("_", "-") in message
        runtime.exit.assert_called_once_with(1)
        assert config.agents.defaults.model.primary == "keep/this"
        assert config.models.providers == {}

    def test_no_options_names_all_flags(self, runtime) -> None:
        apply_non_interactive_auth_choice(Config(), AuthChoice.OPENAI_PRIVATE_ENDPOINT, None, runtime)
        runtime.error.assert_called_once_with(
            "Missing required options: --openai-private-provider-id, --openai-private-base-url, "
            "--openai-private-api-key, --openai-private-model-id"
        )


class TestApiKeys:
    def test_provider_option(self, isolated_config: Path, runtime) -> None:
        config = Config()
        result = apply_non_interactive_auth_choice(
            config, AuthChoice.OPENAI_API_KEY, AuthOptions(openai_api_key="sk-ni"), runtime
        )
        assert result is config
        assert read_shared_env_var("OPENAI_API_KEY") == "sk-ni"
        assert os.environ["OPENAI_API_KEY"] == "sk-ni"

    def test_generic_api_key_with_token(self, isolated_config: Path, runtime) -> None:
        opts = AuthOptions(token="sk-ant", token_provider="anthropic")
        result = apply_non_interactive_auth_choice(Config(), AuthChoice.API_KEY, opts, runtime)
        assert result is not None
        assert read_shared_env_var("ANTHROPIC_API_KEY") == "sk-ant"

    def test_generic_api_key_needs_provider(self, isolated_config: Path, runtime) -> None:
        result = apply_non_interactive_auth_choice(
            Config(), AuthChoice.API_KEY, AuthOptions(token="sk"), runtime
        )
        assert result is None
        runtime.error.assert_called_once_with("Missing required options: --token-provider")

    def test_falls_back_to_environment(self, isolated_config: Path, monkeypatch, runtime) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "g-env")
        result = apply_non_interactive_auth_choice(Config(), AuthChoice.GEMINI_API_KEY, None, runtime)
        assert result is not None
        assert read_shared_env_var("GEMINI_API_KEY") == "g-env"

    def test_missing_key(self, isolated_config: Path, runtime) -> None:
        result = apply_non_interactive_auth_choice(Config(), AuthChoice.OPENROUTER_API_KEY, None, runtime)
        assert result is None
        runtime.error.assert_called_once_with("Missing required options: --openrouter-api-key")
        runtime.exit.assert_called_once_with(1)

    def test_mismatched_token_provider_is_missing(self, isolated_config: Path, runtime) -> None:
        opts = AuthOptions(token="sk", token_provider="anthropic")
        result = apply_non_interactive_auth_choice(Config(), AuthChoice.OPENAI_API_KEY, opts, runtime)
        assert result is None
        runtime.error.assert_called_once_with("Missing required options: --openai-api-key")


class TestOtherChoices:
    def test_oauth_requires_interaction(self, runtime) -> None:
        result = apply_non_interactive_auth_choice(Config(), AuthChoice.OPENAI_CODEX, None, runtime)
        assert result is None
        runtime.error.assert_called_once_with("OAuth requires interactive mode.")
        runtime.exit.assert_called_once_with(1)

    def test_skip(self, runtime) -> None:
        config = Config()
        assert apply_non_interactive_auth_choice(config, AuthChoice.SKIP, None, runtime) is config
        runtime.error.assert_not_called()
