"""Onboard command -- pick an auth method and apply it to the agent config.

Loads the agent runtime configuration, applies the selected auth choice
either interactively (prompts, browser sign-in) or from flags only
(``--non-interactive``), and saves the result when it changed.
"""

from __future__ import annotations

from typing import Optional

import typer

from authchoice.exceptions import InvalidUsageError
from authchoice.exit_codes import EXIT_GENERIC_FAILURE
from authchoice.models import AuthChoice, AuthOptions, Config
from authchoice.output import format_response, info, success
from authchoice.prompter import CliRuntime, Runtime


def onboard_command(
    auth_choice: AuthChoice = typer.Option(
        ...,
        "--auth-choice",
        case_sensitive=False,
        help="Auth method to configure.",
    ),
    token: Optional[str] = typer.Option(
        None, "--token", help="API key or token for --token-provider."
    ),
    token_provider: Optional[str] = typer.Option(
        None, "--token-provider", help="Provider the --token value belongs to (e.g. openai)."
    ),
    openai_api_key: Optional[str] = typer.Option(None, "--openai-api-key", help="OpenAI API key."),
    anthropic_api_key: Optional[str] = typer.Option(
        None, "--anthropic-api-key", help="Anthropic API key."
    ),
    gemini_api_key: Optional[str] = typer.Option(None, "--gemini-api-key", help="Gemini API key."),
    openrouter_api_key: Optional[str] = typer.Option(
        None, "--openrouter-api-key", help="OpenRouter API key."
    ),
    openai_private_provider_id: Optional[str] = typer.Option(
        None, "--openai-private-provider-id", help="Provider id for a private endpoint."
    ),
    openai_private_base_url: Optional[str] = typer.Option(
        None, "--openai-private-base-url", help="Base URL of a private endpoint."
    ),
    openai_private_api_key: Optional[str] = typer.Option(
        None, "--openai-private-api-key", help="API key or bearer token for a private endpoint."
    ),
    openai_private_model_id: Optional[str] = typer.Option(
        None, "--openai-private-model-id", help="Model id served by a private endpoint."
    ),
    non_interactive: bool = typer.Option(
        False, "--non-interactive", help="Never prompt; fail when a value is missing."
    ),
    set_default_model: bool = typer.Option(
        True,
        "--set-default-model/--no-set-default-model",
        help="Make the configured model the global default.",
    ),
    agent_id: Optional[str] = typer.Option(
        None, "--agent-id", help="Agent being onboarded."
    ),
) -> None:
    """Configure how the agent authenticates with its model provider.

    Example::

        authchoice onboard --auth-choice openai-codex
        authchoice onboard --auth-choice openai-api-key --openai-api-key sk-... --non-interactive
        authchoice onboard --auth-choice openai-private-endpoint --non-interactive \\
            --openai-private-provider-id acme --openai-private-base-url https://llm.acme.dev/v1 \\
            --openai-private-api-key KEY --openai-private-model-id llama-3-70b
    """
    from authchoice.config import get_config_path, load_config, save_config

    opts = AuthOptions(
        token=token,
        token_provider=token_provider,
        openai_api_key=openai_api_key,
        anthropic_api_key=anthropic_api_key,
        gemini_api_key=gemini_api_key,
        openrouter_api_key=openrouter_api_key,
        openai_private_provider_id=openai_private_provider_id,
        openai_private_base_url=openai_private_base_url,
        openai_private_api_key=openai_private_api_key,
        openai_private_model_id=openai_private_model_id,
    )
    config = load_config()
    runtime = CliRuntime()

    override: Optional[str] = None
    if non_interactive:
        from authchoice.choices import apply_non_interactive_auth_choice

        new_config = apply_non_interactive_auth_choice(config, auth_choice, opts, runtime)
        if new_config is None:
            raise typer.Exit(code=EXIT_GENERIC_FAILURE)
    else:
        new_config, override = _apply_interactive(
            config, auth_choice, opts, runtime, set_default_model, agent_id
        )

    if new_config != config:
        path = save_config(new_config)
        success(f"Saved config to {path}")
    else:
        info(f"Config unchanged ({get_config_path()})")

    if override:
        format_response({"agentId": agent_id, "agentModelOverride": override})


def _apply_interactive(
    config: Config,
    auth_choice: AuthChoice,
    opts: AuthOptions,
    runtime: Runtime,
    set_default_model: bool,
    agent_id: Optional[str],
) -> tuple[Config, Optional[str]]:
    from authchoice.choices import (
        ApplyAuthChoiceParams,
        apply_auth_choice,
        create_default_dispatcher,
    )
    from authchoice.prompter import RichPrompter

    dispatcher = create_default_dispatcher()
    params = ApplyAuthChoiceParams(
        auth_choice=auth_choice,
        config=config,
        prompter=RichPrompter(),
        runtime=runtime,
        set_default_model=set_default_model,
        agent_id=agent_id,
        opts=opts,
    )
    if dispatcher.get_handler(dispatcher.resolve_choice(params)) is None:
        message = f"Unknown auth choice: {auth_choice.value}"
        if auth_choice is AuthChoice.API_KEY:
            message += " (pass --token-provider: openai, anthropic, gemini or openrouter)"
        raise InvalidUsageError(message)

    result = apply_auth_choice(params, dispatcher)
    return result.config, result.agent_model_override
