"""API-key auth choices (OpenAI, Anthropic, Gemini, OpenRouter).

Keys are never written to the JSON config. They go into the shared env file
(see :mod:`authchoice.env_file`) and into ``os.environ`` for the current
process, so every path through this module returns ``params.config``
unchanged.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from authchoice.auth.api_keys import (
    EnvApiKey,
    format_api_key_preview,
    normalize_api_key_input,
    resolve_env_api_key,
    validate_api_key_input,
)
from authchoice.choices.base import (
    ApplyAuthChoiceParams,
    ApplyAuthChoiceResult,
    AuthChoiceHandler,
)
from authchoice.env_file import (
    EnvFileUpdate,
    get_shared_env_path,
    read_shared_env_var,
    upsert_shared_env_var,
)
from authchoice.models import AuthChoice, AuthOptions


@dataclass(frozen=True)
class ApiKeyProvider:
    """How one provider's API key is collected and stored.

    Attributes:
        provider: Provider name, matched against ``--token-provider``.
        choice: The auth choice that selects this provider.
        env_var: Variable the key is stored under.
        label: Display name used in prompts and notes.
        option: :class:`~authchoice.models.AuthOptions` field carrying the key.
    """

    provider: str
    choice: AuthChoice
    env_var: str
    label: str
    option: str

    @property
    def flag(self) -> str:
        """The CLI flag for :attr:`option`, e.g. ``--openai-api-key``."""
        return "--" + self.option.replace("_", "-")


API_KEY_PROVIDERS: dict[AuthChoice, ApiKeyProvider] = {
    p.choice: p
    for p in (
        ApiKeyProvider("openai", AuthChoice.OPENAI_API_KEY, "OPENAI_API_KEY", "OpenAI", "openai_api_key"),
        ApiKeyProvider(
            "anthropic", AuthChoice.ANTHROPIC_API_KEY, "ANTHROPIC_API_KEY", "Anthropic", "anthropic_api_key"
        ),
        ApiKeyProvider("gemini", AuthChoice.GEMINI_API_KEY, "GEMINI_API_KEY", "Gemini", "gemini_api_key"),
        ApiKeyProvider(
            "openrouter", AuthChoice.OPENROUTER_API_KEY, "OPENROUTER_API_KEY", "OpenRouter", "openrouter_api_key"
        ),
    )
}

_PROVIDER_CHOICES: dict[str, AuthChoice] = {p.provider: p.choice for p in API_KEY_PROVIDERS.values()}


def choice_for_token_provider(token_provider: Optional[str]) -> Optional[AuthChoice]:
    """Map a ``--token-provider`` value to its API-key choice, if any."""
    if not token_provider:
        return None
    return _PROVIDER_CHOICES.get(token_provider.strip().lower())


def find_existing_api_key(provider: ApiKeyProvider) -> Optional[EnvApiKey]:
    """Look for a key in the process environment, then in the shared env file."""
    found = resolve_env_api_key(provider.provider)
    if found is not None:
        return found
    stored = read_shared_env_var(provider.env_var)
    if stored and stored.strip():
        return EnvApiKey(api_key=stored.strip(), source=str(get_shared_env_path()))
    return None


def option_api_key(provider: ApiKeyProvider, opts: AuthOptions) -> Optional[str]:
    """Return the key supplied through options, or ``None``.

    The provider-specific option wins. A generic ``--token`` only counts when
    ``--token-provider`` names this provider.
    """
    value = getattr(opts, provider.option)
    if value and value.strip():
        return normalize_api_key_input(value)
    if opts.token and opts.token.strip():
        if (opts.token_provider or "").strip().lower() == provider.provider:
            return normalize_api_key_input(opts.token)
    return None


def persist_api_key(provider: ApiKeyProvider, api_key: str, overwrite_env: bool = True) -> EnvFileUpdate:
    """Write *api_key* to the shared env file and the process environment.

    With ``overwrite_env=False`` an already-set process variable is kept.
    """
    update = upsert_shared_env_var(provider.env_var, api_key)
    if overwrite_env or not os.environ.get(provider.env_var):
        os.environ[provider.env_var] = api_key
    return update


class ApiKeyChoiceHandler(AuthChoiceHandler):
    """Collects a provider API key: reuse from env, options, or a prompt."""

    @property
    def choices(self) -> tuple[AuthChoice, ...]:
        return tuple(API_KEY_PROVIDERS)

    def apply(self, params: ApplyAuthChoiceParams) -> Optional[ApplyAuthChoiceResult]:
        provider = API_KEY_PROVIDERS.get(params.auth_choice)
        if provider is None:
            return None
        prompter = params.prompter
        title = f"{provider.label} API key"

        existing = find_existing_api_key(provider)
        if existing is not None:
            preview = format_api_key_preview(existing.api_key)
            reuse = prompter.confirm(
                f"Use existing {provider.env_var} ({existing.source}, {preview})?",
                initial_value=True,
            )
            if reuse:
                update = persist_api_key(provider, existing.api_key, overwrite_env=False)
                prompter.note(
                    f"Copied {provider.env_var} to {update.path} for launchd compatibility.",
                    title=title,
                )
                return ApplyAuthChoiceResult(config=params.config)

        api_key = option_api_key(provider, params.options)
        if api_key is None:
            raw = prompter.text(f"Enter {provider.label} API key", validate=validate_api_key_input)
            api_key = normalize_api_key_input(raw)

        update = persist_api_key(provider, api_key)
        prompter.note(
            f"Saved {provider.env_var} to {update.path} for launchd compatibility.",
            title=title,
        )
        return ApplyAuthChoiceResult(config=params.config)
