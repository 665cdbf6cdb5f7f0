"""Copy-on-write transforms over :class:`~authchoice.models.Config`.

Every function here takes a config and returns a *new* one; the input is
never mutated, so a caller holding the previous value can always fall back
to it when a later onboarding step fails. Untouched sections are shared
structurally with the input.

All transforms are idempotent: applying the same change twice produces a
config equal to applying it once.
"""

from __future__ import annotations

from typing import Optional

from authchoice.models import (
    AuthProfile,
    Config,
    ProviderDefinition,
)

OPENAI_CODEX_PROVIDER = "openai-codex"
OPENAI_CODEX_DEFAULT_MODEL = "openai-codex/gpt-5.2"


def model_ref(provider_id: str, model_id: str) -> str:
    """Build a ``providerId/modelId`` model reference."""
    return f"{provider_id}/{model_id}"


def apply_primary_model(config: Config, ref: str) -> Config:
    """Set ``agents.defaults.model.primary`` to *ref*.

    The reference is also added to the ``agents.defaults.models`` allow-list
    (an existing entry and its settings are kept as they are).

    Args:
        config: The current configuration.
        ref: A ``providerId/modelId`` model reference.

    Returns:
        A new :class:`~authchoice.models.Config`.
    """
    defaults = config.agents.defaults
    allowed = dict(defaults.models)
    allowed.setdefault(ref, {})

    new_defaults = defaults.model_copy(
        update={
            "model": defaults.model.model_copy(update={"primary": ref}),
            "models": allowed,
        }
    )
    new_agents = config.agents.model_copy(update={"defaults": new_defaults})
    return config.model_copy(update={"agents": new_agents})


def apply_provider(
    config: Config, provider_id: str, provider: ProviderDefinition
) -> Config:
    """Insert or replace ``models.providers[provider_id]``.

    An existing provider with the same id is overwritten wholesale; its
    fields are not merged with the new definition.
    """
    providers = dict(config.models.providers)
    providers[provider_id] = provider
    new_models = config.models.model_copy(update={"providers": providers})
    return config.model_copy(update={"models": new_models})


def apply_auth_profile_config(
    config: Config,
    profile_id: str,
    provider: str,
    mode: str,
    email: Optional[str] = None,
) -> Config:
    """Record an auth profile and put it first in the provider's order.

    Only metadata is written here. The secret belongs to the credential
    store (OAuth) or the shared env file (API keys).

    Args:
        config: The current configuration.
        profile_id: Profile key, conventionally ``"<provider>:default"``.
        provider: Provider name the profile authenticates.
        mode: ``"oauth"``, ``"api_key"``, or ``"token"``.
        email: Optional account email for display.
    """
    profiles = dict(config.auth.profiles)
    profiles[profile_id] = AuthProfile(provider=provider, mode=mode, email=email)

    order = dict(config.auth.order)
    existing = order.get(provider)
    if existing is not None:
        order[provider] = [profile_id] + [p for p in existing if p != profile_id]

    new_auth = config.auth.model_copy(update={"profiles": profiles, "order": order})
    return config.model_copy(update={"auth": new_auth})


def apply_openai_codex_model_default(config: Config) -> tuple[Config, bool]:
    """Make the Codex OAuth model the primary default.

    Returns:
        ``(new_config, changed)``. ``changed`` is ``False`` when the primary
        model already was :data:`OPENAI_CODEX_DEFAULT_MODEL`; the config is
        then returned as-is.
    """
    if config.agents.defaults.model.primary == OPENAI_CODEX_DEFAULT_MODEL:
        return config, False
    return apply_primary_model(config, OPENAI_CODEX_DEFAULT_MODEL), True
