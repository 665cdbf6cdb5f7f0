"""Canonical Pydantic models shared across all authchoice modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Configuration models** -- the agent runtime's JSON config file, serialised
with camelCase keys (``baseUrl``, ``contextWindow``):
    :class:`ModelCost`, :class:`ModelDefinition`, :class:`ProviderDefinition`,
    :class:`ModelsConfig`, :class:`AgentModelConfig`, :class:`AgentDefaults`,
    :class:`AgentsConfig`, :class:`AuthProfile`, :class:`AuthSection`, and
    the root :class:`Config`.

**Request models** -- created per onboarding invocation and discarded after:
    :class:`AuthChoice`, :class:`AuthOptions`, and
    :class:`OAuthCredentials` (the latter is persisted by the credential
    store, never inside :class:`Config`).

Configuration models are frozen. Every transform in :mod:`authchoice.merge`
returns a new :class:`Config`; nothing mutates one in place. All of them use
``extra="allow"`` so that keys this tool does not know about survive a
load/save round trip untouched.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ConfigModel(BaseModel):
    """Base for frozen, camelCase-serialised configuration sections."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )


# --- Provider / model definitions ---


class ModelCost(_ConfigModel):
    """Per-million-token pricing for a model. Zero means "unknown / free"."""

    input: float = 0
    output: float = 0
    cache_read: float = 0
    cache_write: float = 0


class ModelDefinition(_ConfigModel):
    """A single model exposed by a provider.

    Example::

        ModelDefinition(id="gpt-4o", name="gpt-4o", input=["text", "image"])
    """

    id: str
    name: str
    reasoning: bool = False
    input: list[str] = Field(default_factory=lambda: ["text"])
    cost: ModelCost = Field(default_factory=ModelCost)
    context_window: int = 128000
    max_tokens: int = 4096
    compat: dict[str, Any] = Field(default_factory=dict)


class ProviderDefinition(_ConfigModel):
    """A model provider entry in ``models.providers``.

    The provider id is the mapping key, not a field. Writing a provider with
    an id that already exists replaces the whole definition.
    """

    base_url: str
    api_key: Optional[str] = None
    auth: Optional[str] = Field(
        default=None, description="Credential mode: api-key, oauth, token"
    )
    api: Optional[str] = Field(
        default=None, description="Wire protocol, e.g. openai-completions"
    )
    models: list[ModelDefinition] = Field(default_factory=list)


class ModelsConfig(_ConfigModel):
    """The ``models`` section: provider registry."""

    providers: dict[str, ProviderDefinition] = Field(default_factory=dict)


# --- Agent defaults ---


class AgentModelConfig(_ConfigModel):
    """The ``agents.defaults.model`` section."""

    primary: Optional[str] = Field(
        default=None, description="Default model reference, 'providerId/modelId'"
    )
    fallbacks: Optional[list[str]] = None


class AgentDefaults(_ConfigModel):
    """The ``agents.defaults`` section."""

    model: AgentModelConfig = Field(default_factory=AgentModelConfig)
    models: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Allow-list of model references with per-model settings",
    )


class AgentsConfig(_ConfigModel):
    """The ``agents`` section."""

    defaults: AgentDefaults = Field(default_factory=AgentDefaults)


# --- Auth profiles ---


class AuthProfile(_ConfigModel):
    """Metadata about a stored credential; the secret itself lives elsewhere."""

    provider: str
    mode: str = Field(description="Credential mode: api_key, oauth, token")
    email: Optional[str] = None


class AuthSection(_ConfigModel):
    """The ``auth`` section: profile registry and per-provider ordering."""

    profiles: dict[str, AuthProfile] = Field(default_factory=dict)
    order: dict[str, list[str]] = Field(default_factory=dict)


class Config(_ConfigModel):
    """Root of the agent runtime configuration file.

    Loaded and saved by :func:`~authchoice.config.load_config` and
    :func:`~authchoice.config.save_config`. Serialise with
    ``model_dump(mode="json", by_alias=True, exclude_none=True)`` to get
    the on-disk shape.
    """

    models: ModelsConfig = Field(default_factory=ModelsConfig)
    agents: AgentsConfig = Field(default_factory=AgentsConfig)
    auth: AuthSection = Field(default_factory=AuthSection)

    def to_json_dict(self) -> dict[str, Any]:
        """Return the camelCase JSON-ready dict written to disk."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Request models ---


class AuthChoice(str, enum.Enum):
    """The auth method a user picked during onboarding.

    ``API_KEY`` is the generic selector; it is resolved to a provider-specific
    choice through :attr:`AuthOptions.token_provider`.
    """

    API_KEY = "api-key"
    OPENAI_API_KEY = "openai-api-key"
    ANTHROPIC_API_KEY = "anthropic-api-key"
    GEMINI_API_KEY = "gemini-api-key"
    OPENROUTER_API_KEY = "openrouter-api-key"
    OPENAI_CODEX = "openai-codex"
    OPENAI_PRIVATE_ENDPOINT = "openai-private-endpoint"
    SKIP = "skip"


class AuthOptions(BaseModel):
    """Pre-supplied values that replace interactive prompts.

    Every field is optional. Which fields are *required* depends on the
    auth choice; see :mod:`authchoice.choices.non_interactive`.
    """

    token: Optional[str] = None
    token_provider: Optional[str] = Field(
        default=None,
        description="Provider the --token value belongs to; must match the target provider",
    )
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    openai_private_provider_id: Optional[str] = None
    openai_private_base_url: Optional[str] = None
    openai_private_api_key: Optional[str] = None
    openai_private_model_id: Optional[str] = None


class OAuthCredentials(BaseModel):
    """Durable credentials returned by a successful OAuth login.

    Attributes:
        access: The access token.
        refresh: The refresh token.
        expires: Access-token expiry as epoch milliseconds.
        account_id: Provider account identifier, when the token carries one.
        email: Account email, when known.
    """

    access: str
    refresh: str
    expires: int
    account_id: Optional[str] = None
    email: Optional[str] = None
