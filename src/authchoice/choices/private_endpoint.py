"""Private OpenAI-compatible endpoint auth choice.

Registers a single-model provider that speaks the OpenAI completions wire
protocol (self-hosted gateways, vLLM, Azure-style proxies) and optionally
makes that model the default.

All four values come either from options or from prompts, never a mix:
partially supplied options are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from authchoice.choices.base import (
    ApplyAuthChoiceParams,
    ApplyAuthChoiceResult,
    AuthChoiceHandler,
    report_missing_options,
)
from authchoice.merge import apply_primary_model, apply_provider, model_ref
from authchoice.models import (
    AuthChoice,
    AuthOptions,
    Config,
    ModelCost,
    ModelDefinition,
    ProviderDefinition,
)
from authchoice.prompter import Prompter, require_non_empty

DEFAULT_PRIVATE_PROVIDER_ID = "openai-private"
BASE_URL_PLACEHOLDER = "https://api.openai.com/v1"
MODEL_ID_PLACEHOLDER = "gpt-4o"

# AuthOptions field -> CLI flag, in prompt order.
PRIVATE_ENDPOINT_OPTIONS: dict[str, str] = {
    "openai_private_provider_id": "--openai-private-provider-id",
    "openai_private_base_url": "--openai-private-base-url",
    "openai_private_api_key": "--openai-private-api-key",
    "openai_private_model_id": "--openai-private-model-id",
}


@dataclass(frozen=True)
class PrivateEndpoint:
    """The four values describing a private endpoint, already trimmed."""

    provider_id: str
    base_url: str
    api_key: str
    model_id: str

    @property
    def ref(self) -> str:
        return model_ref(self.provider_id, self.model_id)


def read_private_endpoint_options(opts: AuthOptions) -> tuple[Optional[PrivateEndpoint], list[str]]:
    """Collect the endpoint from *opts*.

    Returns:
        ``(endpoint, missing_flags)``. ``endpoint`` is ``None`` unless all
        four options are present and non-blank; ``missing_flags`` lists the
        flags that are absent, in declaration order.
    """
    values: dict[str, str] = {}
    missing: list[str] = []
    for field, flag in PRIVATE_ENDPOINT_OPTIONS.items():
        value = (getattr(opts, field) or "").strip()
        if value:
            values[field] = value
        else:
            missing.append(flag)
    if missing:
        return None, missing
    return (
        PrivateEndpoint(
            provider_id=values["openai_private_provider_id"],
            base_url=values["openai_private_base_url"],
            api_key=values["openai_private_api_key"],
            model_id=values["openai_private_model_id"],
        ),
        [],
    )


def prompt_private_endpoint(prompter: Prompter) -> PrivateEndpoint:
    provider_id = prompter.text(
        "Provider ID", validate=require_non_empty, initial_value=DEFAULT_PRIVATE_PROVIDER_ID
    )
    base_url = prompter.text("Base URL", validate=require_non_empty, placeholder=BASE_URL_PLACEHOLDER)
    api_key = prompter.text("API Key / Bearer Token", validate=require_non_empty)
    model_id = prompter.text("Model ID", validate=require_non_empty, placeholder=MODEL_ID_PLACEHOLDER)
    return PrivateEndpoint(
        provider_id=provider_id.strip(),
        base_url=base_url.strip(),
        api_key=api_key.strip(),
        model_id=model_id.strip(),
    )


def build_private_provider(endpoint: PrivateEndpoint) -> ProviderDefinition:
    """Build the provider definition with its single model."""
    return ProviderDefinition(
        base_url=endpoint.base_url,
        api_key=endpoint.api_key,
        auth="api-key",
        api="openai-completions",
        models=[
            ModelDefinition(
                id=endpoint.model_id,
                name=endpoint.model_id,
                reasoning=False,
                input=["text", "image"],
                cost=ModelCost(),
                context_window=128000,
                max_tokens=4096,
                compat={},
            )
        ],
    )


def apply_private_endpoint(config: Config, endpoint: PrivateEndpoint) -> Config:
    """Insert (or replace) the endpoint's provider in a copy of *config*."""
    return apply_provider(config, endpoint.provider_id, build_private_provider(endpoint))


class PrivateEndpointChoiceHandler(AuthChoiceHandler):
    @property
    def choices(self) -> tuple[AuthChoice, ...]:
        return (AuthChoice.OPENAI_PRIVATE_ENDPOINT,)

    def apply(self, params: ApplyAuthChoiceParams) -> Optional[ApplyAuthChoiceResult]:
        if params.auth_choice is not AuthChoice.OPENAI_PRIVATE_ENDPOINT:
            return None

        endpoint, missing = read_private_endpoint_options(params.options)
        if endpoint is None:
            if len(missing) < len(PRIVATE_ENDPOINT_OPTIONS):
                report_missing_options(params.runtime, missing)
                return ApplyAuthChoiceResult(config=params.config)
            endpoint = prompt_private_endpoint(params.prompter)

        config = apply_private_endpoint(params.config, endpoint)
        override: Optional[str] = None
        if params.set_default_model:
            config = apply_primary_model(config, endpoint.ref)
        else:
            override = endpoint.ref

        params.prompter.note(
            f"Configured private endpoint {endpoint.base_url} with model {endpoint.ref}",
            title="OpenAI Private Endpoint",
        )
        return ApplyAuthChoiceResult(config=config, agent_model_override=override)
