"""Auth choice application without prompts (``onboard --non-interactive``).

Every value must come from :class:`~authchoice.models.AuthOptions` or the
environment. On a gap the function reports through ``runtime.error``,
calls ``runtime.exit(1)`` and returns ``None``.
"""

from __future__ import annotations

from typing import Optional

from authchoice.choices.api_key import (
    API_KEY_PROVIDERS,
    choice_for_token_provider,
    find_existing_api_key,
    option_api_key,
    persist_api_key,
)
from authchoice.choices.base import report_missing_options
from authchoice.choices.private_endpoint import (
    apply_private_endpoint,
    read_private_endpoint_options,
)
from authchoice.merge import apply_primary_model
from authchoice.models import AuthChoice, AuthOptions, Config
from authchoice.prompter import Runtime


def apply_non_interactive_auth_choice(
    next_config: Config,
    auth_choice: AuthChoice,
    opts: Optional[AuthOptions],
    runtime: Runtime,
) -> Optional[Config]:
    """Apply *auth_choice* using only *opts* and the environment.

    Returns:
        The resulting config, or ``None`` after reporting an error.
    """
    opts = opts or AuthOptions()

    if auth_choice is AuthChoice.OPENAI_PRIVATE_ENDPOINT:
        endpoint, missing = read_private_endpoint_options(opts)
        if endpoint is None:
            report_missing_options(runtime, missing)
            return None
        config = apply_private_endpoint(next_config, endpoint)
        return apply_primary_model(config, endpoint.ref)

    if auth_choice is AuthChoice.API_KEY:
        resolved = choice_for_token_provider(opts.token_provider)
        if resolved is None:
            report_missing_options(runtime, ["--token-provider"])
            return None
        auth_choice = resolved

    provider = API_KEY_PROVIDERS.get(auth_choice)
    if provider is not None:
        api_key = option_api_key(provider, opts)
        if api_key is None:
            existing = find_existing_api_key(provider)
            api_key = existing.api_key if existing is not None else None
        if not api_key:
            report_missing_options(runtime, [provider.flag])
            return None
        persist_api_key(provider, api_key)
        return next_config

    if auth_choice is AuthChoice.OPENAI_CODEX:
        runtime.error("OAuth requires interactive mode.")
        runtime.exit(1)
        return None

    if auth_choice is AuthChoice.SKIP:
        return next_config

    runtime.error(f"Unknown auth choice: {auth_choice.value}")
    runtime.exit(1)
    return None
