"""Credential acquisition building blocks.

- :mod:`~authchoice.auth.environment` -- decides whether an OAuth callback
  can reach this machine (local) or must be pasted back (remote).
- :mod:`~authchoice.auth.api_keys` -- env-var lookup, preview, and input
  normalisation for provider API keys.
- :mod:`~authchoice.auth.providers` -- OAuth provider descriptors.
- :mod:`~authchoice.auth.oauth_flow` -- the authorization-code + PKCE flow.
- :mod:`~authchoice.auth.credential_store` -- durable per-agent storage for
  OAuth credentials.
"""

from authchoice.auth.credential_store import (
    CredentialEntry,
    CredentialStore,
    write_oauth_credentials,
)
from authchoice.auth.environment import ExecutionMode, classify, is_remote_environment
from authchoice.auth.oauth_flow import OAuthFlow, VpsAwareOAuthHandlers
from authchoice.auth.providers import OPENAI_CODEX, OAuthProviderSpec

__all__ = [
    "CredentialEntry",
    "CredentialStore",
    "ExecutionMode",
    "OAuthFlow",
    "OAuthProviderSpec",
    "OPENAI_CODEX",
    "VpsAwareOAuthHandlers",
    "classify",
    "is_remote_environment",
    "write_oauth_credentials",
]
