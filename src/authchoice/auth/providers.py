"""OAuth provider descriptors.

A provider is described once, as data, and the generic flow in
:mod:`authchoice.auth.oauth_flow` does the rest.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from urllib.parse import urlparse


@dataclass(frozen=True)
class OAuthProviderSpec:
    """Static OAuth authorization-code settings for one provider.

    Attributes:
        name: Provider name; also the credential-store key.
        label: Human-readable name used in progress messages.
        authorize_url: Authorization endpoint.
        token_url: Token endpoint.
        client_id: Public OAuth client id.
        redirect_uri: Loopback redirect registered with the provider. Its
            port is fixed by the provider, not chosen at runtime.
        scope: Space-separated scopes.
        extra_authorize_params: Provider-specific authorize query params.
    """

    name: str
    label: str
    authorize_url: str
    token_url: str
    client_id: str
    redirect_uri: str
    scope: str
    extra_authorize_params: dict[str, str] = field(default_factory=dict)

    @property
    def callback_port(self) -> int:
        """Port the loopback listener must bind."""
        parsed = urlparse(self.redirect_uri)
        return parsed.port or 80

    @property
    def callback_path(self) -> str:
        """Path the provider redirects to."""
        return urlparse(self.redirect_uri).path or "/"


# CLIENT_ID is the public id of the Codex CLI native app.
OPENAI_CODEX = OAuthProviderSpec(
    name="openai-codex",
    label="OpenAI",
    authorize_url="https://auth.openai.com/oauth/authorize",
    token_url="https://auth.openai.com/oauth/token",
    client_id=os.environ.get("CODEX_CLIENT_ID", "app_EMoamEEZ73f0CkXaXp7hrann"),
    redirect_uri="http://localhost:1455/auth/callback",
    scope="openid profile email offline_access",
    extra_authorize_params={
        "id_token_add_organizations": "true",
        "codex_simplified_flow": "true",
        "originator": "codex_rs",
    },
)
