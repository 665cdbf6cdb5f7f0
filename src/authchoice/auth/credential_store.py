"""Persistent OAuth credential store scoped per agent and provider.

Stores credentials in ``<agent_dir>/credentials/<provider>.json`` where the
agent directory comes from :func:`~authchoice.config.resolve_agent_dir`.
Files are written atomically via :func:`~authchoice.config.atomic_write`
with ``0o600`` permissions so that tokens are never world-readable, even
momentarily.

Each provider maps to exactly one JSON file; logging in again overwrites it.

See Also:
    :mod:`authchoice.auth.oauth_flow` -- produces the credentials.
    :func:`authchoice.merge.apply_auth_profile_config` -- records the
    matching profile metadata in the config.
"""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from authchoice.config import atomic_write, resolve_agent_dir
from authchoice.models import OAuthCredentials


class CredentialEntry(BaseModel):
    """A stored OAuth credential for one provider.

    Attributes:
        provider: Provider name the credentials authenticate
            (e.g. ``"openai-codex"``).
        auth_type: Always ``"oauth"`` for entries written by this tool.
        credentials: The token set returned by the provider.
        saved_at: UTC time the entry was written.
    """

    provider: str
    auth_type: str = "oauth"
    credentials: OAuthCredentials
    saved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CredentialStore:
    """Read/write OAuth credentials for one provider under one agent directory.

    Args:
        provider: Provider name used to derive the file name.
        agent_dir: Agent state directory. Defaults to the default agent's
            directory.

    Example::

        store = CredentialStore("openai-codex")
        store.save(CredentialEntry(provider="openai-codex", credentials=creds))
        assert store.load().credentials.access == creds.access
    """

    def __init__(self, provider: str, agent_dir: Optional[Path] = None) -> None:
        self._provider = provider
        base = Path(agent_dir) if agent_dir is not None else resolve_agent_dir()
        self._path = base / "credentials" / f"{provider}.json"

    @property
    def path(self) -> Path:
        """The filesystem path to this provider's credential file."""
        return self._path

    def save(self, entry: CredentialEntry) -> None:
        """Persist *entry* atomically with ``0o600`` permissions, replacing any previous one."""
        text = json.dumps(entry.model_dump(mode="json"), indent=2) + "\n"
        atomic_write(self._path, text, mode=0o600)

    def load(self) -> Optional[CredentialEntry]:
        """Load the stored entry, or ``None`` if missing or unreadable."""
        if not self._path.is_file():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return CredentialEntry.model_validate(data)
        except (json.JSONDecodeError, ValueError, OSError):
            return None

    def is_valid(self) -> bool:
        """Return ``True`` if an entry exists and its access token has not expired."""
        entry = self.load()
        if entry is None:
            return False
        return entry.credentials.expires > int(time.time() * 1000)

    def clear(self) -> None:
        """Delete the stored credential file if it exists."""
        if self._path.is_file():
            self._path.unlink()


def write_oauth_credentials(
    provider: str,
    credentials: OAuthCredentials,
    agent_dir: Optional[Path] = None,
) -> Path:
    """Store *credentials* for *provider* under *agent_dir*.

    Returns:
        The path of the written credential file.
    """
    store = CredentialStore(provider, agent_dir)
    store.save(CredentialEntry(provider=provider, credentials=credentials))
    return store.path
