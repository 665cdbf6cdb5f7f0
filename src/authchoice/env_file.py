"""Shared ``.env`` secrets file used by every agent process.

API keys collected during onboarding are not stored in the JSON config.
They are upserted into a dotenv file in the config directory so that
daemons started outside the user's shell (launchd, systemd user units) can
still load them. Parsing and rewriting go through python-dotenv.

The file is kept at ``0o600``. Upserting the same key/value twice leaves
the file byte-for-byte unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, set_key

from authchoice.config import get_config_dir

_ENV_FILENAME = ".env"


@dataclass(frozen=True)
class EnvFileUpdate:
    """Outcome of :func:`upsert_shared_env_var`.

    Attributes:
        path: The env file that holds the key.
        changed: ``False`` when the key already had this exact value.
    """

    path: Path
    changed: bool


def get_shared_env_path() -> Path:
    """Return the shared env file path (``<config_dir>/.env``)."""
    return get_config_dir() / _ENV_FILENAME


def read_shared_env_var(key: str, path: Optional[Path] = None) -> Optional[str]:
    """Return the value of *key* in the shared env file, or ``None`` if absent."""
    path = path or get_shared_env_path()
    if not path.is_file():
        return None
    return dotenv_values(path, interpolate=False).get(key)


def upsert_shared_env_var(
    key: str, value: str, path: Optional[Path] = None
) -> EnvFileUpdate:
    """Insert or replace ``KEY='value'`` in the shared env file.

    Comments, blank lines and other keys are kept in place. Every existing
    assignment of *key* (including ``export KEY=...``) is rewritten.

    Args:
        key: Environment variable name.
        value: Value to store, single-quoted on disk.
        path: Explicit env file. Defaults to :func:`get_shared_env_path`.

    Returns:
        An :class:`EnvFileUpdate` with the file path for user-facing
        confirmation.
    """
    path = path or get_shared_env_path()
    if read_shared_env_var(key, path) == value:
        return EnvFileUpdate(path=path, changed=False)

    path.parent.mkdir(parents=True, exist_ok=True)
    # Create it private before the first secret lands in it.
    path.touch(mode=0o600, exist_ok=True)
    set_key(str(path), key, value)
    path.chmod(0o600)
    return EnvFileUpdate(path=path, changed=True)
