"""Configuration management with XDG paths and atomic writes.

This module handles all persistent state for authchoice:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.authchoice/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Config file** -- A single :class:`~authchoice.models.Config` JSON file
  (``config.json`` in the config directory, or ``$AUTHCHOICE_CONFIG_PATH``).
  Managed via :func:`load_config` and :func:`save_config`.
* **Agent directory** -- Per-agent durable state (OAuth credentials) under
  the data directory, overridable with ``$AUTHCHOICE_AGENT_DIR``. See
  :func:`resolve_agent_dir`.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so that a crash never leaves a half-written config or
secret behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from authchoice.exceptions import ConfigError
from authchoice.models import Config

_APP_NAME = "authchoice"
_CONFIG_FILENAME = "config.json"

CONFIG_PATH_ENV = "AUTHCHOICE_CONFIG_PATH"
AGENT_DIR_ENV = "AUTHCHOICE_AGENT_DIR"
DEFAULT_AGENT_ID = "main"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/authchoice/`` (default ``~/.config/authchoice/``).
    On macOS/Windows: ``~/.authchoice/``.

    The shared ``.env`` secrets file lives here too.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (agent state, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/authchoice/`` (default ``~/.local/share/authchoice/``).
    On macOS/Windows: ``~/.authchoice/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_agent_dir(agent_id: Optional[str] = None) -> Path:
    """Return the durable state directory for an agent, creating it if necessary.

    ``$AUTHCHOICE_AGENT_DIR`` wins when set. Otherwise the directory is
    ``<data_dir>/agents/<agent_id>/agent`` with *agent_id* defaulting to
    :data:`DEFAULT_AGENT_ID`.

    Args:
        agent_id: Agent identifier, or ``None`` for the default agent.

    Returns:
        Absolute path to the agent directory (guaranteed to exist).
    """
    override = os.environ.get(AGENT_DIR_ENV, "").strip()
    if override:
        path = Path(override).expanduser()
    else:
        path = get_data_dir() / "agents" / (agent_id or DEFAULT_AGENT_ID) / "agent"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.

    Args:
        path: Destination file.
        data: Text content to write.
        mode: Optional permission bits applied to the temp file *before*
            content is written (``0o600`` for secrets).
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        if mode is not None:
            os.chmod(tmp_path, mode)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config file ---


def get_config_path() -> Path:
    """Return the config file path (``$AUTHCHOICE_CONFIG_PATH`` or ``<config_dir>/config.json``)."""
    override = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return get_config_dir() / _CONFIG_FILENAME


def load_config(path: Optional[Path] = None) -> Config:
    """Load the agent runtime configuration.

    Args:
        path: Explicit file to read. Defaults to :func:`get_config_path`.

    Returns:
        The deserialised :class:`~authchoice.models.Config`. A missing file
        yields an empty default config.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = path or get_config_path()
    if not path.is_file():
        return Config()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text) if text.strip() else {}
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: Config, path: Optional[Path] = None) -> Path:
    """Persist the configuration atomically.

    Args:
        config: The configuration to save.
        path: Explicit destination. Defaults to :func:`get_config_path`.

    Returns:
        The path that was written.
    """
    path = path or get_config_path()
    atomic_write(path, json.dumps(config.to_json_dict(), indent=2) + "\n")
    return path
