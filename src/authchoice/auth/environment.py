"""Local vs. remote execution classification for OAuth callbacks.

An OAuth provider redirects the user's browser to a loopback URL such as
``http://localhost:1455/auth/callback``. That only works when the browser
runs on the same machine as this process. Over SSH, inside a dev container,
or on a headless Linux box the browser lives elsewhere, so the user has to
copy the redirect URL back by hand.

:func:`classify` reads only the environment mapping and the platform name;
it performs no other I/O and never fails.
"""

from __future__ import annotations

import enum
import os
import platform
from typing import Mapping, Optional

_SSH_VARS = ("SSH_CLIENT", "SSH_TTY", "SSH_CONNECTION")
_CONTAINER_VARS = ("REMOTE_CONTAINERS", "CODESPACES")
_DISPLAY_VARS = ("DISPLAY", "WAYLAND_DISPLAY")
_WSL_VARS = ("WSL_DISTRO_NAME", "WSL_INTEROP")


class ExecutionMode(str, enum.Enum):
    """Where the user's browser runs relative to this process."""

    LOCAL = "local"
    REMOTE = "remote"


def _is_set(environ: Mapping[str, str], names: tuple[str, ...]) -> bool:
    return any(environ.get(name) for name in names)


def classify(
    environ: Optional[Mapping[str, str]] = None,
    system: Optional[str] = None,
) -> ExecutionMode:
    """Decide whether a locally opened browser can reach a loopback callback.

    Args:
        environ: Environment mapping to inspect. Defaults to ``os.environ``.
        system: Platform name as returned by :func:`platform.system`.
            Defaults to the running platform.

    Returns:
        :attr:`ExecutionMode.REMOTE` for SSH sessions, remote containers /
        Codespaces, and Linux without a display (WSL excepted).
        :attr:`ExecutionMode.LOCAL` otherwise.
    """
    env = os.environ if environ is None else environ
    system = platform.system() if system is None else system

    if _is_set(env, _SSH_VARS):
        return ExecutionMode.REMOTE
    if _is_set(env, _CONTAINER_VARS):
        return ExecutionMode.REMOTE
    if system == "Linux" and not _is_set(env, _DISPLAY_VARS) and not _is_set(env, _WSL_VARS):
        return ExecutionMode.REMOTE
    return ExecutionMode.LOCAL


def is_remote_environment(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Shorthand for ``classify(environ) is ExecutionMode.REMOTE``."""
    return classify(environ) is ExecutionMode.REMOTE
