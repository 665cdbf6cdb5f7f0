"""Helpers for provider API keys: env lookup, masking, and input cleanup."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

PROVIDER_ENV_VARS: dict[str, tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "anthropic": ("ANTHROPIC_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "openrouter": ("OPENROUTER_API_KEY",),
}

_ASSIGNMENT_RE = re.compile(r"^(?:export\s+)?[A-Z_][A-Z0-9_]*\s*=\s*([^=\s].*)$")


@dataclass(frozen=True)
class EnvApiKey:
    """An API key found in the process environment.

    Attributes:
        api_key: The key value.
        source: Where it came from, e.g. ``"env: OPENAI_API_KEY"``.
    """

    api_key: str
    source: str


def resolve_env_api_key(
    provider: str, environ: Optional[Mapping[str, str]] = None
) -> Optional[EnvApiKey]:
    """Look up an API key for *provider* in the process environment.

    Variables are checked in the order listed in :data:`PROVIDER_ENV_VARS`;
    blank values are ignored.
    """
    env = os.environ if environ is None else environ
    for var in PROVIDER_ENV_VARS.get(provider, ()):
        value = (env.get(var) or "").strip()
        if value:
            return EnvApiKey(api_key=value, source=f"env: {var}")
    return None


def normalize_api_key_input(raw: str) -> str:
    """Clean up a pasted key.

    Strips whitespace, a pasted ``export NAME=`` / ``NAME=`` prefix, and
    matching surrounding quotes.
    """
    value = raw.strip()
    match = _ASSIGNMENT_RE.match(value)
    if match:
        value = match.group(1).strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1].strip()
    return value


def validate_api_key_input(value: str) -> Optional[str]:
    """Prompt validator: reject keys that are empty once normalised."""
    return None if normalize_api_key_input(value or "") else "Required"


def format_api_key_preview(raw: str, head: int = 4, tail: int = 4) -> str:
    """Mask a key for display, keeping a few characters at each end.

    Example::

        >>> format_api_key_preview("sk-abcdefghijklmnop")
        'sk-a…mnop'
    """
    value = raw.strip()
    if not value:
        return "…"
    if len(value) <= head + tail:
        short_head = min(2, len(value))
        short_tail = min(2, len(value) - short_head)
        if short_tail <= 0:
            return f"{value[:short_head]}…"
        return f"{value[:short_head]}…{value[-short_tail:]}"
    return f"{value[:head]}…{value[-tail:]}"
