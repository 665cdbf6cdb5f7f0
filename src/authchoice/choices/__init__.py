"""Auth choice handlers and the dispatcher that routes to them.

- :mod:`~authchoice.choices.base` -- handler interface, params and result.
- :mod:`~authchoice.choices.api_key` -- provider API keys.
- :mod:`~authchoice.choices.private_endpoint` -- OpenAI-compatible endpoints.
- :mod:`~authchoice.choices.openai_codex` -- ChatGPT sign-in via OAuth.
- :mod:`~authchoice.choices.dispatcher` -- registry and entry point.
- :mod:`~authchoice.choices.non_interactive` -- flag-only application.
"""

from authchoice.choices.base import (
    ApplyAuthChoiceParams,
    ApplyAuthChoiceResult,
    AuthChoiceHandler,
)
from authchoice.choices.dispatcher import (
    AuthChoiceDispatcher,
    apply_auth_choice,
    create_default_dispatcher,
)
from authchoice.choices.non_interactive import apply_non_interactive_auth_choice

__all__ = [
    "ApplyAuthChoiceParams",
    "ApplyAuthChoiceResult",
    "AuthChoiceDispatcher",
    "AuthChoiceHandler",
    "apply_auth_choice",
    "apply_non_interactive_auth_choice",
    "create_default_dispatcher",
]
