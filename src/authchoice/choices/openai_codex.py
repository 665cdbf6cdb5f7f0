"""OpenAI Codex (ChatGPT sign-in) OAuth auth choice.

Runs :func:`~authchoice.auth.oauth_flow.login_openai_codex` in the mode
reported by :func:`~authchoice.auth.environment.classify`, stores the
credentials, and records the ``openai-codex:default`` auth profile.

Sign-in failure is not fatal to onboarding. Any error raised while the flow
runs is reported once through ``runtime.error`` and the configuration comes
back unchanged, so the user can pick another auth choice.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from authchoice.auth.credential_store import write_oauth_credentials
from authchoice.auth.environment import ExecutionMode, classify
from authchoice.auth.oauth_flow import VpsAwareOAuthHandlers, login_openai_codex
from authchoice.browser import open_url as default_open_url
from authchoice.choices.base import (
    ApplyAuthChoiceParams,
    ApplyAuthChoiceResult,
    AuthChoiceHandler,
)
from authchoice.config import resolve_agent_dir
from authchoice.merge import (
    OPENAI_CODEX_DEFAULT_MODEL,
    OPENAI_CODEX_PROVIDER,
    apply_auth_profile_config,
    apply_openai_codex_model_default,
)
from authchoice.models import AuthChoice, OAuthCredentials

logger = logging.getLogger(__name__)

OPENAI_CODEX_PROFILE_ID = f"{OPENAI_CODEX_PROVIDER}:default"

REMOTE_NOTE = "\n".join(
    [
        "You are running in a remote/VPS environment.",
        "A URL will be shown for you to open in your LOCAL browser.",
        "After signing in, paste the redirect URL back here.",
    ]
)
LOCAL_NOTE = "\n".join(
    [
        "Browser will open for OpenAI authentication.",
        "If the callback doesn't auto-complete, paste the redirect URL.",
        "OpenAI OAuth uses localhost:1455 for the callback.",
    ]
)
OAUTH_HELP = (
    "Trouble with OAuth? Re-run with --verbose for details, "
    "or choose --auth-choice openai-api-key instead."
)

LoginFn = Callable[
    [ExecutionMode, VpsAwareOAuthHandlers, Optional[threading.Event]], OAuthCredentials
]


class OpenAICodexChoiceHandler(AuthChoiceHandler):
    """Handles ``openai-codex``.

    Args:
        login: Runs the OAuth flow. Swapped out in tests.
        classify_environment: Returns the execution mode.
        open_url: Browser launcher handed to the OAuth handlers.
        cancel_event: Optional event that aborts a pending callback wait.
    """

    def __init__(
        self,
        login: LoginFn = login_openai_codex,
        classify_environment: Callable[[], ExecutionMode] = classify,
        open_url: Callable[[str], None] = default_open_url,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self._login = login
        self._classify = classify_environment
        self._open_url = open_url
        self._cancel_event = cancel_event

    @property
    def choices(self) -> tuple[AuthChoice, ...]:
        return (AuthChoice.OPENAI_CODEX,)

    def apply(self, params: ApplyAuthChoiceParams) -> Optional[ApplyAuthChoiceResult]:
        if params.auth_choice is not AuthChoice.OPENAI_CODEX:
            return None

        prompter = params.prompter
        mode = self._classify()
        prompter.note(
            REMOTE_NOTE if mode is ExecutionMode.REMOTE else LOCAL_NOTE,
            title="OpenAI Codex OAuth",
        )

        spin = prompter.progress("Starting OAuth flow…")
        try:
            handlers = VpsAwareOAuthHandlers(
                mode, prompter, params.runtime, spin, open_url=self._open_url
            )
            credentials = self._login(mode, handlers, self._cancel_event)
            spin.stop("OpenAI OAuth complete")

            agent_dir = params.agent_dir or resolve_agent_dir(params.agent_id)
            write_oauth_credentials(OPENAI_CODEX_PROVIDER, credentials, agent_dir)
            config = apply_auth_profile_config(
                params.config,
                OPENAI_CODEX_PROFILE_ID,
                OPENAI_CODEX_PROVIDER,
                "oauth",
                email=credentials.email,
            )
        except Exception as exc:
            logger.debug("OpenAI Codex OAuth failed", exc_info=True)
            spin.stop("OpenAI OAuth failed")
            params.runtime.error(str(exc))
            prompter.note(OAUTH_HELP, title="OAuth help")
            return ApplyAuthChoiceResult(config=params.config)

        override: Optional[str] = None
        if params.set_default_model:
            config, changed = apply_openai_codex_model_default(config)
            if changed:
                prompter.note(
                    f"Default model set to {OPENAI_CODEX_DEFAULT_MODEL}",
                    title="Model configured",
                )
        else:
            override = OPENAI_CODEX_DEFAULT_MODEL
            if params.agent_id:
                prompter.note(
                    f'Default model set to {override} for agent "{params.agent_id}".',
                    title="Model configured",
                )
        return ApplyAuthChoiceResult(config=config, agent_model_override=override)
