"""OAuth2 Authorization Code flow with PKCE, local or remote.

:class:`OAuthFlow` performs the full authorization-code grant with PKCE
(:rfc:`7636`) against an :class:`~authchoice.auth.providers.OAuthProviderSpec`:

1. Builds the authorization URL with a fresh code challenge and ``state``.
2. **Local mode** -- binds a loopback HTTP listener on the provider's fixed
   callback port, opens the browser, and blocks until the redirect arrives
   or the flow is cancelled. If the port is taken it falls back to the
   paste-back prompt.
   **Remote mode** -- never binds a port; prints the URL and asks the user
   to paste back the redirect URL from the browser on their own machine.
3. Exchanges the authorization code for access and refresh tokens.

The flow raises :class:`~authchoice.exceptions.OAuthError` (or its
:class:`~authchoice.exceptions.OAuthCancelledError` subclass) on failure.
Turning that into a non-fatal "no credentials" outcome is the job of the
caller, see :mod:`authchoice.choices.openai_codex`.

User-facing side effects go through :class:`VpsAwareOAuthHandlers`, which
adapts the URL announcement and the paste-back prompt to the execution mode.
"""

from __future__ import annotations

import base64
import hashlib
import html
import json
import logging
import secrets
import threading
import time
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Optional
from urllib.parse import parse_qs, urlencode, urlparse

import httpx

from authchoice.auth.environment import ExecutionMode
from authchoice.auth.providers import OPENAI_CODEX, OAuthProviderSpec
from authchoice.browser import open_url as default_open_url
from authchoice.exceptions import OAuthCancelledError, OAuthError
from authchoice.models import OAuthCredentials
from authchoice.prompter import ProgressSink, Prompter, Runtime, require_non_empty

logger = logging.getLogger(__name__)

LOCAL_BROWSER_MESSAGE = "Complete sign-in in browser…"
PASTE_PROMPT = "Paste the redirect URL (or authorization code)"


def generate_pkce_pair() -> tuple[str, str]:
    """Generate a PKCE code_verifier and code_challenge (S256).

    Returns:
        A tuple of ``(code_verifier, code_challenge)``.
    """
    # RFC 7636: 43-128 characters from the unreserved character set
    code_verifier = secrets.token_urlsafe(64)[:128]
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    code_challenge = base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
    return code_verifier, code_challenge


def build_authorize_url(provider: OAuthProviderSpec, code_challenge: str, state: str) -> str:
    """Return the provider's authorization URL for one login attempt."""
    params: dict[str, str] = {
        "response_type": "code",
        "client_id": provider.client_id,
        "redirect_uri": provider.redirect_uri,
        "scope": provider.scope,
        "code_challenge": code_challenge,
        "code_challenge_method": "S256",
        "state": state,
    }
    params.update(provider.extra_authorize_params)
    return f"{provider.authorize_url}?{urlencode(params)}"


@dataclass(frozen=True)
class AuthorizationInput:
    """Code and state recovered from user-pasted text."""

    code: Optional[str]
    state: Optional[str]


def _first(params: dict[str, list[str]], key: str) -> Optional[str]:
    values = params.get(key)
    return values[0] if values else None


def parse_authorization_input(value: str) -> AuthorizationInput:
    """Extract the authorization code (and state) from pasted text.

    Accepts a full redirect URL, a bare query string (``code=...&state=...``),
    the ``code#state`` form some providers display, or a bare code.
    """
    text = value.strip()
    if not text:
        return AuthorizationInput(code=None, state=None)

    parsed = urlparse(text)
    if parsed.scheme and parsed.netloc:
        params = parse_qs(parsed.query)
        return AuthorizationInput(code=_first(params, "code"), state=_first(params, "state"))

    if "#" in text:
        code, _, state = text.partition("#")
        return AuthorizationInput(code=code or None, state=state or None)

    if "code=" in text:
        params = parse_qs(text.lstrip("?"))
        return AuthorizationInput(code=_first(params, "code"), state=_first(params, "state"))

    return AuthorizationInput(code=text, state=None)


def extract_account_id(access_token: str) -> Optional[str]:
    """Read the ChatGPT account id from an access-token JWT, if present."""
    parts = access_token.split(".")
    if len(parts) != 3:
        return None
    payload = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload))
    except (ValueError, json.JSONDecodeError):
        return None
    if not isinstance(claims, dict):
        return None
    auth_claim = claims.get("https://api.openai.com/auth")
    if not isinstance(auth_claim, dict):
        return None
    account_id = auth_claim.get("chatgpt_account_id") or auth_claim.get("account_id")
    return str(account_id) if account_id else None


# ------------------------------------------------------------------ #
# Mode-aware user interaction
# ------------------------------------------------------------------ #


class VpsAwareOAuthHandlers:
    """User-facing callbacks for :class:`OAuthFlow`, adapted to the execution mode.

    Args:
        mode: Result of :func:`~authchoice.auth.environment.classify`.
        prompter: Used for the remote-mode paste-back prompt.
        runtime: Used to print the authorization URL.
        progress: Spinner started by the caller; updated in local mode and
            stopped before the URL is printed in remote mode.
        open_url: Browser launcher. Only called in local mode.
        local_browser_message: Spinner text while waiting for the browser.
    """

    def __init__(
        self,
        mode: ExecutionMode,
        prompter: Prompter,
        runtime: Runtime,
        progress: ProgressSink,
        open_url: Callable[[str], None] = default_open_url,
        local_browser_message: str = LOCAL_BROWSER_MESSAGE,
    ) -> None:
        self._mode = mode
        self._prompter = prompter
        self._runtime = runtime
        self._progress = progress
        self._open_url = open_url
        self._local_browser_message = local_browser_message

    @property
    def mode(self) -> ExecutionMode:
        return self._mode

    def on_auth(self, url: str) -> None:
        """Present the authorization URL."""
        if self._mode is ExecutionMode.REMOTE:
            # The prompt that follows needs a clean line, not a spinner.
            self._progress.stop("OAuth URL ready")
            self._runtime.log(f"\nOpen this URL in your LOCAL browser:\n\n{url}\n")
            return
        self._progress.update(self._local_browser_message)
        self._open_url(url)
        self._runtime.log(f"Open: {url}")

    def on_prompt(self, message: str) -> str:
        """Ask the user to paste the redirect URL back."""
        if self._mode is ExecutionMode.LOCAL:
            # Local mode only prompts when the listener could not bind.
            self._progress.stop()
        return self._prompter.text(message, validate=require_non_empty).strip()

    def on_progress(self, message: str) -> None:
        self._progress.update(message)


# ------------------------------------------------------------------ #
# Loopback listener
# ------------------------------------------------------------------ #


class _CallbackServer(ThreadingHTTPServer):
    """Single-purpose HTTP server that records the first valid redirect.

    Each connection gets its own daemon thread, so a browser that opens a
    speculative connection and never sends on it cannot hold up the real
    redirect or ``shutdown()``.
    """

    daemon_threads = True
    block_on_close = False

    def __init__(self, address: tuple[str, int], expected_path: str, expected_state: str) -> None:
        super().__init__(address, _CallbackHandler)
        self.expected_path = expected_path
        self.expected_state = expected_state
        self.code: Optional[str] = None
        self.error: Optional[str] = None
        self.done = threading.Event()
        self._lock = threading.Lock()

    def finish_with(self, code: Optional[str] = None, error: Optional[str] = None) -> None:
        with self._lock:
            if self.done.is_set():
                return
            self.code = code
            self.error = error
            self.done.set()


class _CallbackHandler(BaseHTTPRequestHandler):
    server: _CallbackServer
    # Idle connections are dropped after this many seconds.
    timeout = 5.0

    def do_GET(self) -> None:
        parsed = urlparse(self.path)
        if parsed.path != self.server.expected_path:
            self._respond(404, "Not found.")
            return

        params = parse_qs(parsed.query)
        if "error" in params:
            reason = params["error"][0]
            description = _first(params, "error_description")
            if description:
                reason = f"{reason} - {description}"
            self.server.finish_with(error=f"OAuth authorization failed: {reason}")
            self._respond(200, f"Authorization failed: {reason}")
        elif _first(params, "state") != self.server.expected_state:
            self.server.finish_with(error="OAuth state mismatch in callback")
            self._respond(400, "State mismatch. Start the sign-in again from the terminal.")
        elif "code" in params:
            self.server.finish_with(code=params["code"][0])
            self._respond(
                200,
                "Authorization successful! You can close this window and return to the terminal.",
            )
        else:
            self.server.finish_with(error="No authorization code received from callback")
            self._respond(400, "No authorization code received.")

    def _respond(self, status: int, body: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.end_headers()
        self.wfile.write(f"<html><body><h2>{html.escape(body)}</h2></body></html>".encode("utf-8"))

    def log_message(self, format: str, *args: Any) -> None:
        # Suppress default request logging
        pass


class CallbackListener:
    """Loopback listener for the OAuth redirect, used as a context manager.

    The socket is bound on ``__enter__`` and always released on ``__exit__``,
    whether the wait succeeded, failed, or was cancelled.

    Args:
        port: Port to bind (the provider's registered callback port).
        path: Callback path to accept; other paths get a 404.
        state: Expected ``state`` value.
        host: Interface to bind.
    """

    def __init__(self, port: int, path: str, state: str, host: str = "127.0.0.1") -> None:
        self._address = (host, port)
        self._path = path
        self._state = state
        self._server: Optional[_CallbackServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        """The bound port (useful when constructed with port ``0``)."""
        if self._server is None:
            return self._address[1]
        return self._server.server_address[1]

    def __enter__(self) -> CallbackListener:
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def start(self) -> None:
        """Bind the port and start serving on a daemon thread.

        Raises:
            OAuthError: If the port cannot be bound.
        """
        try:
            self._server = _CallbackServer(self._address, self._path, self._state)
        except OSError as exc:
            raise OAuthError(
                f"Could not listen on localhost:{self._address[1]} for the OAuth callback: {exc}"
            ) from exc
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            kwargs={"poll_interval": 0.1},
            daemon=True,
        )
        self._thread.start()
        logger.debug("OAuth callback listener bound on port %s", self.port)

    def wait(self, cancel_event: Optional[threading.Event] = None, poll_interval: float = 0.2) -> str:
        """Block until the redirect arrives and return the authorization code.

        Raises:
            OAuthCancelledError: If *cancel_event* is set or the user hits
                Ctrl-C while waiting.
            OAuthError: If the provider reported an error or the redirect
                was invalid.
        """
        if self._server is None:
            raise OAuthError("Callback listener is not running")
        server = self._server
        try:
            while not server.done.wait(poll_interval):
                if cancel_event is not None and cancel_event.is_set():
                    raise OAuthCancelledError("OAuth sign-in cancelled.")
        except KeyboardInterrupt:
            raise OAuthCancelledError("OAuth sign-in cancelled.") from None

        if server.error:
            raise OAuthError(server.error)
        if not server.code:
            raise OAuthError("No authorization code received from callback")
        return server.code

    def close(self) -> None:
        """Stop serving and release the port. Safe to call more than once."""
        server, self._server = self._server, None
        if server is None:
            return
        server.shutdown()
        server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None


# ------------------------------------------------------------------ #
# Token exchange
# ------------------------------------------------------------------ #


def exchange_code(
    provider: OAuthProviderSpec,
    code: str,
    code_verifier: str,
    timeout: float = 30.0,
) -> OAuthCredentials:
    """Exchange an authorization code for durable credentials.

    Raises:
        OAuthError: On HTTP errors, invalid JSON, or a response missing
            ``access_token``, ``refresh_token`` or ``expires_in``.
        OAuthCancelledError: If interrupted while the request is in flight.
    """
    data: dict[str, str] = {
        "grant_type": "authorization_code",
        "client_id": provider.client_id,
        "code": code,
        "code_verifier": code_verifier,
        "redirect_uri": provider.redirect_uri,
    }

    try:
        response = httpx.post(
            provider.token_url,
            data=data,
            headers={"Accept": "application/json"},
            timeout=timeout,
        )
        response.raise_for_status()
        token_data: dict[str, Any] = response.json()
    except httpx.HTTPStatusError as exc:
        raise OAuthError(
            f"Token exchange failed with status {exc.response.status_code}: "
            f"{exc.response.text}"
        ) from exc
    except httpx.HTTPError as exc:
        raise OAuthError(f"Token exchange failed: {exc}") from exc
    except ValueError as exc:
        raise OAuthError(f"Token endpoint returned invalid JSON: {exc}") from exc
    except KeyboardInterrupt:
        raise OAuthCancelledError("OAuth sign-in cancelled.") from None

    access = token_data.get("access_token")
    refresh = token_data.get("refresh_token")
    expires_in = token_data.get("expires_in")
    if not access:
        raise OAuthError("Token response missing 'access_token' field")
    if not refresh:
        raise OAuthError("Token response missing 'refresh_token' field")
    if not isinstance(expires_in, (int, float)):
        raise OAuthError("Token response missing 'expires_in' field")

    return OAuthCredentials(
        access=access,
        refresh=refresh,
        expires=int((time.time() + float(expires_in)) * 1000),
        account_id=extract_account_id(access),
    )


# ------------------------------------------------------------------ #
# Orchestration
# ------------------------------------------------------------------ #


class OAuthFlow:
    """One authorization-code login attempt for one provider.

    Args:
        provider: The provider to sign in to.
        mode: Local (loopback listener) or remote (paste-back).
        handlers: Mode-aware user interaction callbacks.
        cancel_event: Optional event; setting it aborts the callback wait.
        http_timeout: Network timeout for the token request, in seconds.
    """

    def __init__(
        self,
        provider: OAuthProviderSpec,
        mode: ExecutionMode,
        handlers: VpsAwareOAuthHandlers,
        cancel_event: Optional[threading.Event] = None,
        http_timeout: float = 30.0,
    ) -> None:
        self._provider = provider
        self._mode = mode
        self._handlers = handlers
        self._cancel_event = cancel_event
        self._http_timeout = http_timeout

    def login(self) -> OAuthCredentials:
        """Run the flow to completion and return the credentials."""
        code_verifier, code_challenge = generate_pkce_pair()
        state = secrets.token_hex(16)
        url = build_authorize_url(self._provider, code_challenge, state)

        if self._mode is ExecutionMode.LOCAL:
            code = self._wait_for_callback(url, state)
        else:
            code = self._prompt_for_code(url, state)

        self._check_cancelled()
        self._handlers.on_progress("Exchanging authorization code…")
        credentials = exchange_code(
            self._provider, code, code_verifier, timeout=self._http_timeout
        )
        logger.debug("%s OAuth token exchange succeeded", self._provider.name)
        return credentials

    def _wait_for_callback(self, url: str, state: str) -> str:
        listener = CallbackListener(
            self._provider.callback_port, self._provider.callback_path, state
        )
        try:
            listener.start()
        except OAuthError as exc:
            # Port taken: the redirect URL still shows in the browser's
            # address bar, so the user can paste it back.
            logger.debug("%s; falling back to paste-back", exc)
            return self._prompt_for_code(url, state)
        try:
            self._handlers.on_auth(url)
            return listener.wait(self._cancel_event)
        finally:
            listener.close()

    def _prompt_for_code(self, url: str, state: str) -> str:
        self._handlers.on_auth(url)
        parsed = parse_authorization_input(self._handlers.on_prompt(PASTE_PROMPT))
        if parsed.state and parsed.state != state:
            raise OAuthError("OAuth state mismatch; paste the URL from this sign-in attempt.")
        if not parsed.code:
            raise OAuthError("No authorization code found in the pasted input.")
        return parsed.code

    def _check_cancelled(self) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise OAuthCancelledError("OAuth sign-in cancelled.")


def login_openai_codex(
    mode: ExecutionMode,
    handlers: VpsAwareOAuthHandlers,
    cancel_event: Optional[threading.Event] = None,
) -> OAuthCredentials:
    """Sign in to OpenAI (ChatGPT / Codex) and return the credentials."""
    return OAuthFlow(OPENAI_CODEX, mode, handlers, cancel_event).login()
