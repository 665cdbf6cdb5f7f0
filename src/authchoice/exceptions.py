"""Exception hierarchy for authchoice.

All exceptions inherit from :class:`AuthChoiceError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`authchoice.exit_codes`.
The top-level error handler in :func:`authchoice.app.main` catches
``AuthChoiceError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

OAuth errors are special: the auth-choice dispatcher catches every
:class:`OAuthError` at the OAuth boundary and reports it instead of letting
it abort the onboarding command.

Subclass hierarchy::

    AuthChoiceError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- AuthError              (exit 3)
    |   +-- OAuthError
    |       +-- OAuthCancelledError
    +-- PromptCancelledError   (exit 130)
    +-- ConfigError            (exit 1)
"""

from authchoice.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CANCELLED,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class AuthChoiceError(Exception):
    """Base exception for all authchoice errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(AuthChoiceError):
    """Raised for invalid CLI arguments (unknown auth choice, bad flag combination)."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(AuthChoiceError):
    """Raised when acquiring or validating a credential fails."""

    exit_code = EXIT_AUTH_FAILURE


class OAuthError(AuthError):
    """Raised for any failure inside the OAuth authorization-code flow.

    Covers listener bind failures, provider-reported authorization errors,
    state mismatches, unparseable paste-back input, and token-exchange
    failures.
    """


class OAuthCancelledError(OAuthError):
    """Raised when an in-flight OAuth flow is cancelled by the user."""


class PromptCancelledError(AuthChoiceError):
    """Raised when the user aborts an interactive prompt (Ctrl-C or EOF)."""

    exit_code = EXIT_CANCELLED


class ConfigError(AuthChoiceError):
    """Raised for configuration problems (unreadable or invalid JSON config)."""

    exit_code = EXIT_GENERIC_FAILURE
