"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~authchoice.exceptions.AuthChoiceError` subclass.
Wrapper scripts running a non-interactive onboarding can inspect the exit
code to tell a missing option apart from a rejected credential.

Example::

    $ authchoice onboard --auth-choice openai-private-endpoint --non-interactive
    Error: Missing required options: --openai-private-provider-id, ...
    $ echo $?
    1
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, or required non-interactive options were missing."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_AUTH_FAILURE = 3
"""Authentication failed (rejected key, OAuth exchange error)."""

EXIT_CANCELLED = 130
"""The user interrupted an interactive prompt (Ctrl-C / EOF)."""
