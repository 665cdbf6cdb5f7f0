"""Typer application and CLI entry point for authchoice.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. The built-in commands (``onboard``, ``config``) are
registered at import time. Unhandled exceptions are written to a crash log
under the data directory.

See Also:
    :mod:`authchoice.config`: Config, data and agent directory resolution.
    :mod:`authchoice.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import sys
import traceback
from datetime import datetime

import typer

from authchoice import __version__
from authchoice.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE, EXIT_SUCCESS

app = typer.Typer(
    name="authchoice",
    help="Configure model-provider authentication for an AI agent runtime.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"authchoice {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route ``authchoice.*`` loggers to stderr through Rich when verbose."""
    from rich.logging import RichHandler

    from authchoice.output import get_output

    logger = logging.getLogger("authchoice")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    if verbose:
        handler = RichHandler(console=get_output().stderr_console, show_path=False)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.WARNING)


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~authchoice.output.OutputManager` from
    CLI flags and, with ``--verbose``, attaches a Rich log handler to the
    ``authchoice`` logger.
    """
    from authchoice.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)


# ------------------------------------------------------------------ #
# Built-in commands
# ------------------------------------------------------------------ #

from authchoice.commands.config import config_app  # noqa: E402
from authchoice.commands.onboard import onboard_command  # noqa: E402

app.command("onboard")(onboard_command)
app.add_typer(config_app, name="config", help="Inspect the agent configuration.")


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from authchoice.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``authchoice`` console script.

    Typer runs in non-standalone mode so that Ctrl-C reaches the OAuth
    listener as ``KeyboardInterrupt`` and, if it escapes a command, exits
    with 130 instead of Click's generic "Aborted!".

    Unhandled :class:`~authchoice.exceptions.AuthChoiceError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised.
    """
    try:
        rv = app(standalone_mode=False)
    except SystemExit:
        raise
    except (KeyboardInterrupt, typer.Abort):
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        from click.exceptions import ClickException

        from authchoice.exceptions import AuthChoiceError
        from authchoice.output import error

        if isinstance(exc, AuthChoiceError):
            error(str(exc))
            sys.exit(exc.exit_code)
        if isinstance(exc, ClickException):
            exc.show()
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
    # Click returns the exit code of typer.Exit in non-standalone mode.
    sys.exit(rv if isinstance(rv, int) else EXIT_SUCCESS)
