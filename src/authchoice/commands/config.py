"""Config commands -- inspect the agent runtime configuration.

Provides the ``authchoice config`` sub-command group. The configuration
itself is only modified by ``authchoice onboard``.
"""

from __future__ import annotations

import typer

from authchoice.output import format_response, info, print_data

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the current configuration as camelCase JSON.

    Example::

        authchoice config show
        authchoice --json config show
    """
    from authchoice.config import get_config_path, load_config

    info(f"Config file: {get_config_path()}")
    format_response(load_config().to_json_dict())


@config_app.command("path")
def config_path() -> None:
    """Print the config file path (stdout) and the shared env file path (stderr)."""
    from authchoice.config import get_config_path
    from authchoice.env_file import get_shared_env_path

    print_data(str(get_config_path()))
    info(f"Shared env file: {get_shared_env_path()}")
