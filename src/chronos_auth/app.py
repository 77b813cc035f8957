"""Typer application and CLI entry point for chronos_auth.

This module wires together the top-level Typer application and registers
the sub-command groups (``login``, ``oauth``, ``plan``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  It installs a SIGINT handler, invokes the Typer app,
maps :class:`~chronos_auth.exceptions.ChronosAuthError` to its exit code,
and writes a crash log for anything unexpected.

See Also:
    :mod:`chronos_auth.config`: Configuration resolution.
    :mod:`chronos_auth.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from chronos_auth import __version__
from chronos_auth.commands.config import config_app
from chronos_auth.commands.login import login_app
from chronos_auth.commands.oauth import oauth_app
from chronos_auth.commands.plan import plan_app
from chronos_auth.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="chronos-auth",
    help="Establish a Jira session for the Chronos desktop tracker.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(login_app, name="login", help="Log in with one of the supported strategies.")
app.add_typer(oauth_app, name="oauth", help="OAuth handshake helpers.")
app.add_typer(plan_app, name="plan", help="Plan eligibility checks.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"chronos-auth {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="Chronos backend URL (overrides config and env)."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Request timeout in seconds."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Trace requests on stderr."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~chronos_auth.output.OutputManager` and
    stores the connection overrides in ``ctx.obj`` for the sub-commands.
    """
    from chronos_auth.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url
    ctx.obj["timeout"] = timeout


def _configured_format() -> Any:
    """Return the output format stored in the config file, ``AUTO`` if unusable."""
    from chronos_auth.config import load_global_config
    from chronos_auth.exceptions import ConfigError
    from chronos_auth.output import OutputFormat

    try:
        return OutputFormat(load_global_config().output.format)
    except (ConfigError, ValueError):
        return OutputFormat.AUTO


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from chronos_auth.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``chronos-auth`` console script.

    :class:`~chronos_auth.exceptions.ChronosAuthError` instances cause a
    clean exit with the error's ``exit_code``.  All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from chronos_auth.exceptions import ChronosAuthError
        from chronos_auth.output import error

        if isinstance(exc, ChronosAuthError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
