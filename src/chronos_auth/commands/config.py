"""Config commands -- inspect and edit the global configuration file.

Typical usage::

    chronos-auth config show
    chronos-auth config set api_url https://chronos.example.com
    chronos-auth config set timeout 10
"""

from __future__ import annotations

import typer

from chronos_auth.output import error, format_response, success

config_app = typer.Typer(no_args_is_help=True)

_SETTABLE_KEYS = ("api_url", "timeout", "verify_ssl", "output_format")


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Print the effective configuration (file, environment, and flags merged)."""
    from chronos_auth.config import resolve_config

    obj = ctx.obj or {}
    config = resolve_config(cli_api_url=obj.get("api_url"), cli_timeout=obj.get("timeout"))
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help=f"One of: {', '.join(_SETTABLE_KEYS)}."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Update one key of the global configuration file."""
    from chronos_auth.config import load_global_config, save_global_config

    config = load_global_config()
    if key == "api_url":
        config.api_url = value.rstrip("/")
    elif key == "timeout":
        try:
            config.request.timeout = float(value)
        except ValueError:
            error(f"timeout must be a number of seconds, got '{value}'.")
            raise typer.Exit(code=2) from None
    elif key == "verify_ssl":
        lowered = value.lower()
        if lowered not in ("true", "false", "1", "0", "yes", "no"):
            error(f"verify_ssl must be true or false, got '{value}'.")
            raise typer.Exit(code=2)
        config.request.verify_ssl = lowered in ("true", "1", "yes")
    elif key == "output_format":
        if value not in ("auto", "json", "plain", "rich"):
            error(f"output_format must be auto, json, plain or rich, got '{value}'.")
            raise typer.Exit(code=2)
        config.output.format = value
    else:
        error(f"Unknown key '{key}'. Settable keys: {', '.join(_SETTABLE_KEYS)}.")
        raise typer.Exit(code=2)

    save_global_config(config)
    success(f"Set {key}.")
