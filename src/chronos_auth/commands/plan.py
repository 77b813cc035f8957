"""Plan commands -- check whether a Jira host has an active Chronos plan."""

from __future__ import annotations

import typer

from chronos_auth.commands.common import build_manager, run
from chronos_auth.exit_codes import EXIT_GENERIC_FAILURE
from chronos_auth.output import format_response, info, warning

plan_app = typer.Typer(no_args_is_help=True)


@plan_app.command("check")
def plan_check(
    ctx: typer.Context,
    host: str = typer.Argument(help="Jira host or base URL."),
) -> None:
    """Exit 0 when *host* has an active plan, 1 otherwise."""
    active = run(build_manager(ctx).check_user_plan(host))
    format_response({"host": host, "active": active})
    if active:
        info(f"{host} has an active plan.")
        return
    warning(f"{host} has no active plan.")
    raise typer.Exit(code=EXIT_GENERIC_FAILURE)
