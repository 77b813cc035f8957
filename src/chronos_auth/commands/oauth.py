"""OAuth commands -- start the browser consent flow for a Jira server."""

from __future__ import annotations

import typer

from chronos_auth.commands.common import build_manager, report_outcome, run
from chronos_auth.output import suggest

oauth_app = typer.Typer(no_args_is_help=True)


@oauth_app.command("init")
def oauth_init(
    ctx: typer.Context,
    base_url: str = typer.Argument(help="Jira base URL."),
) -> None:
    """Print the request token and authorization URL for *base_url*."""
    outcome = run(build_manager(ctx).initiate_oauth(base_url))
    report_outcome(outcome, message="OAuth handshake started.")
    suggest(
        f"Open the authorization URL, then: chronos-auth login oauth {base_url} "
        "--token-source ... --token-secret-source ..."
    )
