"""Login commands -- one sub-command per strategy.

Provides the ``chronos-auth login`` group.  Secrets are never taken as
plain arguments; they are read from a credential source (``env:VAR``,
``file:/path`` or ``prompt``) via
:func:`~chronos_auth.config.resolve_credential`.

Typical usage::

    chronos-auth login basic team.example.com -u alice
    chronos-auth login direct https://team.example.com -u alice -s env:JIRA_PASSWORD
    chronos-auth login auto --header "x-access-token: ..."
"""

from __future__ import annotations

from typing import Optional

import typer

from chronos_auth.auth import static_headers
from chronos_auth.commands.common import build_manager, report_outcome, run
from chronos_auth.config import resolve_credential
from chronos_auth.exceptions import InvalidUsageError
from chronos_auth.models import (
    BasicCredentials,
    DelegatedTokenCredentials,
    DirectLoginRequest,
)
from chronos_auth.session import build_session_context

login_app = typer.Typer(no_args_is_help=True)


@login_app.command("basic")
def login_basic(
    ctx: typer.Context,
    host: str = typer.Argument(help="Jira host, e.g. team.example.com."),
    username: str = typer.Option(..., "--username", "-u", help="Jira username."),
    password_source: str = typer.Option(
        "prompt",
        "--password-source",
        "-s",
        help="Password source: env:VAR, file:/path, prompt.",
    ),
    port: str = typer.Option("", "--port", help="Jira port, empty for the default."),
    protocol: str = typer.Option("https", "--protocol", help="http or https."),
    path_prefix: str = typer.Option("/", "--path-prefix", help="Jira context path."),
) -> None:
    """Validate and store basic credentials through the Chronos backend."""
    credentials = BasicCredentials(
        host=host,
        username=username,
        password=resolve_credential(password_source, prompt="Jira password: "),
        port=port,
        protocol=protocol,
        path_prefix=path_prefix,
    )
    outcome = run(build_manager(ctx).login_basic(credentials))
    report_outcome(outcome)


@login_app.command("oauth")
def login_oauth(
    ctx: typer.Context,
    base_url: str = typer.Argument(help="Jira base URL."),
    token_source: str = typer.Option(
        "prompt", "--token-source", help="OAuth token source: env:VAR, file:/path, prompt."
    ),
    token_secret_source: str = typer.Option(
        "prompt",
        "--token-secret-source",
        help="OAuth token secret source: env:VAR, file:/path, prompt.",
    ),
) -> None:
    """Submit an OAuth token pair obtained after browser consent."""
    credentials = DelegatedTokenCredentials(
        base_url=base_url,
        token=resolve_credential(token_source, prompt="OAuth token: "),
        token_secret=resolve_credential(token_secret_source, prompt="OAuth token secret: "),
    )
    outcome = run(build_manager(ctx).login_oauth(credentials))
    report_outcome(outcome)


@login_app.command("auto")
def login_auto(
    ctx: typer.Context,
    header: Optional[list[str]] = typer.Option(
        None,
        "--header",
        "-H",
        help="Header identifying this client, as 'Name: value'. Repeatable.",
    ),
) -> None:
    """Reuse credentials the Chronos backend already stores."""
    headers = parse_headers(header or [])
    manager = build_manager(ctx, header_provider=static_headers(headers))
    outcome = run(manager.login_automatic())
    report_outcome(outcome)


@login_app.command("direct")
def login_direct(
    ctx: typer.Context,
    base_url: str = typer.Argument(help="Jira base URL, e.g. https://team.example.com."),
    username: str = typer.Option(..., "--username", "-u", help="Jira username."),
    password_source: str = typer.Option(
        "prompt",
        "--password-source",
        "-s",
        help="Password source: env:VAR, file:/path, prompt.",
    ),
    pathname: str = typer.Option("/", "--pathname", help="Path assigned to the cookies."),
    protocol: Optional[str] = typer.Option(
        None, "--protocol", help="http or https; defaults to the URL scheme."
    ),
) -> None:
    """Log in to Jira directly and print the session context."""
    if protocol is None:
        protocol = base_url.split("://", 1)[0] if "://" in base_url else "https"
    request = DirectLoginRequest(
        base_url=base_url,
        username=username,
        password=resolve_credential(password_source, prompt="Jira password: "),
        pathname=pathname,
        protocol=protocol,
    )
    outcome = run(build_manager(ctx).login_direct(request))
    data = None
    if outcome.ok:
        context = build_session_context(base_url, outcome.cookies, pathname)
        data = context.model_dump(mode="json", by_alias=True)
    report_outcome(outcome, data=data)


def parse_headers(values: list[str]) -> dict[str, str]:
    """Parse ``Name: value`` strings into a header mapping.

    Raises:
        InvalidUsageError: If a value has no colon or an empty name.
    """
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise InvalidUsageError(f"Header must look like 'Name: value', got '{raw}'")
        headers[name.strip()] = value.strip()
    return headers
