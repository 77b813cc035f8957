"""Helpers shared by the CLI command groups."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Optional, TypeVar

import typer

from chronos_auth.auth import AuthManager, HeaderProvider
from chronos_auth.config import resolve_config
from chronos_auth.models import AuthOutcome
from chronos_auth.output import error, format_response, success

T = TypeVar("T")


def build_manager(
    ctx: typer.Context,
    header_provider: Optional[HeaderProvider] = None,
) -> AuthManager:
    """Create an :class:`AuthManager` from the root options stored on *ctx*."""
    obj = ctx.obj or {}
    config = resolve_config(
        cli_api_url=obj.get("api_url"),
        cli_timeout=obj.get("timeout"),
    )
    return AuthManager(config, header_provider=header_provider)


def run(coro: Awaitable[T]) -> T:
    """Run *coro* to completion on a fresh event loop."""
    return asyncio.run(coro)  # type: ignore[arg-type]


def report_outcome(
    outcome: AuthOutcome,
    data: Any = None,
    message: Optional[str] = None,
) -> None:
    """Print a successful outcome's data, or the error and exit with its code."""
    if outcome.error is not None:
        error(outcome.error.message)
        raise typer.Exit(code=outcome.exit_code)
    if data is None:
        data = outcome.record
    if data is not None:
        format_response(data)
    success(message or f"Logged in ({outcome.method}).")
