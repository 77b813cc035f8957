"""Hand-off of an authenticated session to the Jira API client.

The Jira API client itself is outside this package.  After a successful
direct login the cookies are packaged, together with the origin they belong
to, into an immutable :class:`~chronos_auth.models.SessionContext` and
passed to a :class:`SessionConfigurator`, the object that owns the API
client.  Nothing here keeps a reference to the context afterwards.

Example::

    context = build_session_context("https://team.example.com", cookies)
    await hand_off(jira_client, context)
"""

from __future__ import annotations

import inspect
from typing import Any, Iterable, Optional, Protocol
from urllib.parse import urlsplit

from chronos_auth.exceptions import InvalidUsageError
from chronos_auth.models import SessionContext, SessionCookie


class SessionConfigurator(Protocol):
    """Anything that can point a Jira API client at an authenticated session.

    ``configure`` may be a plain method or a coroutine function.
    """

    def configure(self, context: SessionContext) -> Any: ...


def build_session_context(
    base_url: str,
    cookies: Iterable[SessionCookie],
    pathname: Optional[str] = None,
) -> SessionContext:
    """Split *base_url* into protocol, hostname and port and attach *cookies*.

    Args:
        base_url: Jira base URL, e.g. ``https://team.example.com:8443/jira``.
        cookies: Cookies harvested by the direct login.
        pathname: Path of the Jira instance; defaults to the URL path or ``/``.

    Raises:
        InvalidUsageError: If *base_url* has no scheme or hostname.
    """
    parts = urlsplit(base_url)
    if not parts.scheme or not parts.hostname:
        raise InvalidUsageError(f"Invalid Jira base URL: {base_url}")
    return SessionContext(
        protocol=parts.scheme,
        hostname=parts.hostname,
        port=str(parts.port) if parts.port else "",
        pathname=pathname or parts.path or "/",
        cookies=tuple(cookies),
    )


async def hand_off(configurator: SessionConfigurator, context: SessionContext) -> Any:
    """Pass *context* to *configurator*, awaiting it if ``configure`` is async."""
    result = configurator.configure(context)
    if inspect.isawaitable(result):
        result = await result
    return result
