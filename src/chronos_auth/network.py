"""Classification of transport failures into a stable, user-facing vocabulary.

Failures reach this module in two shapes:

* **httpx exceptions** raised by the broker client or the direct login.
  :func:`code_for_exception` inspects the exception type and the ``OSError``
  found in its cause chain (``errno``, :class:`socket.gaierror`, ...).
* **Chromium-style identifiers** such as ``net::ERR_CONNECTION_RESET``,
  optionally prefixed with ``"Error: "`` as produced when an error object is
  stringified.  :func:`parse_error_code` matches the code exactly.

Either way the result is a :class:`NetworkErrorCode`, and :func:`classify`
maps it to the message shown to the user.  Anything unrecognised becomes
:attr:`NetworkErrorCode.UNKNOWN` ("Unknown Error").
"""

from __future__ import annotations

import errno
import socket
from enum import Enum
from typing import Iterator, Union

import httpx

from chronos_auth.models import ClassifiedError


class NetworkErrorCode(str, Enum):
    """Transport failure identifiers, valued with their Chromium error names."""

    INTERNET_DISCONNECTED = "net::ERR_INTERNET_DISCONNECTED"
    PROXY_CONNECTION_FAILED = "net::ERR_PROXY_CONNECTION_FAILED"
    CONNECTION_RESET = "net::ERR_CONNECTION_RESET"
    CONNECTION_CLOSE = "net::ERR_CONNECTION_CLOSE"
    NAME_NOT_RESOLVED = "net::ERR_NAME_NOT_RESOLVED"
    CONNECTION_TIMED_OUT = "net::ERR_CONNECTION_TIMED_OUT"
    UNKNOWN = "unknown"


_MESSAGES: dict[NetworkErrorCode, str] = {
    NetworkErrorCode.INTERNET_DISCONNECTED: "Internet disconnected",
    NetworkErrorCode.PROXY_CONNECTION_FAILED: "Proxy connection failed",
    NetworkErrorCode.CONNECTION_RESET: "Connection reset",
    NetworkErrorCode.CONNECTION_CLOSE: "Connection close",
    NetworkErrorCode.NAME_NOT_RESOLVED: "Page unavailable",
    NetworkErrorCode.CONNECTION_TIMED_OUT: "Connection timed out",
    NetworkErrorCode.UNKNOWN: "Unknown Error",
}

_ERROR_PREFIX = "Error: "

_DISCONNECTED_ERRNOS = frozenset(
    {errno.ENETUNREACH, errno.ENETDOWN, errno.EHOSTUNREACH}
)

RawNetworkError = Union[str, NetworkErrorCode, BaseException]


def message_for_code(code: NetworkErrorCode) -> str:
    """Return the user-facing message for *code*."""
    return _MESSAGES[code]


def parse_error_code(raw: str) -> NetworkErrorCode:
    """Map a raw identifier string to a :class:`NetworkErrorCode`.

    The identifier must equal one of the known codes exactly, after an
    optional leading ``"Error: "`` is removed.  No partial or fuzzy matching
    is attempted.

    Args:
        raw: Identifier such as ``"Error: net::ERR_NAME_NOT_RESOLVED"``.

    Returns:
        The matching code, or :attr:`NetworkErrorCode.UNKNOWN`.
    """
    candidate = raw[len(_ERROR_PREFIX):] if raw.startswith(_ERROR_PREFIX) else raw
    try:
        return NetworkErrorCode(candidate)
    except ValueError:
        return NetworkErrorCode.UNKNOWN


def _cause_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* followed by its ``__cause__`` / ``__context__`` ancestors."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _code_for_os_error(exc: OSError) -> NetworkErrorCode | None:
    if isinstance(exc, socket.gaierror):
        return NetworkErrorCode.NAME_NOT_RESOLVED
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return NetworkErrorCode.CONNECTION_TIMED_OUT
    if isinstance(exc, ConnectionResetError):
        return NetworkErrorCode.CONNECTION_RESET
    if isinstance(exc, (ConnectionAbortedError, BrokenPipeError)):
        return NetworkErrorCode.CONNECTION_CLOSE
    if exc.errno in _DISCONNECTED_ERRNOS:
        return NetworkErrorCode.INTERNET_DISCONNECTED
    return None


def code_for_exception(exc: BaseException) -> NetworkErrorCode:
    """Classify an exception raised while talking to a server.

    httpx exception types decide first (timeouts, proxy failures, a peer
    closing the connection); otherwise the cause chain is searched for the
    socket-level ``OSError`` httpx wrapped.

    Args:
        exc: The exception to classify, typically an :class:`httpx.TransportError`.

    Returns:
        The matching :class:`NetworkErrorCode`, or ``UNKNOWN``.
    """
    if isinstance(exc, httpx.TimeoutException):
        return NetworkErrorCode.CONNECTION_TIMED_OUT
    if isinstance(exc, httpx.ProxyError):
        return NetworkErrorCode.PROXY_CONNECTION_FAILED

    for link in _cause_chain(exc):
        if isinstance(link, OSError):
            code = _code_for_os_error(link)
            if code is not None:
                return code

    if isinstance(exc, httpx.RemoteProtocolError):
        # "Server disconnected without sending a response."
        return NetworkErrorCode.CONNECTION_CLOSE

    # Some transports only keep the identifier in the message.
    return parse_error_code(str(exc))


def _to_code(raw: RawNetworkError) -> NetworkErrorCode:
    if isinstance(raw, NetworkErrorCode):
        return raw
    if isinstance(raw, BaseException):
        return code_for_exception(raw)
    return parse_error_code(raw)


def classify(raw: RawNetworkError) -> str:
    """Return the user-facing message for a transport failure.

    Pure: the same input always yields the same message.

    Args:
        raw: A raw identifier string, a :class:`NetworkErrorCode`, or an
            exception.

    Returns:
        A message from the classification table, ``"Unknown Error"`` when
        nothing matches.

    Example::

        >>> classify("Error: net::ERR_CONNECTION_RESET")
        'Connection reset'
    """
    return message_for_code(_to_code(raw))


def classify_error(raw: RawNetworkError) -> ClassifiedError:
    """Like :func:`classify` but return the code together with the message."""
    code = _to_code(raw)
    return ClassifiedError(code=code.value, message=message_for_code(code))
