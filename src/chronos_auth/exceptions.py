"""Exception hierarchy for chronos_auth.

All exceptions inherit from :class:`ChronosAuthError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`chronos_auth.exit_codes` and a stable ``code`` string that callers can
route on without parsing messages.  The top-level error handler in
:func:`chronos_auth.app.main` catches ``ChronosAuthError`` and exits with the
appropriate code.

Messages carried by these exceptions are fixed, user-safe strings.  Bodies
returned by the Chronos backend are never copied into them.

Subclass hierarchy::

    ChronosAuthError (exit 1)
    +-- InvalidUsageError              (exit 2)
    +-- AuthError                      (exit 3)
    |   +-- AuthenticationFailedError
    |   +-- AutomaticLoginFailedError
    |   +-- InvalidCredentialsError
    +-- BrokerError                    (exit 5)
    |   +-- UnknownError
    +-- TransportError                 (exit 6)
    +-- ConfigError                    (exit 1)
"""

from __future__ import annotations

from chronos_auth.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_BROKER_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)
from chronos_auth.models import ClassifiedError
from chronos_auth.network import NetworkErrorCode, message_for_code


class ChronosAuthError(Exception):
    """Base exception for all chronos_auth errors.

    Args:
        message: Human-readable error description shown to the user.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    code: str = "unknown"

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code

    def classified(self) -> ClassifiedError:
        """Return the error as a :class:`~chronos_auth.models.ClassifiedError` value."""
        return ClassifiedError(code=self.code, message=self.message)


class InvalidUsageError(ChronosAuthError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE
    code = "invalid_usage"


class AuthError(ChronosAuthError):
    """Raised when credentials are rejected by the backend or by Jira."""

    exit_code = EXIT_AUTH_FAILURE
    code = "auth_failed"


class AuthenticationFailedError(AuthError):
    """The Chronos backend rejected submitted basic or OAuth credentials."""

    code = "authentication_failed"
    default_message = "Cannot authorize to JIRA. Check your credentials and try again"

    def __init__(self, message: str = default_message):
        super().__init__(message)


class AutomaticLoginFailedError(AuthError):
    """The Chronos backend holds no usable credentials for this client."""

    code = "automatic_login_failed"
    default_message = "Automatic login failed, please enter your credentials again"

    def __init__(self, message: str = default_message):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Jira's login endpoint did not confirm the login."""

    code = "invalid_credentials"
    default_message = "Incorrect email address and / or password."

    def __init__(self, message: str = default_message):
        super().__init__(message)


class BrokerError(ChronosAuthError):
    """Raised when the Chronos backend answers with an unexpected status."""

    exit_code = EXIT_BROKER_ERROR
    code = "broker_error"


class UnknownError(BrokerError):
    """Raised for failures that have no more specific category.

    Args:
        message: Human-readable description.
        status_code: HTTP status observed, when there was one.
    """

    code = "unknown"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(ChronosAuthError):
    """Raised on connection-level failures, after classification.

    ``code`` is the :class:`~chronos_auth.network.NetworkErrorCode` value
    (``"unknown"`` when the failure could not be classified) and the message
    is the matching entry of the classification table.

    Args:
        classification: The classified network failure.
        message: Optional override for the table message.
    """

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(
        self,
        classification: NetworkErrorCode,
        message: str | None = None,
    ):
        super().__init__(message or message_for_code(classification))
        self.classification = classification
        self.code = classification.value


class ConfigError(ChronosAuthError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
    code = "config_error"
