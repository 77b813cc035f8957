"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~chronos_auth.exceptions.ChronosAuthError` subclass.
Shell wrappers can inspect the exit code to decide whether to re-prompt the
user for credentials or simply retry later.

Example::

    $ chronos-auth login direct https://team.example.com -u alice
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- Jira rejected the credentials
"""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The backend or the Jira server rejected the credentials."""

EXIT_BROKER_ERROR = 5
"""The Chronos backend returned an unexpected error status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection reset)."""
