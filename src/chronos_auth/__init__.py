"""chronos_auth -- session establishment against a Jira server for the Chronos desktop tracker.

The package authenticates a desktop client with a Jira instance through one
of several mutually exclusive strategies and turns the failures of two
different transports into a small, user-facing error vocabulary.

Strategies::

    basic / OAuth      credentials validated and stored by the Chronos backend
    automatic          reuse credentials the backend already holds
    direct             form login against Jira itself, harvesting cookies

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    network: Classification of transport failures.
    output: stdout/stderr formatting system with Rich support.
    session: Immutable session context handed to the Jira API client.
"""

__version__ = "0.3.0"
