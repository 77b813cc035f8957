"""Typer sub-command groups registered by :func:`chronos_auth.app.main`."""
