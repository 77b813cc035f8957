"""Canonical Pydantic models shared across all chronos_auth modules.

The models fall into three groups:

**Credential and payload models** -- built from user input and sent to the
Chronos backend:
    :class:`BasicCredentials`, :class:`DelegatedTokenCredentials`,
    :class:`BasicAuthPayload`, :class:`OAuthPayload` and the
    :data:`AuthRequestPayload` union.

**Result models** -- produced by a login attempt:
    :class:`SessionCookie`, :class:`ClassifiedError`, :class:`AuthOutcome`
    and :class:`SessionContext`.

**Configuration models** -- serialised as JSON in the user's config
directory:
    :class:`RequestConfig`, :class:`OutputConfig` and :class:`GlobalConfig`.

Payload models declare the backend's wire names as aliases; serialise them
with ``model_dump(by_alias=True)``.
"""

from __future__ import annotations

import base64
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

COOKIE_EXPIRES = "Fri, 31 Dec 9999 23:59:59 GMT"
"""Expiry attached to every harvested session cookie."""


# --- Credentials ---


class BasicCredentials(BaseModel):
    """Username and password for a Jira server, submitted through the backend.

    Only used to build a :class:`BasicAuthPayload`; never persisted.
    """

    host: str
    username: str
    password: str
    port: str = ""
    protocol: str = "https"
    path_prefix: str = "/"

    def basic_token(self) -> str:
        """Return base64 of ``username:password`` (UTF-8)."""
        raw = f"{self.username}:{self.password}".encode("utf-8")
        return base64.b64encode(raw).decode("ascii")


class DelegatedTokenCredentials(BaseModel):
    """OAuth access token pair obtained after the browser consent step."""

    base_url: str
    token: str
    token_secret: str


# --- Backend payloads ---


class BasicAuthPayload(BaseModel):
    """``POST /desktop-tracker/authenticate`` body for basic auth."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["basic_auth"] = "basic_auth"
    base_url: str = Field(alias="baseUrl")
    host: str
    port: str = ""
    protocol: str = "https"
    path_prefix: str = Field(default="/", alias="pathPrefix")
    basic_token: str = Field(alias="basicToken")

    @classmethod
    def from_credentials(cls, credentials: BasicCredentials) -> BasicAuthPayload:
        return cls(
            base_url=credentials.host,
            host=credentials.host,
            port=credentials.port,
            protocol=credentials.protocol,
            path_prefix=credentials.path_prefix,
            basic_token=credentials.basic_token(),
        )


class OAuthPayload(BaseModel):
    """``POST /desktop-tracker/authenticate`` body for OAuth delegation."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["OAuth"] = "OAuth"
    base_url: str = Field(alias="baseUrl")
    token: str
    token_secret: str

    @classmethod
    def from_credentials(cls, credentials: DelegatedTokenCredentials) -> OAuthPayload:
        return cls(
            base_url=credentials.base_url,
            token=credentials.token,
            token_secret=credentials.token_secret,
        )


AuthRequestPayload = Annotated[
    Union[BasicAuthPayload, OAuthPayload],
    Field(discriminator="type"),
]
"""Tagged union of the two authenticate payloads, keyed on ``type``."""


# --- Direct login ---


class DirectLoginRequest(BaseModel):
    """Input for a direct form login against a Jira server."""

    base_url: str
    username: str
    password: str
    pathname: str = "/"
    protocol: str = "https"


class SessionCookie(BaseModel):
    """A cookie harvested from the ``Set-Cookie`` headers of a direct login."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    value: str
    path: str
    http_only: bool = Field(alias="httpOnly")
    expires: str = COOKIE_EXPIRES


# --- Outcomes ---


class ClassifiedError(BaseModel):
    """A failure reduced to a stable code and a user-presentable message."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str


class AuthOutcome(BaseModel):
    """Uniform result of one login attempt made through the auth manager.

    Exactly one of ``error`` or the success fields is meaningful: when
    ``error`` is ``None`` the attempt succeeded and ``record`` (backend
    strategies) or ``cookies`` (direct login) hold the result.
    """

    method: str
    record: Any = None
    cookies: list[SessionCookie] = Field(default_factory=list)
    error: Optional[ClassifiedError] = None
    exit_code: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class SessionContext(BaseModel):
    """Everything the Jira API client needs to reuse an authenticated session.

    Immutable; a new context is built for every successful login and passed
    explicitly to the configurator instead of mutating shared client state.
    """

    model_config = ConfigDict(frozen=True)

    protocol: str
    hostname: str
    port: str = ""
    pathname: str = "/"
    cookies: tuple[SessionCookie, ...] = ()

    def cookie_header(self) -> str:
        """Render the cookies as a ``Cookie`` request header value."""
        return "; ".join(f"{c.name}={c.value}" for c in self.cookies)


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP settings applied to backend and direct-login requests."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/chronos-auth/config.json``.

    Loaded and saved by :func:`~chronos_auth.config.load_global_config` and
    :func:`~chronos_auth.config.save_global_config`.  See
    :func:`~chronos_auth.config.resolve_config` for the precedence chain.
    """

    api_url: str = Field(
        default="", description="Base URL of the Chronos backend"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
