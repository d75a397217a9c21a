"""Pydantic models shared across tdxproxy.

Every other module imports its data shapes from here. The models fall into
two groups:

**Configuration models** -- set at construction, mutated only through the
proxy setters:
    :class:`ClientIdentity` and :class:`ProxyConfig`.

**Wire / runtime models** -- validated views of external data and per-call
state:
    :class:`TokenResponse`, :class:`CredentialFile`, :class:`TokenState`, and
    :class:`RequestDescriptor`.

All models use Pydantic v2.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

from tdxproxy.config import DEFAULT_BASE_PATH, DEFAULT_TIMEOUT, TDX_AUTH_PATH, TDX_HOST


# --- Configuration models ---


class ClientIdentity(BaseModel):
    """OAuth2 client credentials issued by the TDX platform.

    An identity with an empty ``app_id`` or ``app_key`` is *anonymous*:
    requests are sent without a bearer token and fall under the platform's
    daily anonymous quota.
    """

    model_config = ConfigDict(frozen=True)

    app_id: str = ""
    app_key: str = ""

    @property
    def is_anonymous(self) -> bool:
        return not self.app_id or not self.app_key


class ProxyConfig(BaseModel):
    """Connection settings for a :class:`~tdxproxy.proxy.TDXProxy`.

    ``timeout`` applies to every single network call (token exchange or data
    request), not to a whole ``get`` including its retries.
    """

    model_config = ConfigDict(validate_assignment=True)

    host: str = Field(default=TDX_HOST, description="Scheme and host of the platform")
    base_path: str = Field(
        default=DEFAULT_BASE_PATH, description="Path prefix prepended to every endpoint"
    )
    auth_path: str = Field(
        default=TDX_AUTH_PATH, description="Path of the OAuth2 token endpoint on host"
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Per-call timeout in seconds")
    max_attempts: int = Field(default=3, ge=1, description="Data requests per get() before giving up")
    rate_limit_delay: float = Field(
        default=1.0, ge=0, description="Seconds to sleep after a 429 before retrying"
    )

    @property
    def token_url(self) -> str:
        return self.host + self.auth_path


# --- Wire / runtime models ---


class TokenResponse(BaseModel):
    """The fields tdxproxy needs from the token endpoint's JSON body.

    Strict types mirror what a JSON decoder produces: ``access_token`` must be
    a JSON string and ``expires_in`` a JSON number (not a numeric string).
    """

    access_token: StrictStr
    expires_in: Union[StrictInt, StrictFloat]


class CredentialFile(BaseModel):
    """Shape of the JSON credential file (``{"app_id": ..., "app_key": ...}``)."""

    app_id: str
    app_key: str


class TokenState(BaseModel):
    """Bearer token plus the Unix time after which it must not be used."""

    token: str = ""
    expires_at: float = 0.0


class RequestDescriptor(BaseModel):
    """One logical GET call, as handed to the retry controller."""

    endpoint: str
    query_params: dict[str, str] = Field(default_factory=dict)
    extra_headers: dict[str, str] = Field(default_factory=dict)
    timeout: float
