"""URL and header assembly for data requests."""

from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import urlencode

import httpx

from tdxproxy.auth.fetcher import AuthFetcher
from tdxproxy.config import ANONYMOUS_USER_AGENT
from tdxproxy.models import ClientIdentity


def build_url(
    host: str,
    base_path: str,
    endpoint: str,
    query_params: Optional[Mapping[str, str]] = None,
) -> str:
    """Concatenate ``host + base_path + endpoint`` and append the query string.

    Keys and values are percent-encoded. No ``?`` is added when there are no
    parameters.
    """
    url = f"{host}{base_path}{endpoint}"
    if query_params:
        url = f"{url}?{urlencode(dict(query_params))}"
    return url


def build_headers(
    identity: ClientIdentity,
    fetcher: AuthFetcher,
    token_url: str,
    timeout: float,
    extra_headers: Optional[Mapping[str, str]] = None,
) -> httpx.Headers:
    """Build the headers for one data request.

    Anonymous identities get a browser ``User-Agent`` and never an
    ``Authorization`` header. Otherwise the cached token is used, refreshing
    it first when it has expired. Entries of *extra_headers* are applied last
    and win on key collisions, compared case-insensitively as HTTP header
    names are.

    Raises:
        AuthError: If a needed token refresh failed.
        TransportError: If a needed token refresh could not be sent.
    """
    if identity.is_anonymous:
        headers = httpx.Headers({"User-Agent": ANONYMOUS_USER_AGENT})
    else:
        token = fetcher.ensure_token(token_url, timeout)
        headers = httpx.Headers({"Authorization": f"Bearer {token}"})

    headers.update(extra_headers or {})
    return headers
