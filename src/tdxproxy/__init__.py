"""tdxproxy -- authenticated GET access to the TDX transport data platform.

The platform requires OAuth2 client-credentials authentication and limits
request rates. This package hides both: :class:`TDXProxy` fetches and caches
bearer tokens, refreshes them on 401, waits out 429s, and gives up with a
typed error after three attempts.

Typical usage::

    from tdxproxy import TDXProxy

    proxy = TDXProxy("my-app-id", "my-app-key")
    response = proxy.get("v2/Bus/Alert/City/Taichung")

Modules:
    proxy: The :class:`TDXProxy` facade.
    models: Pydantic models shared across the package.
    config: Platform constants and credential-file loading.
    exceptions: Exception hierarchy.
    auth: Token cache and OAuth2 token fetcher.
    client: URL/header building and the retry state machine.
"""

from tdxproxy.exceptions import (
    AuthError,
    ConstructionError,
    RetryExhaustedError,
    TDXProxyError,
    TransportError,
    UnexpectedStatusError,
)
from tdxproxy.models import ClientIdentity, ProxyConfig
from tdxproxy.proxy import TDXProxy

__version__ = "0.1.0"

__all__ = [
    "AuthError",
    "ClientIdentity",
    "ConstructionError",
    "ProxyConfig",
    "RetryExhaustedError",
    "TDXProxy",
    "TDXProxyError",
    "TransportError",
    "UnexpectedStatusError",
]
