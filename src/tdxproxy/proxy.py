"""Public entry point: :class:`TDXProxy`.

A proxy wraps a single :class:`httpx.Client` and composes the token cache,
auth fetcher, request builder, and retry controller behind one ``get``
method. As long as an app ID and key are supplied, TDX endpoints can be
called directly without handling tokens, 401s, or 429s yourself.

Example::

    from tdxproxy import TDXProxy

    with TDXProxy.from_credential_file() as proxy:
        response = proxy.get("v2/Bus/Alert/City/Taichung")
        alerts = response.json()
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from tdxproxy.auth.fetcher import AuthFetcher
from tdxproxy.auth.token_cache import TokenCache
from tdxproxy.client.retry import RetryController
from tdxproxy.config import load_credentials
from tdxproxy.models import ClientIdentity, ProxyConfig, RequestDescriptor

FORMAT_PARAM = "$format"
DEFAULT_FORMAT = "JSON"


class TDXProxy:
    """Authenticated GET access to the TDX platform.

    Tokens are fetched lazily on the first request, reused until 60 seconds
    before they expire, and refreshed when the platform answers 401. A 429
    triggers a 1-second pause and another attempt. At most three data
    requests are sent per :meth:`get`.

    With an empty ``app_id`` or ``app_key`` the proxy runs in anonymous mode,
    limited by the platform to 20 requests per day.

    Args:
        app_id: OAuth2 client ID.
        app_key: OAuth2 client secret.
        logger: Receives advisory log events. Defaults to this module's logger.
        config: Connection settings. Defaults to the public TDX platform.
        transport: Optional :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.
    """

    def __init__(
        self,
        app_id: str = "",
        app_key: str = "",
        logger: Optional[logging.Logger] = None,
        config: Optional[ProxyConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._identity = ClientIdentity(app_id=app_id, app_key=app_key)
        self._config = config.model_copy() if config is not None else ProxyConfig()
        self._http = httpx.Client(transport=transport, follow_redirects=True)
        self._cache = TokenCache()
        self._fetcher = AuthFetcher(self._identity, self._cache, self._http, self._logger)
        self._retry = RetryController(
            self._http, self._identity, self._fetcher, self._config, self._logger
        )

    # ------------------------------------------------------------------ #
    # Alternate constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def anonymous(
        cls,
        logger: Optional[logging.Logger] = None,
        config: Optional[ProxyConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> TDXProxy:
        """Create a proxy without credentials (20 requests per day)."""
        return cls(logger=logger, config=config, transport=transport)

    @classmethod
    def from_credential_file(
        cls,
        file_name: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        config: Optional[ProxyConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> TDXProxy:
        """Create a proxy from a JSON credential file.

        The file must look like ``{"app_id": "...", "app_key": "..."}``. Its
        path is *file_name* or, when that is empty, the
        ``TDX_CREDENTIALS_FILE`` environment variable.

        Raises:
            ConstructionError: If no path is configured or the file is
                missing, unreadable, or malformed.
        """
        identity = load_credentials(file_name)
        return cls(identity.app_id, identity.app_key, logger=logger, config=config, transport=transport)

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> TDXProxy:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    @property
    def identity(self) -> ClientIdentity:
        return self._identity

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def base_url(self) -> str:
        return self._config.base_path

    @property
    def timeout(self) -> float:
        return self._config.timeout

    def get(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """Send a GET request to ``host + base_url + endpoint``.

        ``$format=JSON`` is added to the query unless *params* already
        contains ``$format``. Caller headers override the auth headers, whatever
        their case. Parameter and header values are sent as ``str(value)``.

        Args:
            endpoint: Path relative to the base URL, e.g.
                ``"v2/Bus/Alert/City/Taichung"``.
            params: Query parameters.
            headers: Extra request headers.
            timeout: Per-call timeout in seconds; defaults to :attr:`timeout`.

        Returns:
            The 200 or 304 :class:`httpx.Response`.

        Raises:
            AuthError: If the token exchange failed.
            TransportError: If a request could not be sent.
            UnexpectedStatusError: On any status outside 200/304/401/429.
            RetryExhaustedError: If 401/429 persisted for every attempt.
        """
        query_params = {str(key): str(value) for key, value in (params or {}).items()}
        query_params.setdefault(FORMAT_PARAM, DEFAULT_FORMAT)

        request = RequestDescriptor(
            endpoint=endpoint,
            query_params=query_params,
            extra_headers={str(key): str(value) for key, value in (headers or {}).items()},
            timeout=timeout if timeout and timeout > 0 else self._config.timeout,
        )
        return self._retry.execute(request)

    def set_host(self, host: str) -> None:
        """Set the scheme and host, e.g. ``"https://tdx.transportdata.tw"``.

        An empty value is ignored with a warning.
        """
        if not host:
            self._logger.warning("Empty host URL provided")
            return
        self._config.host = host

    def set_base_url(self, base_url: str) -> None:
        """Set the path prefix prepended to every endpoint (default ``/api/basic/``).

        An empty value is ignored with a warning.
        """
        if not base_url:
            self._logger.warning("Empty base URL provided")
            return
        self._config.base_path = base_url

    def set_timeout(self, timeout: float) -> None:
        """Set the default per-call timeout in seconds.

        Zero, negative, or missing values are ignored with a warning.
        """
        if not timeout or timeout <= 0:
            self._logger.warning("Invalid timeout provided: %r", timeout)
            return
        self._config.timeout = timeout
