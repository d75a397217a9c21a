"""Token handling for tdxproxy.

- :class:`TokenCache` -- holds the current bearer token and decides validity.
- :class:`AuthFetcher` -- performs the OAuth2 client-credentials exchange
  and populates the cache.

Typical usage::

    from tdxproxy.auth import AuthFetcher, TokenCache

    fetcher = AuthFetcher(identity, TokenCache(), httpx.Client(), logger)
    token = fetcher.ensure_token(config.token_url, config.timeout)
"""

from tdxproxy.auth.fetcher import AuthFetcher
from tdxproxy.auth.token_cache import EXPIRY_MARGIN, TokenCache

__all__ = ["AuthFetcher", "EXPIRY_MARGIN", "TokenCache"]
