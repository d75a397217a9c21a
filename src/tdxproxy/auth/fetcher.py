"""OAuth2 client-credentials exchange against the TDX token endpoint.

This module provides :class:`AuthFetcher`, which performs the
non-interactive Client Credentials grant (:rfc:`6749` section 4.4):
it exchanges an ``app_id`` / ``app_key`` pair for an access token and stores
the result in a :class:`~tdxproxy.auth.token_cache.TokenCache`.

The fetcher never retries. Any failure propagates straight to whichever
operation triggered the refresh; the retry controller decides what happens
next.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from tdxproxy.auth.token_cache import TokenCache
from tdxproxy.exceptions import AuthError, TransportError
from tdxproxy.models import ClientIdentity, TokenResponse


class AuthFetcher:
    """Fetch bearer tokens for one client identity.

    Args:
        identity: The credentials to exchange.
        cache: Token cache that receives the fetched token.
        http_client: Client used for the token POST.
        logger: Destination for advisory log events.
    """

    def __init__(
        self,
        identity: ClientIdentity,
        cache: TokenCache,
        http_client: httpx.Client,
        logger: logging.Logger,
    ) -> None:
        self._identity = identity
        self._cache = cache
        self._http = http_client
        self._logger = logger

    @property
    def cache(self) -> TokenCache:
        return self._cache

    def refresh(self, token_url: str, timeout: float) -> None:
        """Fetch a new token and store it in the cache.

        The whole exchange runs under the cache lock, so concurrent callers
        wait for one refresh instead of issuing their own.

        Args:
            token_url: Absolute URL of the token endpoint.
            timeout: Connect/read timeout for the POST, in seconds.

        Raises:
            AuthError: On a non-200 status or a malformed token body.
            TransportError: If the request could not be sent.
        """
        with self._cache.lock:
            requested_at = self._cache.now()
            token_data = self._fetch_token(token_url, timeout)
            self._cache.update(token_data.access_token, float(token_data.expires_in), requested_at)
            self._logger.debug(
                "Token cached (expires_in=%ss, expires_at=%.0f)",
                token_data.expires_in,
                self._cache.expires_at,
            )

    def refresh_rejected(self, rejected_token: str, token_url: str, timeout: float) -> None:
        """Replace *rejected_token* after the platform answered 401 to it.

        When another caller has already swapped in a different, still valid
        token, that token is kept and no request is sent.

        Raises:
            AuthError: On a non-200 status or a malformed token body.
            TransportError: If the request could not be sent.
        """
        with self._cache.lock:
            if self._cache.token != rejected_token and self._cache.is_valid():
                self._logger.debug("Token already refreshed by another caller")
                return
            self.refresh(token_url, timeout)

    def ensure_token(self, token_url: str, timeout: float) -> str:
        """Return a usable token, refreshing first if the cached one is invalid.

        Raises:
            AuthError: If a refresh was needed and failed.
            TransportError: If a refresh was needed and could not be sent.
        """
        with self._cache.lock:
            if not self._cache.is_valid():
                try:
                    self.refresh(token_url, timeout)
                except (AuthError, TransportError) as exc:
                    self._logger.error("Failed to update auth token: %s", exc)
                    raise
            return self._cache.token

    def _fetch_token(self, token_url: str, timeout: float) -> TokenResponse:
        """POST the client-credentials form and validate the JSON answer."""
        data: dict[str, str] = {
            "grant_type": "client_credentials",
            "client_id": self._identity.app_id,
            "client_secret": self._identity.app_key,
        }
        try:
            response = self._http.post(
                token_url,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=timeout,
            )
        except httpx.RequestError as exc:
            raise TransportError(f"Auth request failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise AuthError(
                f"Auth request returned status {response.status_code}",
                reason=AuthError.UNEXPECTED_STATUS,
                status_code=response.status_code,
            )

        try:
            body: Any = response.json()
        except ValueError as exc:
            raise AuthError(
                f"Failed to parse auth response: {exc}",
                reason=AuthError.MALFORMED_RESPONSE,
                status_code=response.status_code,
            ) from exc

        try:
            return TokenResponse.model_validate(body)
        except ValidationError as exc:
            missing = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"]) or "body"
            raise AuthError(
                f"Auth response missing or invalid field(s): {missing}",
                reason=AuthError.MALFORMED_RESPONSE,
                status_code=response.status_code,
            ) from exc
