"""Retry state machine for a single logical GET call.

:class:`RetryController` sends the data request, inspects the status, and
decides what to do next:

- **200 / 304** -- success, the response is handed back to the caller.
- **401** -- the token is refreshed and the request is sent again.
- **429** -- the controller sleeps ``rate_limit_delay`` seconds (1 s by
  default, no jitter) and sends again.
- **anything else** -- :class:`~tdxproxy.exceptions.UnexpectedStatusError`.

At most ``max_attempts`` data requests are sent (3 by default); when 401/429
keep coming back the call ends with
:class:`~tdxproxy.exceptions.RetryExhaustedError`. A 401 or 429 on the final
attempt raises at once, without a last refresh or sleep whose result could
never be used. A failed token refresh aborts the chain immediately.

Every attempt rebuilds URL and headers, so a refreshed token or a changed
host is picked up. Responses of discarded attempts are closed before moving
on.
"""

from __future__ import annotations

import logging
import time

import httpx

from tdxproxy.auth.fetcher import AuthFetcher
from tdxproxy.client.request_builder import build_headers, build_url
from tdxproxy.exceptions import (
    AuthError,
    RetryExhaustedError,
    TransportError,
    UnexpectedStatusError,
)
from tdxproxy.models import ClientIdentity, ProxyConfig, RequestDescriptor

SUCCESS_STATUSES = frozenset({httpx.codes.OK, httpx.codes.NOT_MODIFIED})


class RetryController:
    """Run one :class:`~tdxproxy.models.RequestDescriptor` to a terminal outcome.

    Args:
        http_client: Client used for the data requests.
        identity: Credentials (or anonymous identity) of the owning proxy.
        fetcher: Token fetcher used for header building and 401 recovery.
        config: Live proxy configuration; read anew on every attempt.
        logger: Destination for advisory log events.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        identity: ClientIdentity,
        fetcher: AuthFetcher,
        config: ProxyConfig,
        logger: logging.Logger,
    ) -> None:
        self._http = http_client
        self._identity = identity
        self._fetcher = fetcher
        self._config = config
        self._logger = logger

    def execute(self, request: RequestDescriptor) -> httpx.Response:
        """Send *request* until it succeeds, fails, or runs out of attempts.

        Returns:
            The 200 or 304 :class:`httpx.Response`.

        Raises:
            AuthError: If a token refresh failed.
            TransportError: If a request could not be sent.
            UnexpectedStatusError: On any status outside 200/304/401/429.
            RetryExhaustedError: If 401/429 persisted for every attempt.
        """
        max_attempts = self._config.max_attempts

        for attempt in range(max_attempts):
            response, sent_token = self._send(request)
            status = response.status_code

            if status in SUCCESS_STATUSES:
                self._logger.info("Successful request: %s (status %d)", request.endpoint, status)
                return response

            response.close()
            last_attempt = attempt + 1 >= max_attempts

            if status == httpx.codes.UNAUTHORIZED:
                if self._identity.is_anonymous:
                    raise AuthError(
                        f"Anonymous request to {request.endpoint} was rejected with 401",
                        reason=AuthError.ANONYMOUS_UNAUTHORIZED,
                        status_code=status,
                    )
                if not last_attempt:
                    self._logger.warning("Unauthorized, refreshing token: %s", request.endpoint)
                    self._refresh_token(request, sent_token)
                continue

            if status == httpx.codes.TOO_MANY_REQUESTS:
                if not last_attempt:
                    self._logger.warning(
                        "Rate limit reached, retrying: %s (attempt %d/%d)",
                        request.endpoint,
                        attempt + 1,
                        max_attempts,
                    )
                    time.sleep(self._config.rate_limit_delay)
                continue

            self._logger.error("Unexpected status code: %s (status %d)", request.endpoint, status)
            raise UnexpectedStatusError(status, str(response.url))

        self._logger.error(
            "Retry attempts exhausted: %s (last status %d)", request.endpoint, status
        )
        raise RetryExhaustedError(request.endpoint, max_attempts)

    def _send(self, request: RequestDescriptor) -> tuple[httpx.Response, str]:
        """Build URL and headers for one attempt and send the GET.

        Returns the response and the cached token the headers were built with.
        """
        config = self._config
        url = build_url(config.host, config.base_path, request.endpoint, request.query_params)
        with self._fetcher.cache.lock:
            headers = build_headers(
                self._identity,
                self._fetcher,
                config.token_url,
                request.timeout,
                request.extra_headers,
            )
            sent_token = self._fetcher.cache.token
        try:
            return self._http.get(url, headers=headers, timeout=request.timeout), sent_token
        except httpx.RequestError as exc:
            raise TransportError(f"Request failed for {request.endpoint}: {exc}") from exc

    def _refresh_token(self, request: RequestDescriptor, rejected_token: str) -> None:
        """Recover from a 401 by replacing the rejected token."""
        try:
            self._fetcher.refresh_rejected(rejected_token, self._config.token_url, request.timeout)
        except (AuthError, TransportError) as exc:
            self._logger.error("Failed to refresh auth token: %s", exc)
            raise
        self._logger.info("Retrying request after refreshing token: %s", request.endpoint)
