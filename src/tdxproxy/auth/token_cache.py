"""In-memory bearer-token cache with expiry tracking.

A :class:`TokenCache` holds the single token of one
:class:`~tdxproxy.proxy.TDXProxy`. It never persists anything and never
refreshes on its own: :class:`~tdxproxy.auth.fetcher.AuthFetcher` writes to
it, and the request builder reads from it on every request.

The :attr:`TokenCache.lock` is shared with the fetcher so that the
check-refresh-write sequence runs under one lock across threads.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from tdxproxy.models import TokenState

EXPIRY_MARGIN = 60.0
"""Seconds subtracted from ``expires_in`` to absorb clock skew and latency."""


class TokenCache:
    """Thread-safe holder of one bearer token and its expiry instant.

    Args:
        clock: Returns the current Unix time in seconds. Defaults to
            :func:`time.time`; tests inject a fake.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._state = TokenState()
        self.lock = threading.RLock()

    @property
    def token(self) -> str:
        return self._state.token

    @property
    def expires_at(self) -> float:
        return self._state.expires_at

    def now(self) -> float:
        return self._clock()

    def is_valid(self) -> bool:
        """Return ``True`` iff a non-empty token exists and has not expired."""
        with self.lock:
            return bool(self._state.token) and self._clock() < self._state.expires_at

    def update(self, token: str, expires_in: float, now: float) -> None:
        """Store *token*, expiring ``EXPIRY_MARGIN`` seconds before *expires_in* elapses.

        Args:
            token: The new bearer token.
            expires_in: Lifetime reported by the token endpoint, in seconds.
            now: Unix time at which the token request was issued.
        """
        with self.lock:
            self._state = TokenState(token=token, expires_at=now + expires_in - EXPIRY_MARGIN)

    def invalidate(self) -> None:
        """Forget the cached token."""
        with self.lock:
            self._state = TokenState()
