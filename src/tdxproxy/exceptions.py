"""Exception hierarchy for tdxproxy.

All exceptions inherit from :class:`TDXProxyError` so that callers can catch
every failure of a :meth:`~tdxproxy.proxy.TDXProxy.get` call with a single
``except`` clause, while still being able to tell the failure classes apart.

Subclass hierarchy::

    TDXProxyError
    +-- ConstructionError      (no usable credential source)
    +-- AuthError              (token endpoint rejected us or answered garbage)
    +-- TransportError         (network-level failure sending a request)
    +-- UnexpectedStatusError  (HTTP status outside 200/304/401/429)
    +-- RetryExhaustedError    (401/429 kept recurring past the attempt bound)

Errors raised while handling a lower-level :mod:`httpx` or :mod:`pydantic`
exception are always chained (``raise ... from exc``) so the original cause
stays available on ``__cause__``.
"""

from __future__ import annotations


class TDXProxyError(Exception):
    """Base exception for all tdxproxy errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConstructionError(TDXProxyError):
    """Raised when a proxy cannot be built (missing or unreadable credential file)."""


class AuthError(TDXProxyError):
    """Raised when the OAuth2 token exchange fails.

    The ``reason`` attribute classifies the failure:

    - ``"unexpected_status"`` -- the token endpoint answered with a non-200 status.
    - ``"malformed_response"`` -- the body was not JSON, or lacked a string
      ``access_token`` / numeric ``expires_in``.
    - ``"anonymous_unauthorized"`` -- the platform answered 401 to an
      anonymous request, so there are no credentials to refresh.

    Args:
        message: Human-readable error description.
        reason: One of the reason codes above.
        status_code: HTTP status of the token response, when there was one.
    """

    UNEXPECTED_STATUS = "unexpected_status"
    MALFORMED_RESPONSE = "malformed_response"
    ANONYMOUS_UNAUTHORIZED = "anonymous_unauthorized"

    def __init__(
        self,
        message: str,
        reason: str = UNEXPECTED_STATUS,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code


class TransportError(TDXProxyError):
    """Raised on network-level failures (DNS, connection refused, timeout).

    Wraps :class:`httpx.RequestError`; the original exception is on
    ``__cause__``.
    """


class UnexpectedStatusError(TDXProxyError):
    """Raised when a data endpoint answers with a status that is neither
    success (200/304) nor retryable (401/429).

    Args:
        status_code: The HTTP status received.
        url: The URL that produced it.
    """

    def __init__(self, status_code: int, url: str = ""):
        super().__init__(f"Unexpected status code {status_code} for {url or 'request'}")
        self.status_code = status_code
        self.url = url


class RetryExhaustedError(TDXProxyError):
    """Raised when 401 or 429 responses recur beyond the attempt bound.

    Args:
        endpoint: The endpoint passed to ``get``.
        attempts: How many data requests were sent before giving up.
    """

    def __init__(self, endpoint: str, attempts: int):
        super().__init__(f"Max retry attempts reached for {endpoint} ({attempts} attempts)")
        self.endpoint = endpoint
        self.attempts = attempts
