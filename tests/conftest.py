"""Shared test fixtures for tdxproxy.

Provides a fake TDX platform built on :class:`httpx.MockTransport`, a
factory for proxies wired to it, and a patched ``time.sleep`` so that
rate-limit backoff never slows the suite down.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterator, Optional
from unittest.mock import MagicMock, patch

import httpx
import pytest

from tdxproxy.config import TDX_AUTH_PATH
from tdxproxy.models import ProxyConfig
from tdxproxy.proxy import TDXProxy

TEST_HOST = "https://tdx.example.com"


DataHandler = Callable[[httpx.Request, int], httpx.Response]


class FakePlatform:
    """Serve the token endpoint and data endpoints of a fake TDX platform.

    ``data_handler`` receives the request and its 1-based call number and
    returns the data response. The token endpoint answers with
    ``token_status`` / ``token_body`` and counts its calls.
    """

    def __init__(
        self,
        data_handler: Optional[DataHandler] = None,
        token_status: int = 200,
        token_body: object = None,
    ) -> None:
        self.data_handler = data_handler or (
            lambda request, n: httpx.Response(200, json={"data": "success"})
        )
        self.token_status = token_status
        self.token_body = (
            token_body
            if token_body is not None
            else {"access_token": "token", "expires_in": 3600}
        )
        self.token_requests: list[httpx.Request] = []
        self.data_requests: list[httpx.Request] = []
        self._lock = threading.Lock()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == TDX_AUTH_PATH:
            with self._lock:
                self.token_requests.append(request)
            return httpx.Response(self.token_status, json=self.token_body)
        with self._lock:
            self.data_requests.append(request)
            count = len(self.data_requests)
        return self.data_handler(request, count)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def platform() -> FakePlatform:
    """A fake platform that issues tokens and answers 200 to every data call.

    Tests reconfigure it by assigning ``data_handler``, ``token_status`` or
    ``token_body`` before sending requests.
    """
    return FakePlatform()


@pytest.fixture
def logger() -> logging.Logger:
    """A named logger so that ``caplog`` can filter on it."""
    return logging.getLogger("tdxproxy.tests")


@pytest.fixture
def make_proxy(logger: logging.Logger) -> Iterator[Callable[..., TDXProxy]]:
    """Factory building proxies against a :class:`FakePlatform`.

    All proxies created through the factory are closed after the test.
    """
    created: list[TDXProxy] = []

    def _make(
        platform: FakePlatform,
        app_id: str = "appID",
        app_key: str = "appKey",
        **config_overrides: object,
    ) -> TDXProxy:
        config = ProxyConfig(host=TEST_HOST, **config_overrides)
        proxy = TDXProxy(
            app_id, app_key, logger=logger, config=config, transport=platform.transport
        )
        created.append(proxy)
        return proxy

    yield _make
    for proxy in created:
        proxy.close()


@pytest.fixture
def mock_sleep() -> Iterator[MagicMock]:
    """Patch the rate-limit sleep of the retry controller."""
    with patch("tdxproxy.client.retry.time.sleep") as sleep:
        yield sleep
