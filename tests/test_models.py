"""Tests for the shared pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tdxproxy.config import TDX_AUTH_PATH, TDX_HOST
from tdxproxy.models import ClientIdentity, ProxyConfig, RequestDescriptor, TokenResponse


class TestClientIdentity:
    def test_is_frozen(self) -> None:
        identity = ClientIdentity(app_id="id", app_key="key")
        with pytest.raises(ValidationError):
            identity.app_id = "other"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "app_id, app_key, anonymous",
        [("", "", True), ("id", "", True), ("", "key", True), ("id", "key", False)],
    )
    def test_is_anonymous(self, app_id: str, app_key: str, anonymous: bool) -> None:
        assert ClientIdentity(app_id=app_id, app_key=app_key).is_anonymous is anonymous


class TestProxyConfig:
    def test_defaults(self) -> None:
        config = ProxyConfig()
        assert config.host == TDX_HOST
        assert config.base_path == "/api/basic/"
        assert config.timeout == 10
        assert config.max_attempts == 3
        assert config.rate_limit_delay == 1.0
        assert config.token_url == TDX_HOST + TDX_AUTH_PATH

    def test_token_url_follows_host(self) -> None:
        config = ProxyConfig()
        config.host = "http://localhost:8080"
        assert config.token_url == "http://localhost:8080" + TDX_AUTH_PATH

    @pytest.mark.parametrize("field, value", [("timeout", 0), ("timeout", -2), ("max_attempts", 0)])
    def test_rejects_out_of_range(self, field: str, value: float) -> None:
        with pytest.raises(ValidationError):
            ProxyConfig(**{field: value})


class TestTokenResponse:
    def test_accepts_int_and_float_lifetimes(self) -> None:
        assert TokenResponse.model_validate({"access_token": "t", "expires_in": 86400}).expires_in == 86400
        assert TokenResponse.model_validate({"access_token": "t", "expires_in": 1.5}).expires_in == 1.5

    def test_ignores_extra_fields(self) -> None:
        token = TokenResponse.model_validate(
            {"access_token": "t", "expires_in": 10, "token_type": "Bearer", "scope": "profile"}
        )
        assert token.access_token == "t"

    @pytest.mark.parametrize(
        "body",
        [
            {"access_token": "t", "expires_in": "10"},
            {"access_token": "t", "expires_in": True},
            {"access_token": 5, "expires_in": 10},
            {},
        ],
    )
    def test_strict_types(self, body: dict) -> None:
        with pytest.raises(ValidationError):
            TokenResponse.model_validate(body)


def test_request_descriptor_defaults() -> None:
    request = RequestDescriptor(endpoint="e", timeout=1)
    assert request.query_params == {}
    assert request.extra_headers == {}
