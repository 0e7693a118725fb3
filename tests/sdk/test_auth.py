"""Tests for login, logout, token storage and token expiry checks."""

from __future__ import annotations

import base64
import json
import stat
from datetime import UTC, datetime
from pathlib import Path

import httpx
import pytest

from packages.dfms_sdk import (
    DfmsClient,
    FileTokenStore,
    InMemoryTokenStore,
    LoginError,
    get_user_info,
    is_token_valid,
    login,
    logout,
)
from packages.dfms_shared.config import DfmsSettings


def _client(handler, store: InMemoryTokenStore | None = None) -> DfmsClient:
    return DfmsClient(
        settings=DfmsSettings(api={"base_url": "https://dfms.test"}),
        token_store=store or InMemoryTokenStore(),
        transport=httpx.MockTransport(handler),
    )


def _jwt(payload: dict[str, object]) -> str:
    def encode(value: dict[str, object]) -> str:
        raw = base64.urlsafe_b64encode(json.dumps(value).encode("utf-8"))
        return raw.decode("ascii").rstrip("=")

    return f"{encode({'alg': 'HS256'})}.{encode(payload)}.signature"


def test_login_posts_full_user_record_and_stores_token() -> None:
    """Login sends every user field and keeps the returned token."""
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/dfm/user/login"
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"code": 200, "message": "success", "data": "tok"})

    store = InMemoryTokenStore()
    with _client(handler, store) as client:
        token = login(client, "admin", "secret")

    assert token == "tok"
    assert store.get("auth_token") == "tok"
    assert bodies == [
        {
            "username": "admin",
            "password": "secret",
            "id": None,
            "email": None,
            "roleId": None,
            "role": None,
            "status": None,
            "lastLogin": None,
            "createDate": None,
            "updateDate": None,
            "createdBy": None,
            "updatedBy": None,
        }
    ]


@pytest.mark.parametrize(
    ("code", "message"),
    [
        (20004, "user does not exist"),
        (20002, "account does not exist or password is incorrect"),
        (40000, "backend says no"),
    ],
)
def test_login_maps_business_codes(code: int, message: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": code, "message": "backend says no"})

    with _client(handler) as client:
        with pytest.raises(LoginError) as exc_info:
            login(client, "admin", "wrong")

    assert str(exc_info.value) == message
    assert exc_info.value.code == code
    assert client.token is None


def test_login_maps_error_path_codes() -> None:
    """Codes reported on a non-2xx response are mapped the same way."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"code": 20002, "message": "denied"})

    with _client(handler) as client:
        with pytest.raises(LoginError) as exc_info:
            login(client, "admin", "wrong")

    assert str(exc_info.value) == "account does not exist or password is incorrect"


def test_login_without_token_uses_fallback_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 200, "message": "success", "data": None})

    with _client(handler) as client:
        with pytest.raises(LoginError) as exc_info:
            login(client, "admin", "secret")

    assert str(exc_info.value) == "login failed, please try again later"


def test_logout_removes_token() -> None:
    store = InMemoryTokenStore()
    store.set("auth_token", "tok")

    with _client(lambda request: httpx.Response(200), store) as client:
        logout(client)

    assert store.get("auth_token") is None


def test_get_user_info_requests_user_path() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"username": request.url.path.rsplit("/", 1)[-1]})

    with _client(handler) as client:
        envelope = get_user_info(client, "admin")

    assert envelope.data == {"username": "admin"}


def test_file_token_store_persists_with_owner_only_mode(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "tokens.json"
    store = FileTokenStore(path)

    store.set("auth_token", "tok")

    assert FileTokenStore(path).get("auth_token") == "tok"
    assert stat.S_IMODE(path.stat().st_mode) == 0o600

    store.remove("auth_token")
    assert store.get("auth_token") is None
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_file_token_store_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "tokens.json"
    path.write_text("{not json", encoding="utf-8")

    assert FileTokenStore(path).get("auth_token") is None


def test_is_token_valid_compares_exp_with_now() -> None:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    future = _jwt({"exp": now.timestamp() + 60})
    past = _jwt({"exp": now.timestamp() - 60})

    assert is_token_valid(future, now=now) is True
    assert is_token_valid(past, now=now) is False


@pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.!!!.c", _jwt({"sub": "x"})])
def test_is_token_valid_rejects_malformed_tokens(token: str | None) -> None:
    assert is_token_valid(token) is False
