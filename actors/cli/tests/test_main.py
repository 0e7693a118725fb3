"""CLI tests for DFMS console Typer commands."""

from __future__ import annotations

import importlib
import json
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

import httpx
import pytest
from typer.testing import CliRunner

from packages.dfms_sdk import DfmsClient, FileTokenStore


@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep host settings out and restore root logging after each run."""
    for key in list(os.environ):
        if key.startswith("DFMS_"):
            monkeypatch.delenv(key)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _load_cli() -> ModuleType:
    return importlib.import_module("actors.cli.main")


def _base_args(tmp_path: Path) -> list[str]:
    return [
        "--config",
        str(tmp_path / "missing.yaml"),
        "--token-path",
        str(tmp_path / "tokens.json"),
        "--log-level",
        "ERROR",
        "--base-url",
        "https://dfms.test",
    ]


def _route_to(
    monkeypatch: pytest.MonkeyPatch,
    cli: ModuleType,
    handler: Callable[[httpx.Request], httpx.Response],
) -> None:
    """Make every command talk to ``handler`` instead of the network."""

    def with_client(cfg: Any) -> DfmsClient:
        return DfmsClient(
            settings=cfg.settings,
            token_store=FileTokenStore(cfg.settings.auth.token_path),
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(cli, "_with_client", with_client)


def test_databases_list_renders_rows(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """List output prints one line per item."""
    cli = _load_cli()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/dfm/database"
        return httpx.Response(
            200,
            json={
                "code": 200,
                "message": "success",
                "data": [{"id": "db1", "name": "orders", "status": "online"}],
            },
        )

    _route_to(monkeypatch, cli, handler)
    result = CliRunner().invoke(cli.app, [*_base_args(tmp_path), "databases", "list"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "- orders [db1] (online)"


def test_request_command_prints_envelope_json(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    cli = _load_cli()
    bodies: list[Any] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"code": 404, "extra": "info"})

    _route_to(monkeypatch, cli, handler)
    result = CliRunner().invoke(
        cli.app,
        [
            *_base_args(tmp_path),
            "--json",
            "request",
            "post",
            "/dfm/database",
            "--data",
            '{"a": 1}',
        ],
    )

    assert result.exit_code == 0
    assert bodies == [{"a": 1}]
    assert json.loads(result.stdout) == {
        "code": 404,
        "message": "operation completed",
        "data": {"extra": "info"},
        "success": False,
    }


def test_request_command_rejects_invalid_json(tmp_path: Path) -> None:
    cli = _load_cli()

    result = CliRunner().invoke(
        cli.app, [*_base_args(tmp_path), "request", "GET", "/x", "--data", "{nope"]
    )

    assert result.exit_code == 2


def test_business_failure_exits_with_result_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    cli = _load_cli()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 50010, "message": "node offline"})

    _route_to(monkeypatch, cli, handler)
    result = CliRunner().invoke(cli.app, [*_base_args(tmp_path), "status"])

    assert result.exit_code == 3
    assert "error [50010]: node offline" in result.output


def test_upstream_error_exits_with_result_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    cli = _load_cli()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "no such database"})

    _route_to(monkeypatch, cli, handler)
    result = CliRunner().invoke(
        cli.app, [*_base_args(tmp_path), "--json", "databases", "get", "db9"]
    )

    assert result.exit_code == 3
    assert '{"error": "no such database", "code": 404}' in result.output


def test_network_error_exits_with_transport_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    cli = _load_cli()

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _route_to(monkeypatch, cli, handler)
    result = CliRunner().invoke(cli.app, [*_base_args(tmp_path), "nodes", "list"])

    assert result.exit_code == 4
    assert "network error: connection refused" in result.output


def test_login_stores_token_and_logout_removes_it(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    cli = _load_cli()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 200, "message": "success", "data": "tok"})

    _route_to(monkeypatch, cli, handler)
    runner = CliRunner()
    token_file = tmp_path / "tokens.json"

    login = runner.invoke(
        cli.app, [*_base_args(tmp_path), "--json", "login", "admin", "--password", "pw"]
    )
    stored = FileTokenStore(token_file).get("auth_token")
    logout = runner.invoke(cli.app, [*_base_args(tmp_path), "logout"])

    assert login.exit_code == 0
    assert json.loads(login.stdout) == {"loggedIn": True, "username": "admin"}
    assert stored == "tok"
    assert logout.exit_code == 0
    assert logout.stdout.strip() == "ok"
    assert FileTokenStore(token_file).get("auth_token") is None


def test_login_failure_exits_with_result_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    cli = _load_cli()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 20004, "message": "nope"})

    _route_to(monkeypatch, cli, handler)
    result = CliRunner().invoke(
        cli.app, [*_base_args(tmp_path), "login", "ghost", "--password", "pw"]
    )

    assert result.exit_code == 3
    assert "user does not exist" in result.output


def test_mock_mode_serves_seeded_collections(tmp_path: Path) -> None:
    """``--mock`` answers from the in-memory backend without a server."""
    cli = _load_cli()
    args = [*_base_args(tmp_path), "--mock", "--json", "nodes", "list"]

    result = CliRunner().invoke(
        cli.app, args, env={"DFMS_API__MOCK_DELAY_SECONDS": "0"}
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == []


def test_log_level_rejects_unknown_names(tmp_path: Path) -> None:
    cli = _load_cli()
    args = [a for a in _base_args(tmp_path) if a not in ("--log-level", "ERROR")]

    result = CliRunner().invoke(cli.app, [*args, "--log-level", "LOUD", "logout"])

    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)


def test_log_level_accepts_lowercase_names(tmp_path: Path) -> None:
    cli = _load_cli()
    args = [a for a in _base_args(tmp_path) if a not in ("--log-level", "ERROR")]

    result = CliRunner().invoke(cli.app, [*args, "--log-level", "warning", "logout"])

    assert result.exit_code == 0
    assert logging.getLogger().level == logging.WARNING
