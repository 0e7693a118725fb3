"""DFMS console command-line interface implemented with Typer."""

from __future__ import annotations

import dataclasses
import json
import sys
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Callable

import typer
from pydantic import ValidationError

from packages.dfms_sdk import (
    ApiResultError,
    ClusterApi,
    ConfigError,
    DatabaseApi,
    DfmsClient,
    FileTokenStore,
    LoginError,
    NetworkError,
    RetryPolicy,
    SystemApi,
    UpstreamError,
    login,
    logout,
)
from packages.dfms_shared.config import DfmsSettings, load_settings
from packages.dfms_shared.envelope import ApiEnvelope
from packages.dfms_shared.http import unwrap
from packages.dfms_shared.logging import configure_logging

SUCCESS_EXIT_CODE = 0
RESULT_ERROR_EXIT_CODE = 3
TRANSPORT_ERROR_EXIT_CODE = 4


class HttpMethod(str, Enum):
    """HTTP methods accepted by the raw ``request`` command."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class LogLevel(str, Enum):
    """Log levels accepted by ``--log-level``."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class CliConfig:
    """Resolved settings and output options shared by every command."""

    settings: DfmsSettings
    as_json: bool


def _serialize(value: Any) -> Any:
    """Convert result objects to JSON-serializable structures."""

    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, ApiEnvelope):
        return value.to_dict()
    if isinstance(value, (datetime, date, Decimal, Path)):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _serialize(dataclasses.asdict(value))
    if isinstance(value, dict):
        return {str(key): _serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_serialize(item) for item in value]
    if hasattr(value, "model_dump"):
        return _serialize(value.model_dump(mode="python", by_alias=True))
    return str(value)


def _emit_output(result: Any, as_json: bool) -> None:
    """Render command output in requested format."""

    data = _serialize(result)
    if as_json:
        typer.echo(json.dumps(data, sort_keys=True, separators=(",", ":")))
        return
    rendered = _render_human(data)
    if rendered is not None:
        typer.echo(rendered)
        return
    if data is None:
        typer.echo("ok")
        return
    typer.echo(str(data))


def _emit_error(exc: Exception, as_json: bool) -> None:
    """Render mapped client errors to stderr."""

    envelope = getattr(exc, "envelope", None)
    if as_json:
        payload: dict[str, Any] = {"error": str(exc)}
        if isinstance(envelope, ApiEnvelope):
            payload["code"] = envelope.code
        typer.echo(json.dumps(payload), err=True)
        return
    if isinstance(envelope, ApiEnvelope):
        typer.echo(f"error [{envelope.code}]: {exc}", err=True)
        return
    typer.echo(f"error: {exc}", err=True)


def _render_human(data: Any) -> str | None:
    """Return human-oriented rendering for recognized response shapes."""
    if isinstance(data, list):
        return _render_rows(data)
    if isinstance(data, dict):
        return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)
    return None


def _render_rows(items: list[Any]) -> str:
    """Render a listing as one line per item."""
    if len(items) == 0:
        return "No entries found."
    lines: list[str] = []
    for item in items:
        if not isinstance(item, dict):
            lines.append(f"- {item}")
            continue
        label = str(item.get("name", item.get("id", "<unknown>")))
        status = str(item.get("status", "")).strip()
        line = f"- {label}"
        if "id" in item and "name" in item:
            line = f"{line} [{item['id']}]"
        if status != "":
            line = f"{line} ({status})"
        lines.append(line)
    return "\n".join(lines)


def _with_client(cfg: CliConfig) -> DfmsClient:
    """Return one client built from the resolved settings."""
    settings = cfg.settings
    return DfmsClient(
        settings=settings,
        token_store=FileTokenStore(settings.auth.token_path),
        retry=RetryPolicy.from_settings(settings.api),
    )


def _run_command(cfg: CliConfig, invoke: Callable[[DfmsClient], Any]) -> None:
    """Execute one client call and map outputs/errors to process semantics."""
    try:
        with _with_client(cfg) as client:
            result = invoke(client)
    except (ApiResultError, UpstreamError, LoginError) as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=RESULT_ERROR_EXIT_CODE) from exc
    except (NetworkError, ConfigError) as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=TRANSPORT_ERROR_EXIT_CODE) from exc

    _emit_output(result, cfg.as_json)
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


def _require_config(ctx: typer.Context) -> CliConfig:
    """Return required CLI config from Typer context."""

    config = ctx.obj
    if not isinstance(config, CliConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


def _parse_json(value: str | None) -> Any:
    """Parse a ``--data`` option value."""
    if value is None:
        return None
    try:
        return json.loads(value)
    except ValueError as exc:
        raise typer.BadParameter(f"invalid JSON: {exc}", param_hint="--data") from exc


app = typer.Typer(no_args_is_help=True, help="DFMS console command-line interface")
databases_app = typer.Typer(help="Database commands")
nodes_app = typer.Typer(help="Cluster node commands")


@app.callback()
def main(
    ctx: typer.Context,
    base_url: str | None = typer.Option(None, help="DFMS backend base URL"),
    timeout: float | None = typer.Option(
        None, min=0.001, help="Request timeout in seconds"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON output"),
    mock: bool = typer.Option(False, "--mock", help="Serve requests from the in-memory mock"),
    token_path: Path | None = typer.Option(None, help="Bearer token file"),
    config: Path | None = typer.Option(None, help="YAML settings file"),
    log_level: LogLevel | None = typer.Option(
        None, case_sensitive=False, help="Log level override"
    ),
) -> None:
    """Resolve settings and store global options for all commands."""

    try:
        settings = load_settings(
            init_params={
                "api": {
                    "base_url": base_url,
                    "timeout_seconds": timeout,
                    "use_mock": True if mock else None,
                },
                "auth": {"token_path": token_path},
            },
            config_path=config,
        )
    except ValidationError as exc:
        typer.echo(f"error: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=TRANSPORT_ERROR_EXIT_CODE) from exc

    configure_logging(
        settings.logging,
        level=log_level.value if log_level is not None else None,
        json_output=False,
        stream=sys.stderr,
    )
    ctx.obj = CliConfig(settings=settings, as_json=as_json)


@app.command("login")
def login_command(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="Account name"),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Account password"),
) -> None:
    """Log in and store the bearer token."""
    cfg = _require_config(ctx)

    def invoke(client: DfmsClient) -> dict[str, Any]:
        login(client, username, password)
        return {"username": username, "loggedIn": True}

    _run_command(cfg, invoke)


@app.command("logout")
def logout_command(ctx: typer.Context) -> None:
    """Forget the stored bearer token."""
    cfg = _require_config(ctx)
    _run_command(cfg, logout)


@app.command("request")
def request_command(
    ctx: typer.Context,
    method: HttpMethod = typer.Argument(..., case_sensitive=False, help="HTTP method"),
    path: str = typer.Argument(..., help="API path, e.g. /dfm/database"),
    data: str | None = typer.Option(None, help="JSON request body"),
) -> None:
    """Issue one raw request and print the normalized envelope."""
    cfg = _require_config(ctx)
    body = _parse_json(data)
    kwargs: dict[str, Any] = {} if body is None else {"json": body}
    _run_command(cfg, lambda client: client.request(method.value, path, **kwargs))


@databases_app.command("list")
def databases_list_command(ctx: typer.Context) -> None:
    """List databases."""
    cfg = _require_config(ctx)
    _run_command(cfg, lambda client: unwrap(DatabaseApi(client).list()))


@databases_app.command("get")
def databases_get_command(
    ctx: typer.Context, database_id: str = typer.Argument(..., help="Database id")
) -> None:
    """Show one database."""
    cfg = _require_config(ctx)
    _run_command(cfg, lambda client: unwrap(DatabaseApi(client).get(database_id)))


@nodes_app.command("list")
def nodes_list_command(ctx: typer.Context) -> None:
    """List cluster nodes."""
    cfg = _require_config(ctx)
    _run_command(cfg, lambda client: unwrap(ClusterApi(client).list_nodes()))


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show overall system status."""
    cfg = _require_config(ctx)
    _run_command(cfg, lambda client: unwrap(SystemApi(client).get_status()))


app.add_typer(databases_app, name="databases")
app.add_typer(nodes_app, name="nodes")


if __name__ == "__main__":
    app()
