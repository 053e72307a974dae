"""
Operator CLI for the DevHub gateway.

Commands:
  - serve     : run the HTTP server (same as ``python -m devhub_gateway.main``)
  - manifest  : print the AI plugin manifest / OpenAPI document
  - action    : validate a JSON body and print the FunctionCall action
  - view      : run a view method against the configured RPC node

Usage:
  devhub-gateway <command> [options]
"""

from __future__ import annotations

import asyncio
import json
from typing import List, Optional

import typer

from .actions import ActionBuilder
from .adapters.near_rpc import NearRpc
from .config import load_config
from .errors import ApiError
from .logging import setup_logging
from .services.actions import CALL_ROUTES, build_action
from .services.queries import VIEW_ROUTES, view as run_view

app = typer.Typer(add_completion=False, help="DevHub gateway CLI")


def _echo_json(obj) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _fail(message: str, code: int = 1) -> None:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=code)


@app.callback()
def _root(
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for CLI runs (logs go to stderr)"),
):
    setup_logging(level=log_level.upper(), log_format="console")


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: $HOST or 0.0.0.0)"),
    port: Optional[int] = typer.Option(None, help="Port (default: $PORT or 8080)"),
    reload: bool = typer.Option(False, help="Enable autoreload (dev only)"),
):
    """Run the HTTP server."""
    from .main import serve as run_server

    cfg = load_config()
    run_server(host or cfg.host, port or cfg.port, reload=reload, log_level=cfg.log_level, log_format=cfg.log_format)


@app.command("manifest")
def manifest():
    """Print the plugin manifest served at /.well-known/ai-plugin.json."""
    from .app import create_app

    _echo_json(create_app(load_config()).openapi())


@app.command("action")
def action(
    route: str = typer.Argument(..., help=f"One of: {', '.join(CALL_ROUTES)}"),
    body: str = typer.Argument(..., help="JSON request body"),
):
    """Build a FunctionCall action offline."""
    if route not in CALL_ROUTES:
        _fail(f"unknown route {route!r}; expected one of: {', '.join(CALL_ROUTES)}", code=2)
    try:
        payload = json.loads(body)
    except ValueError as e:
        _fail(f"body is not valid JSON: {e}", code=2)

    builder = ActionBuilder(load_config().to_action_config())

    try:
        result = build_action(route, payload, builder)
    except ApiError as e:
        _fail(f"{e.code}: {e.message}")
    _echo_json(result.to_wire())


def _parse_pairs(pairs: List[str]) -> dict:
    out = {}
    for p in pairs:
        key, sep, value = p.partition("=")
        if not sep or not key:
            _fail(f"expected key=value, got {p!r}", code=2)
        out[key] = value
    return out


@app.command("view")
def view(
    route: str = typer.Argument(..., help=f"One of: {', '.join(VIEW_ROUTES)}"),
    params: List[str] = typer.Argument(None, help="Query parameters as key=value"),
):
    """Run a view method and print the decoded result."""
    if route not in VIEW_ROUTES:
        _fail(f"unknown route {route!r}; expected one of: {', '.join(VIEW_ROUTES)}", code=2)
    cfg = load_config()
    query = _parse_pairs(params or [])

    async def _run():
        async with NearRpc(cfg.to_rpc_config()) as rpc:
            return await run_view(route, query, rpc, contract_id=cfg.contract_id)

    try:
        decoded = asyncio.run(_run())
    except ApiError as e:
        _fail(f"{e.code}: {e.message}")
    if decoded.failed:
        typer.secho(f"warning: result not decoded ({decoded.error})", fg=typer.colors.YELLOW, err=True)
    _echo_json(decoded.value)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
