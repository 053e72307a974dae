from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, Iterator, List, Optional

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from devhub_gateway.adapters.near_rpc import NearRpc, NearRpcConfig
from devhub_gateway.app import create_app
from devhub_gateway.config import Config

RPC_URL = "https://rpc.test.invalid"


def as_byte_list(value: Any) -> List[int]:
    """Encode ``value`` the way a NEAR contract returns it: JSON text as a byte list."""
    return list(json.dumps(value, separators=(",", ":")).encode("utf-8"))


def decode_args(envelope: Dict[str, Any]) -> str:
    return base64.b64decode(envelope["params"]["args_base64"]).decode("utf-8")


@dataclass
class FakeNode:
    """
    Stand-in for a NEAR RPC node behind ``httpx.MockTransport``.

    Set ``reply`` (JSON body), ``status``, ``raw`` (non-JSON text) or
    ``error`` (exception raised by the transport) before calling.
    """

    reply: Any = None
    status: int = 200
    raw: Optional[str] = None
    error: Optional[Exception] = None
    requests: List[Dict[str, Any]] = field(default_factory=list)

    def answer(self, result: Any, **extra: Any) -> None:
        self.reply = {
            "jsonrpc": "2.0",
            "id": "dontcare",
            "result": {"result": result, "logs": [], "block_height": 1, "block_hash": "abc", **extra},
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if self.error is not None:
            raise self.error
        if self.raw is not None:
            return httpx.Response(self.status, text=self.raw)
        return httpx.Response(self.status, json=self.reply)

    @property
    def last(self) -> Dict[str, Any]:
        assert self.requests, "no RPC request was sent"
        return self.requests[-1]


@pytest.fixture
def node() -> FakeNode:
    n = FakeNode()
    n.answer(as_byte_list({"ok": True}))
    return n


@pytest.fixture
def make_rpc(node: FakeNode) -> Callable[..., NearRpc]:
    def _make(**kwargs: Any) -> NearRpc:
        return NearRpc(NearRpcConfig(url=RPC_URL), transport=httpx.MockTransport(node.handler), **kwargs)

    return _make


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(
        rpc_url=RPC_URL,
        contract_id="devhub.near",
        plugin_manifest_file=str(tmp_path / "bitte.dev.json"),
        plugin_server_url=None,
        port=8080,
    )


@pytest.fixture
def app(config: Config, make_rpc: Callable[..., NearRpc]) -> FastAPI:
    return create_app(config, rpc=make_rpc())


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def aclient(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """Async client over ASGI; lifespan does not run, the RPC client starts on first use."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
    await app.state.rpc.close()
