"""
JSON-RPC client for read-only calls against a NEAR node.

Only one RPC method is needed by the gateway: ``query`` with
``request_type=call_function`` at ``finality=final``. Arguments travel as
base64 of their compact JSON text.

Each call is a single attempt. There is no retry loop and, unless
configured, no timeout; a hung node only stalls the requests waiting on it.

Errors
------
* :class:`RpcTransportError`: network failure, non-2xx status, non-JSON body.
* :class:`RpcResponseError`: JSON-RPC ``error`` member, missing or malformed
  ``result``, or a contract failure reported as ``result.error``.
"""

from __future__ import annotations

import base64
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx
from pydantic import ValidationError

from ..logging import get_logger
from ..models.query import QueryResult

log = get_logger(__name__)

RPC_ID = "dontcare"


# ----------------------------- Errors ---------------------------------------


class NearRpcError(Exception):
    """Base class for all NEAR RPC errors."""


class RpcTransportError(NearRpcError):
    """Network/HTTP transport-level error."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class RpcResponseError(NearRpcError):
    """The node answered, but not with a usable result."""

    def __init__(self, message: str, *, code: Any = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data


# ----------------------------- Helpers --------------------------------------


def encode_args(args: Mapping[str, Any]) -> str:
    """Base64 of the compact JSON text of ``args`` (key order preserved)."""
    text = json.dumps(dict(args), separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def build_call_function_envelope(account_id: str, method_name: str, args: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": RPC_ID,
        "method": "query",
        "params": {
            "request_type": "call_function",
            "finality": "final",
            "account_id": account_id,
            "method_name": method_name,
            "args_base64": encode_args(args),
        },
    }


def _build_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    hdrs = {
        "content-type": "application/json",
        "accept": "application/json",
    }
    if extra:
        hdrs.update(extra)
    return hdrs


# ----------------------------- Client ---------------------------------------


@dataclass
class NearRpcConfig:
    url: str = "https://rpc.mainnet.near.org"
    timeout_s: Optional[float] = None
    headers: Optional[Dict[str, str]] = None


class NearRpc:
    """
    Minimal async JSON-RPC client for NEAR view calls.

    ``transport`` is forwarded to :class:`httpx.AsyncClient`; tests pass an
    :class:`httpx.MockTransport` there.
    """

    def __init__(
        self,
        config: NearRpcConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Any = None,
    ):
        self._cfg = config
        self._transport = transport
        self._metrics = metrics
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def url(self) -> str:
        return self._cfg.url

    # ---------- lifecycle ----------

    async def start(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._cfg.timeout_s,
                headers=_build_headers(self._cfg.headers),
                transport=self._transport,
            )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "NearRpc":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ---------- core transport ----------

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self._client is None:
            await self.start()
        assert self._client is not None

        try:
            resp = await self._client.post(self._cfg.url, json=payload)
        except httpx.HTTPError as exc:
            raise RpcTransportError(f"RPC request failed: {exc}") from exc

        if not resp.is_success:
            raise RpcTransportError(f"HTTP {resp.status_code}: {resp.text[:256]!r}", status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise RpcTransportError(f"non-JSON response: {resp.text[:256]!r}", status=resp.status_code) from exc
        if not isinstance(data, dict):
            raise RpcResponseError("response is not a JSON object")
        return data

    async def query(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Send one JSON-RPC envelope and return its ``result`` object."""
        data = await self._post(payload)

        err = data.get("error")
        if err is not None:
            if isinstance(err, dict):
                msg = err.get("message") or err.get("name") or "Unknown error"
                raise RpcResponseError(f"RPC error: {msg}", code=err.get("code"), data=err.get("data"))
            raise RpcResponseError(f"RPC error: {err}")

        result = data.get("result")
        if not isinstance(result, dict):
            raise RpcResponseError("RPC response has no result object")
        if result.get("error"):
            # contract panics are reported inside an otherwise successful result
            raise RpcResponseError(f"contract call failed: {result['error']}", data=result.get("logs"))
        return result

    # ---------- typed methods ----------

    async def call_function(self, account_id: str, method_name: str, args: Mapping[str, Any]) -> QueryResult:
        """Run a view method on ``account_id`` at final finality."""
        payload = build_call_function_envelope(account_id, method_name, args)
        started = time.perf_counter()
        outcome = "ok"
        try:
            result = await self.query(payload)
            if "result" not in result:
                raise RpcResponseError("call_function result has no 'result' member")
            try:
                return QueryResult.model_validate(result)
            except ValidationError as exc:
                raise RpcResponseError("malformed call_function result") from exc
        except NearRpcError:
            outcome = "error"
            raise
        finally:
            elapsed = time.perf_counter() - started
            log.debug("rpc_call", method=method_name, account_id=account_id, outcome=outcome, latency_ms=round(elapsed * 1000, 3))
            if self._metrics is not None:
                self._metrics.observe_rpc(method_name, outcome, elapsed)


__all__ = [
    "NearRpc",
    "NearRpcConfig",
    "NearRpcError",
    "RpcTransportError",
    "RpcResponseError",
    "encode_args",
    "build_call_function_envelope",
]
