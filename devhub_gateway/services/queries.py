"""
View operations: validated query → ``call_function`` on the node → decoded value.

Upstream failures surface as :class:`~devhub_gateway.errors.RpcError`
(HTTP 502). A result that can't be decoded is returned raw and logged.
"""

from __future__ import annotations

from typing import Any

from ..adapters.near_rpc import NearRpc, NearRpcError
from ..decoding import DecodedResult, decode
from ..errors import RpcError
from ..logging import get_logger
from ..validation import validate

log = get_logger(__name__)

VIEW_ROUTES = ("get_community", "get_proposal")


async def view(route: str, params: Any, rpc: NearRpc, *, contract_id: str) -> DecodedResult:
    if route not in VIEW_ROUTES:
        raise KeyError(f"{route!r} is not a view route")
    args = validate(route, params)

    try:
        res = await rpc.call_function(contract_id, route, args)
    except NearRpcError as e:
        log.warning("rpc_failed", method=route, error=str(e), error_type=type(e).__name__)
        raise RpcError(
            "Upstream RPC call failed",
            details={"method": route, "reason": str(e)},
        ) from e

    decoded = decode(res.result)
    if decoded.failed:
        log.warning("result_not_decoded", method=route, reason=decoded.error, block_height=res.block_height)
    return decoded


__all__ = ["VIEW_ROUTES", "view"]
