from __future__ import annotations

import base64
import json

import httpx
import pytest

from devhub_gateway.adapters.near_rpc import (RpcResponseError,
                                              RpcTransportError,
                                              build_call_function_envelope,
                                              encode_args)
from devhub_gateway.metrics import Metrics
from tests.conftest import decode_args


def test_envelope_shape():
    env = build_call_function_envelope("devhub.near", "get_community", {"handle": "near"})
    assert env == {
        "jsonrpc": "2.0",
        "id": "dontcare",
        "method": "query",
        "params": {
            "request_type": "call_function",
            "finality": "final",
            "account_id": "devhub.near",
            "method_name": "get_community",
            "args_base64": base64.b64encode(b'{"handle":"near"}').decode(),
        },
    }


def test_encode_args_is_compact_and_keeps_order():
    text = base64.b64decode(encode_args({"b": 1, "a": [1, 2], "u": "ñ"})).decode("utf-8")
    assert text == '{"b":1,"a":[1,2],"u":"ñ"}'


@pytest.mark.asyncio
async def test_call_function_posts_envelope(make_rpc, node):
    node.answer([1, 2, 3], block_height=99)
    async with make_rpc() as rpc:
        res = await rpc.call_function("devhub.near", "get_proposal", {"proposal_id": 42})

    assert res.result == [1, 2, 3]
    assert res.block_height == 99
    assert len(node.requests) == 1
    assert node.last["method"] == "query"
    assert node.last["params"]["method_name"] == "get_proposal"
    assert decode_args(node.last) == '{"proposal_id":42}'


@pytest.mark.asyncio
async def test_transport_failure(make_rpc, node):
    node.error = httpx.ConnectError("connection refused")
    async with make_rpc() as rpc:
        with pytest.raises(RpcTransportError):
            await rpc.call_function("devhub.near", "get_community", {"handle": "x"})


@pytest.mark.asyncio
async def test_http_error_status(make_rpc, node):
    node.status = 503
    node.raw = "upstream down"
    async with make_rpc() as rpc:
        with pytest.raises(RpcTransportError) as ei:
            await rpc.call_function("devhub.near", "get_community", {"handle": "x"})
    assert ei.value.status == 503


@pytest.mark.asyncio
async def test_non_json_body(make_rpc, node):
    node.raw = "<html>oops</html>"
    async with make_rpc() as rpc:
        with pytest.raises(RpcTransportError):
            await rpc.call_function("devhub.near", "get_community", {"handle": "x"})


@pytest.mark.asyncio
async def test_jsonrpc_error_member(make_rpc, node):
    node.reply = {"jsonrpc": "2.0", "id": "dontcare", "error": {"code": -32000, "message": "Server error", "data": "boom"}}
    async with make_rpc() as rpc:
        with pytest.raises(RpcResponseError) as ei:
            await rpc.call_function("devhub.near", "get_community", {"handle": "x"})
    assert ei.value.code == -32000
    assert ei.value.data == "boom"


@pytest.mark.asyncio
async def test_missing_result(make_rpc, node):
    node.reply = {"jsonrpc": "2.0", "id": "dontcare"}
    async with make_rpc() as rpc:
        with pytest.raises(RpcResponseError):
            await rpc.call_function("devhub.near", "get_community", {"handle": "x"})


@pytest.mark.asyncio
async def test_result_without_inner_result(make_rpc, node):
    node.reply = {"jsonrpc": "2.0", "id": "dontcare", "result": {"logs": [], "block_height": 1}}
    async with make_rpc() as rpc:
        with pytest.raises(RpcResponseError):
            await rpc.call_function("devhub.near", "get_community", {"handle": "x"})


@pytest.mark.asyncio
async def test_contract_panic_in_result(make_rpc, node):
    node.reply = {
        "jsonrpc": "2.0",
        "id": "dontcare",
        "result": {"error": "wasm execution failed: Community not found", "logs": ["x"], "block_height": 1},
    }
    async with make_rpc() as rpc:
        with pytest.raises(RpcResponseError, match="Community not found"):
            await rpc.call_function("devhub.near", "get_community", {"handle": "x"})


@pytest.mark.asyncio
async def test_client_starts_lazily_and_closes(make_rpc):
    rpc = make_rpc()
    res = await rpc.call_function("devhub.near", "get_community", {"handle": "x"})
    assert json.loads(bytes(res.result)) == {"ok": True}
    await rpc.close()
    await rpc.close()


@pytest.mark.asyncio
async def test_metrics_are_recorded(make_rpc, node):
    metrics = Metrics()
    async with make_rpc(metrics=metrics) as rpc:
        await rpc.call_function("devhub.near", "get_community", {"handle": "x"})
        node.error = httpx.ReadTimeout("slow")
        with pytest.raises(RpcTransportError):
            await rpc.call_function("devhub.near", "get_community", {"handle": "x"})

    sample = metrics.registry.get_sample_value
    assert sample("rpc_calls_total", {"method": "get_community", "outcome": "ok"}) == 1.0
    assert sample("rpc_calls_total", {"method": "get_community", "outcome": "error"}) == 1.0
    assert sample("rpc_call_duration_seconds_count", {"method": "get_community"}) == 2.0


@pytest.mark.asyncio
async def test_malformed_result_members(make_rpc, node):
    node.reply = {
        "jsonrpc": "2.0",
        "id": "dontcare",
        "result": {"result": [104, 105], "logs": None, "block_height": "x"},
    }
    metrics = Metrics()
    async with make_rpc(metrics=metrics) as rpc:
        with pytest.raises(RpcResponseError, match="malformed"):
            await rpc.call_function("devhub.near", "get_community", {"handle": "x"})
    assert metrics.registry.get_sample_value(
        "rpc_calls_total", {"method": "get_community", "outcome": "error"}
    ) == 1.0
