from __future__ import annotations

import httpx
import pytest

from devhub_gateway.errors import RpcError
from devhub_gateway.services.queries import view
from tests.conftest import as_byte_list, decode_args


def test_get_community_decodes_byte_list(client, node):
    node.answer(as_byte_list({"handle": "near", "name": "NEAR"}))
    resp = client.get("/api/get_community", params={"handle": "near"})

    assert resp.status_code == 200
    # the decoded text is sent as a JSON string, not re-parsed
    assert resp.json() == '{"handle":"near","name":"NEAR"}'
    assert "X-Result-Decoded" not in resp.headers

    env = node.last
    assert env["params"]["account_id"] == "devhub.near"
    assert env["params"]["method_name"] == "get_community"
    assert env["params"]["finality"] == "final"
    assert decode_args(env) == '{"handle":"near"}'


def test_get_proposal_sends_numeric_id(client, node):
    resp = client.get("/api/get_proposal", params={"proposal_id": "42"})
    assert resp.status_code == 200
    assert decode_args(node.last) == '{"proposal_id":42}'


def test_get_proposal_zero_is_valid(client, node):
    assert client.get("/api/get_proposal", params={"proposal_id": "0"}).status_code == 200
    assert decode_args(node.last) == '{"proposal_id":0}'


def test_extra_query_params_are_not_forwarded(client, node):
    client.get("/api/get_community", params={"handle": "near", "limit": "5"})
    assert decode_args(node.last) == '{"handle":"near"}'


@pytest.mark.parametrize(
    "path, params",
    [
        ("/api/get_community", {}),
        ("/api/get_community", {"handle": ""}),
        ("/api/get_proposal", {}),
        ("/api/get_proposal", {"proposal_id": "abc"}),
    ],
)
def test_invalid_query_is_400_and_skips_rpc(client, node, path, params):
    resp = client.get(path, params=params)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid input"
    assert node.requests == []


def test_upstream_failure_is_502(client, node):
    node.error = httpx.ConnectError("connection refused")
    resp = client.get("/api/get_community", params={"handle": "near"})
    assert resp.status_code == 502
    assert resp.headers["content-type"].startswith("application/problem+json")
    data = resp.json()
    assert data["code"] == "rpc_error"
    assert data["error"] == "Upstream RPC call failed"
    assert data["details"]["method"] == "get_community"


def test_contract_panic_is_502(client, node):
    node.reply = {"jsonrpc": "2.0", "id": "dontcare", "result": {"error": "panicked", "logs": []}}
    assert client.get("/api/get_proposal", params={"proposal_id": "1"}).status_code == 502


def test_malformed_result_is_502(client, node):
    node.reply = {
        "jsonrpc": "2.0",
        "id": "dontcare",
        "result": {"result": [104, 105], "logs": None, "block_height": "x"},
    }
    resp = client.get("/api/get_community", params={"handle": "near"})
    assert resp.status_code == 502
    assert resp.json()["code"] == "rpc_error"


def test_non_list_result_passes_through(client, node):
    node.answer({"already": "decoded"})
    resp = client.get("/api/get_community", params={"handle": "near"})
    assert resp.status_code == 200
    assert resp.json() == {"already": "decoded"}
    assert "X-Result-Decoded" not in resp.headers


def test_undecodable_result_is_flagged(client, node):
    node.answer([123, "x", 125])
    resp = client.get("/api/get_community", params={"handle": "near"})
    assert resp.status_code == 200
    assert resp.json() == [123, "x", 125]
    assert resp.headers["X-Result-Decoded"] == "false"


@pytest.mark.asyncio
async def test_view_over_async_client(aclient, node):
    node.answer(as_byte_list([1, 2]))
    resp = await aclient.get("/api/get_proposal", params={"proposal_id": "7"})
    assert resp.status_code == 200
    assert resp.json() == "[1,2]"


@pytest.mark.asyncio
async def test_view_service_wraps_rpc_errors(make_rpc, node):
    node.status = 500
    node.raw = "internal"
    async with make_rpc() as rpc:
        with pytest.raises(RpcError) as ei:
            await view("get_community", {"handle": "near"}, rpc, contract_id="devhub.near")
    assert ei.value.status_code == 502
    assert "HTTP 500" in ei.value.details["reason"]


@pytest.mark.asyncio
async def test_view_service_rejects_call_routes(make_rpc):
    async with make_rpc() as rpc:
        with pytest.raises(KeyError):
            await view("add_member", {}, rpc, contract_id="devhub.near")
