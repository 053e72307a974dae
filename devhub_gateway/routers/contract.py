from __future__ import annotations

"""
Contract routes under /api.

POST /api/<method>  → unsigned FunctionCall action for <method>
GET  /api/get_*     → view call proxied to the NEAR node, result decoded

Bodies and query strings are read untyped and checked by
:mod:`devhub_gateway.validation`, so a bad request is always a uniform 400
rather than FastAPI's field-level 422. The request schemas published in
OpenAPI are generated from the same validation table.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..actions import ActionBuilder
from ..adapters.near_rpc import NearRpc
from ..config import Config
from ..errors import InvalidInput
from ..models.actions import FunctionCallAction
from ..services.actions import CALL_ROUTES, build_action
from ..services.queries import VIEW_ROUTES, view
from ..validation import ROUTE_FIELDS, request_schema
from .deps import get_builder, get_config, get_rpc

router = APIRouter(prefix="/api")

DECODED_HEADER = "X-Result-Decoded"


@dataclass(frozen=True)
class RouteDoc:
    tag: str
    summary: str
    description: str


ROUTE_DOCS: Dict[str, RouteDoc] = {
    "add_member": RouteDoc("Member", "Add a new member", "This endpoint adds a new member to the community."),
    "add_proposal": RouteDoc("Proposal", "Add a new proposal", "This endpoint adds a new proposal to the community."),
    "add_rfp": RouteDoc("RFP", "Add a new RFP", "This endpoint adds a new RFP to the community."),
    "cancel_rfp": RouteDoc("RFP", "Cancel an RFP", "This endpoint cancels an existing RFP."),
    "create_community": RouteDoc("Community", "Create a new community", "This endpoint creates a new community."),
    "edit_member": RouteDoc("Member", "Edit an existing member", "This endpoint edits an existing member in the community."),
    "edit_proposal": RouteDoc("Proposal", "Edit an existing proposal", "This endpoint edits an existing proposal in the community."),
    "get_community": RouteDoc("Community", "Get community details", "This endpoint retrieves details of a community."),
    "get_proposal": RouteDoc("Proposal", "Get proposal details", "This endpoint retrieves details of a proposal."),
}


def operation_id(route: str) -> str:
    return route.replace("_", "-")


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as e:
        raise InvalidInput() from e


def _call_endpoint(route: str) -> Callable[..., Any]:
    async def endpoint(request: Request, builder: ActionBuilder = Depends(get_builder)) -> FunctionCallAction:
        payload = await _read_json(request)
        return build_action(route, payload, builder)

    endpoint.__name__ = f"post_{route}"
    return endpoint


def _view_endpoint(route: str) -> Callable[..., Any]:
    async def endpoint(
        request: Request,
        rpc: NearRpc = Depends(get_rpc),
        cfg: Config = Depends(get_config),
    ) -> JSONResponse:
        decoded = await view(route, dict(request.query_params), rpc, contract_id=cfg.contract_id)
        headers = {DECODED_HEADER: "false"} if decoded.failed else None
        return JSONResponse(content=decoded.value, headers=headers)

    endpoint.__name__ = route
    return endpoint


def _view_parameters(route: str) -> list[Dict[str, Any]]:
    return [
        {"name": r.name, "in": "query", "required": r.required, "schema": dict(r.schema)}
        for r in ROUTE_FIELDS[route]
    ]


for _route in CALL_ROUTES:
    _doc = ROUTE_DOCS[_route]
    router.add_api_route(
        f"/{_route}",
        _call_endpoint(_route),
        methods=["POST"],
        response_model=FunctionCallAction,
        tags=[_doc.tag],
        summary=_doc.summary,
        description=_doc.description,
        operation_id=operation_id(_route),
        openapi_extra={
            "requestBody": {
                "required": True,
                "content": {"application/json": {"schema": request_schema(_route)}},
            }
        },
    )

for _route in VIEW_ROUTES:
    _doc = ROUTE_DOCS[_route]
    router.add_api_route(
        f"/{_route}",
        _view_endpoint(_route),
        methods=["GET"],
        tags=[_doc.tag],
        summary=_doc.summary,
        description=_doc.description,
        operation_id=operation_id(_route),
        responses={200: {"description": "Successful response", "content": {"application/json": {"schema": {"type": "object"}}}}},
        openapi_extra={"parameters": _view_parameters(_route)},
    )


__all__ = ["router", "ROUTE_DOCS", "DECODED_HEADER", "operation_id"]
