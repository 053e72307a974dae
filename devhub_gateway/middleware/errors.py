from __future__ import annotations

"""
Exception → RFC 7807 "problem+json" handlers.

- ApiError subclasses render their own problem body (status, code, extras).
- Unknown routes render as :class:`NotFound`. Other HTTPExceptions (405, ...)
  and RequestValidationError get a generic problem body.
- Anything else becomes a 500 whose stack goes to the log, never to the client.

Every body carries ``instance`` (the request path) and ``request_id``.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import ApiError, NotFound, ServerError
from ..logging import get_logger

PROBLEM_CT = "application/problem+json"

log = get_logger(__name__)

_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    415: "Unsupported Media Type",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
}


def _base_problem(
    request: Request,
    *,
    status: int,
    title: str,
    detail: Optional[str] = None,
    extras: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    prob: Dict[str, Any] = {
        "type": "about:blank",
        "title": title,
        "status": status,
        "detail": detail or "",
        "instance": str(request.url.path),
        "request_id": getattr(request.state, "request_id", "") or "",
    }
    if extras:
        for k, v in extras.items():
            prob.setdefault(k, v)
    return prob


def _problem_response(status: int, body: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status, content=body, media_type=PROBLEM_CT)


async def _handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    body = exc.to_problem()
    body["instance"] = str(request.url.path)
    body["request_id"] = getattr(request.state, "request_id", "") or ""
    if exc.status_code >= 500:
        log.error("api_error", code=exc.code, detail=exc.message, path=body["instance"])
    else:
        log.warning("api_error", code=exc.code, detail=exc.message, path=body["instance"])
    return _problem_response(exc.status_code, body)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    status = int(exc.status_code)
    if status == 404:
        return await _handle_api_error(request, NotFound("Route", details={"path": request.url.path}))
    body = _base_problem(
        request,
        status=status,
        title=_TITLES.get(status, "Error"),
        detail=str(exc.detail) if exc.detail else "",
    )
    response = _problem_response(status, body)
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = _base_problem(
        request,
        status=422,
        title=_TITLES[422],
        detail="Request validation failed.",
        extras={"errors": jsonable_encoder(exc.errors())},
    )
    log.warning("validation_error", path=body["instance"])
    return _problem_response(422, body)


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    err = ServerError("An unexpected error occurred. Please retry or report the request_id.")
    body = err.to_problem()
    body["instance"] = str(request.url.path)
    body["request_id"] = getattr(request.state, "request_id", "") or ""
    log.exception("unhandled_exception", path=body["instance"])
    return _problem_response(500, body)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _handle_api_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected_error)


__all__ = ["install_error_handlers", "PROBLEM_CT"]
