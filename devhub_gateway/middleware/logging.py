from __future__ import annotations

"""
Access logging middleware.

One structured line per request: method, path, route, status, latency_ms,
client_ip, request_id. 5xx log at error, 4xx at warning, the rest at info.

    from devhub_gateway.middleware.logging import install_access_log_middleware
    install_access_log_middleware(app)
"""

import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..logging import get_logger

log = get_logger("access")


def _client_ip(request: Request) -> str:
    fwd = request.headers.get("x-forwarded-for")
    if fwd:
        return fwd.split(",")[0].strip()
    if request.client:
        return request.client.host
    return ""


def _level_for_status(status: int) -> str:
    if status >= 500:
        return "error"
    if status >= 400:
        return "warning"
    return "info"


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        start_ns = time.perf_counter_ns()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            route = request.scope.get("route")
            getattr(log, _level_for_status(status))(
                "http_request",
                method=request.method,
                path=request.url.path,
                route=getattr(route, "path", "") or "",
                status=status,
                latency_ms=round((time.perf_counter_ns() - start_ns) / 1e6, 3),
                client_ip=_client_ip(request),
                request_id=getattr(request.state, "request_id", ""),
            )


def install_access_log_middleware(app: FastAPI) -> None:
    app.add_middleware(AccessLogMiddleware)


__all__ = ["AccessLogMiddleware", "install_access_log_middleware"]
