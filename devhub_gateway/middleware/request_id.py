from __future__ import annotations

"""
Request id middleware.

- Propagates an inbound ``X-Request-Id`` or generates one (uuid4 hex).
- Stores it on ``request.state.request_id`` and binds it into structlog's
  contextvars so every log line of the request carries it.
- Echoes it on the response.
"""

import re
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..logging import bind_request_context, clear_request_context

REQUEST_ID_HEADER = "X-Request-Id"
# Inbound ids are echoed into headers and logs; keep them short and printable.
_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def _accept_or_generate(value: str | None) -> str:
    if value and _SAFE_ID_RE.match(value):
        return value
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next) -> Response:
        req_id = _accept_or_generate(request.headers.get(self.header_name))
        request.state.request_id = req_id
        bind_request_context(request_id=req_id)
        try:
            response: Response = await call_next(request)
        finally:
            clear_request_context("request_id")
        response.headers[self.header_name] = req_id
        return response


__all__ = ["RequestIdMiddleware", "REQUEST_ID_HEADER"]
