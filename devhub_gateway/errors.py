from __future__ import annotations

"""
Error hierarchy for the DevHub gateway.

Every API error carries an HTTP status, a stable machine ``code`` and a
human message, and serializes to an RFC 7807 "problem+json" body. The
exception handlers in :mod:`devhub_gateway.middleware.errors` catch these
and render them; route handlers and services just raise.

Usage
-----
    from devhub_gateway.errors import InvalidInput

    raise InvalidInput()
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


DEFAULT_ERROR_DOCS_BASE = "about:blank"

# Plugin clients read a flat "error" member next to the problem fields.
INVALID_INPUT_MESSAGE = "Invalid input"


@dataclass(eq=False)
class ApiError(Exception):
    message: str
    status_code: int = 400
    code: str = "bad_request"
    details: Optional[Mapping[str, Any]] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def type_uri(self) -> str:
        return DEFAULT_ERROR_DOCS_BASE

    def title(self) -> str:
        return {
            "invalid_input": "Invalid Input",
            "not_found": "Not Found",
            "rpc_error": "Upstream RPC Error",
            "server_error": "Internal Server Error",
        }.get(self.code, self.message or "Error")

    def to_problem(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "type": self.type_uri(),
            "title": self.title(),
            "status": self.status_code,
            "code": self.code,
            "detail": self.message,
        }
        if self.details:
            body["details"] = dict(self.details)
        for k, v in self.extras.items():
            body.setdefault(k, v)
        return body


# ------------------------------ Concrete types ------------------------------- #


class InvalidInput(ApiError):
    """A required field is missing or has the wrong shape. Deliberately uniform."""

    def __init__(self, message: str = INVALID_INPUT_MESSAGE):
        super().__init__(
            message=message,
            status_code=400,
            code="invalid_input",
            extras={"error": INVALID_INPUT_MESSAGE},
        )


class NotFound(ApiError):
    def __init__(self, what: str = "Resource", *, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message=f"{what} not found", status_code=404, code="not_found", details=details)


class RpcError(ApiError):
    def __init__(self, message: str = "Upstream RPC error", *, details: Optional[Mapping[str, Any]] = None, status: int = 502):
        super().__init__(
            message=message,
            status_code=status,
            code="rpc_error",
            details=details,
            extras={"error": message},
        )


class ServerError(ApiError):
    def __init__(self, message: str = "Internal server error", *, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message=message, status_code=500, code="server_error", details=details)


__all__ = [
    "ApiError",
    "InvalidInput",
    "NotFound",
    "RpcError",
    "ServerError",
    "INVALID_INPUT_MESSAGE",
]
