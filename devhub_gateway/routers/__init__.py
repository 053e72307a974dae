"""
HTTP routers.

- contract : /api/<method> function-call builders and /api/get_* view proxies
- health   : /api/ping, /version
- manifest : /openapi.json and /.well-known/ai-plugin.json (mounted, not included)
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from .contract import router as contract_router
from .health import router as health_router


def collect_routers() -> List[APIRouter]:
    """Routers in declaration order; order drives OpenAPI path order."""
    return [contract_router, health_router]


__all__ = ["collect_routers"]
