from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .actions import ActionBuilder
from .adapters.near_rpc import NearRpc
from .config import Config, load_config
from .metrics import setup_metrics
from .middleware.errors import install_error_handlers
from .middleware.logging import install_access_log_middleware
from .middleware.request_id import RequestIdMiddleware
from .routers import collect_routers
from .routers.manifest import API_TITLE, mount_openapi
from .version import __version__


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the pooled RPC client on startup, close it on shutdown."""
    rpc: NearRpc = app.state.rpc
    await rpc.start()
    try:
        yield
    finally:
        await rpc.close()


def create_app(config: Optional[Config] = None, *, rpc: Optional[NearRpc] = None) -> FastAPI:
    """
    FastAPI factory. ``rpc`` replaces the NEAR client built from config
    (tests inject one backed by ``httpx.MockTransport``).
    """
    cfg = config or load_config()

    app = FastAPI(
        title=API_TITLE,
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,  # served by routers.manifest
        lifespan=_lifespan,
    )
    app.state.config = cfg

    metrics = setup_metrics(app)
    app.state.builder = ActionBuilder(cfg.to_action_config())
    app.state.rpc = rpc or NearRpc(cfg.to_rpc_config(), metrics=metrics)

    app.add_middleware(RequestIdMiddleware)
    install_access_log_middleware(app)
    install_error_handlers(app)

    for router in collect_routers():
        app.include_router(router)

    mount_openapi(app, cfg)
    return app


# Convenience entrypoint for `uvicorn devhub_gateway.app:app`
app = create_app()
