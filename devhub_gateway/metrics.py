from __future__ import annotations

"""
Prometheus metrics and the /metrics exporter.

Records, on a per-app registry:
    http_requests_total{method,route,status}
    http_request_duration_seconds{method,route}
    rpc_calls_total{method,outcome}
    rpc_call_duration_seconds{method}

    from devhub_gateway.metrics import setup_metrics
    metrics = setup_metrics(app)          # also stored on app.state.metrics
"""

import time
from typing import Any, Dict

from fastapi import APIRouter, FastAPI
from prometheus_client import (CONTENT_TYPE_LATEST, CollectorRegistry, Counter,
                               Histogram, generate_latest)
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send


class Metrics:
    """Registry plus metric objects. Exposed via app.state.metrics."""

    def __init__(self) -> None:
        self.registry = CollectorRegistry()

        self.http_requests = Counter(
            "http_requests_total",
            "HTTP requests by method, route template and status.",
            ("method", "route", "status"),
            registry=self.registry,
        )
        self.http_latency = Histogram(
            "http_request_duration_seconds",
            "HTTP request latency.",
            ("method", "route"),
            registry=self.registry,
        )
        self.rpc_calls = Counter(
            "rpc_calls_total",
            "NEAR view calls by contract method and outcome.",
            ("method", "outcome"),
            registry=self.registry,
        )
        self.rpc_latency = Histogram(
            "rpc_call_duration_seconds",
            "NEAR view call round-trip latency.",
            ("method",),
            registry=self.registry,
        )

    def observe_rpc(self, method: str, outcome: str, seconds: float) -> None:
        self.rpc_calls.labels(method=method, outcome=outcome).inc()
        self.rpc_latency.labels(method=method).observe(seconds)

    def render_latest(self) -> bytes:
        return generate_latest(self.registry)


def _route_template(scope: Scope) -> str:
    # Template keeps label cardinality bounded; unmatched paths share one label.
    route = scope.get("route")
    path = getattr(route, "path_format", None) or getattr(route, "path", None)
    return path or "<unmatched>"


class MetricsMiddleware:
    """Pure ASGI middleware; counts every HTTP request once."""

    def __init__(self, app: ASGIApp, metrics: Metrics):
        self.app = app
        self.metrics = metrics

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status: Dict[str, Any] = {"code": 500}

        async def send_wrapped(message: Dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                status["code"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapped)
        finally:
            route = _route_template(scope)
            method = scope.get("method", "GET")
            self.metrics.http_requests.labels(method=method, route=route, status=str(status["code"])).inc()
            self.metrics.http_latency.labels(method=method, route=route).observe(time.perf_counter() - start)


def create_metrics_router(metrics: Metrics, path: str = "/metrics") -> APIRouter:
    router = APIRouter(tags=["metrics"])

    @router.get(path, include_in_schema=False)
    async def metrics_endpoint() -> Response:
        return Response(content=metrics.render_latest(), media_type=CONTENT_TYPE_LATEST)

    return router


def setup_metrics(app: FastAPI, path: str = "/metrics") -> Metrics:
    metrics = Metrics()
    app.state.metrics = metrics
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.include_router(create_metrics_router(metrics, path))
    return metrics


__all__ = ["Metrics", "MetricsMiddleware", "setup_metrics", "create_metrics_router"]
