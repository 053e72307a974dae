"""FastAPI dependencies resolving the per-app objects built in the app factory."""

from __future__ import annotations

from fastapi import Request

from ..actions import ActionBuilder
from ..adapters.near_rpc import NearRpc
from ..config import Config


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_builder(request: Request) -> ActionBuilder:
    return request.app.state.builder


def get_rpc(request: Request) -> NearRpc:
    return request.app.state.rpc
