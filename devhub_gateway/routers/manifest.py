from __future__ import annotations

"""
OpenAPI & AI plugin manifest.

Overrides the app's OpenAPI generator so that the generated document is
deep-merged with the plugin metadata (``servers`` and the ``x-mb``
assistant block), then serves that one document at:

    GET /openapi.json
    GET /.well-known/ai-plugin.json

Call from the app factory after every router is included:

    mount_openapi(app, cfg)
"""

from typing import Any, Dict, Mapping, MutableMapping

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from starlette.responses import JSONResponse

from ..config import Config
from ..logging import get_logger

log = get_logger(__name__)

MANIFEST_PATH = "/.well-known/ai-plugin.json"
OPENAPI_PATH = "/openapi.json"
OPENAPI_VERSION = "3.0.0"

API_TITLE = "Devhub NEAR Protocol API"
API_DESCRIPTION = (
    "API for interacting with Devhub operations including creating, updating and submitting proposals."
)
API_VERSION = "1.0.0"

ASSISTANT_NAME = "Devhub Assistant"
ASSISTANT_DESCRIPTION = (
    "An assistant designed to interact with the {contract} contract on the Near Protocol."
)
ASSISTANT_INSTRUCTIONS = (
    "You are an assistant designed to interact with the {contract} contract on the Near Protocol. "
    "Your main functions are:\n\n"
    "1. [List all write functions]: Use the /api/[function_name] endpoints to perform write operations. "
    "These endpoints will return valid function calls which you should be able to send. Ensure all required "
    "parameters are provided by the user as described in the paths section below.\n\n"
    "2. [List all view functions]: Use the /api/[function_name] endpoints to retrieve data from the contract.\n\n"
    "When performing write operations:\n"
    "- Ensure all required parameters are non-empty and of the correct type.\n"
    "- Avoid using any special characters or formatting that might cause issues with the contract.\n"
    "- If the user provides invalid input, kindly ask them to provide valid data according to the parameter "
    "specifications.\n\n"
    "When performing view operations:\n"
    "- Simply use the appropriate /api/[function_name] endpoint and return the result to the user.\n\n"
    "Important: For all write operations, the endpoints will return a function call object. You should clearly "
    "indicate to the user that this is a function call that needs to be sent to the blockchain, and not the "
    "final result of the operation."
)

# Routes under these tags are operational and stay out of the plugin document.
_HIDDEN_TAGS = {"health", "metrics"}


def _deep_merge(dst: MutableMapping[str, Any], src: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Merge ``src`` into ``dst`` in place; dicts merge, everything else replaces."""
    for k, v in src.items():
        if isinstance(v, Mapping) and isinstance(dst.get(k), Mapping):
            _deep_merge(dst[k], v)  # type: ignore[index]
        else:
            dst[k] = v
    return dst


def plugin_overrides(cfg: Config) -> Dict[str, Any]:
    return {
        "servers": [{"url": cfg.server_url()}],
        "x-mb": {
            "account-id": cfg.plugin_account_id,
            "assistant": {
                "name": ASSISTANT_NAME,
                "description": ASSISTANT_DESCRIPTION.format(contract=cfg.contract_id),
                "instructions": ASSISTANT_INSTRUCTIONS.format(contract=cfg.contract_id),
                "tools": [{"type": "generate-transaction"}],
            },
        },
    }


def build_manifest(app: FastAPI, cfg: Config) -> Dict[str, Any]:
    routes = [r for r in app.routes if not _HIDDEN_TAGS.intersection(getattr(r, "tags", None) or ())]
    schema = get_openapi(
        title=API_TITLE,
        version=API_VERSION,
        openapi_version=OPENAPI_VERSION,
        description=API_DESCRIPTION,
        routes=routes,
    )
    return dict(_deep_merge(schema, plugin_overrides(cfg)))


def mount_openapi(app: FastAPI, cfg: Config) -> None:
    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema is None:
            app.openapi_schema = build_manifest(app, cfg)
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]

    @app.get(OPENAPI_PATH, include_in_schema=False)
    def _openapi_json() -> JSONResponse:
        return JSONResponse(app.openapi())

    @app.get(MANIFEST_PATH, include_in_schema=False)
    def _plugin_manifest() -> JSONResponse:
        return JSONResponse(app.openapi())

    log.info("openapi_mounted", openapi=OPENAPI_PATH, manifest=MANIFEST_PATH, server_url=cfg.server_url())


__all__ = ["mount_openapi", "build_manifest", "plugin_overrides", "MANIFEST_PATH", "OPENAPI_PATH"]
