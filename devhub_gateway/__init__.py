"""
DevHub Gateway
==============

FastAPI gateway for the ``devhub.near`` contract: builds unsigned
function-call actions for write methods and proxies view methods to a
NEAR RPC node.

- ``__version__``: semantic version string
- ``build_app()``: convenience creator for a configured FastAPI app
"""

from __future__ import annotations

from .version import __version__

__all__ = ["__version__", "build_app"]


def build_app():
    """
    Create and return a configured FastAPI application.

    Imported lazily so ``import devhub_gateway`` stays cheap for callers
    that only need version metadata.
    """
    from .app import create_app

    return create_app()
