"""
Service layer.

- actions : validate → build an unsigned FunctionCall action
- queries : validate → NEAR view call → decode
"""

from __future__ import annotations

from . import actions, queries

__all__ = ["actions", "queries"]
