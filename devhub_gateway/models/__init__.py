from __future__ import annotations

"""
Public model surface for the DevHub gateway.

Submodules:
- actions.py  → FunctionCallParams, FunctionCallAction
- query.py    → QueryResult
"""

from .actions import FunctionCallAction, FunctionCallParams
from .query import QueryResult

__all__ = ["FunctionCallAction", "FunctionCallParams", "QueryResult"]
