from __future__ import annotations

"""
View-call result as returned by NEAR's ``query``/``call_function``.

Only ``result`` is guaranteed; the other members are kept when the node
sends them so callers can log the block a value was read at.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QueryResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    result: Any = Field(None, description="Return bytes (list of ints) or an already decoded value.")
    logs: List[str] = Field(default_factory=list)
    block_height: Optional[int] = None
    block_hash: Optional[str] = None


__all__ = ["QueryResult"]
