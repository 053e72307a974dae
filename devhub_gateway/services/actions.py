"""
Mutating operations: validated request → unsigned function-call action.

The route name doubles as the contract method name.
"""

from __future__ import annotations

from typing import Any

from ..actions import ActionBuilder
from ..logging import get_logger
from ..models.actions import FunctionCallAction
from ..validation import validate

log = get_logger(__name__)

CALL_ROUTES = (
    "add_member",
    "add_proposal",
    "add_rfp",
    "cancel_rfp",
    "create_community",
    "edit_member",
    "edit_proposal",
)


def build_action(route: str, payload: Any, builder: ActionBuilder) -> FunctionCallAction:
    if route not in CALL_ROUTES:
        raise KeyError(f"{route!r} is not a function-call route")
    args = validate(route, payload)
    action = builder.build(route, args)
    log.debug("action_built", method=route, arg_keys=list(args))
    return action


__all__ = ["CALL_ROUTES", "build_action"]
