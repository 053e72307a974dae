"""
Function-call action builder.

Turns a validated ``(method_name, args)`` pair into an unsigned
:class:`~devhub_gateway.models.actions.FunctionCallAction`. Gas and deposit
come from :class:`ActionConfig`, never from the request.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Mapping

from .config import DEFAULT_DEPOSIT, DEFAULT_GAS
from .models.actions import FunctionCallAction, FunctionCallParams


@dataclass(frozen=True)
class ActionConfig:
    gas: str = DEFAULT_GAS
    deposit: str = DEFAULT_DEPOSIT


class ActionBuilder:
    def __init__(self, config: ActionConfig | None = None):
        self._cfg = config or ActionConfig()

    @property
    def config(self) -> ActionConfig:
        return self._cfg

    def build(self, method_name: str, args: Mapping[str, Any]) -> FunctionCallAction:
        # deep copy so later mutation of the request body can't leak in
        return FunctionCallAction(
            params=FunctionCallParams(
                method_name=method_name,
                args=copy.deepcopy(dict(args)),
                gas=self._cfg.gas,
                deposit=self._cfg.deposit,
            )
        )


__all__ = ["ActionConfig", "ActionBuilder"]
