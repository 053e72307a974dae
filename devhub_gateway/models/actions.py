from __future__ import annotations

"""
Function-call action descriptor.

The JSON shape is fixed by wallets that consume it:

    {"type": "FunctionCall",
     "params": {"methodName": ..., "args": {...}, "gas": "...", "deposit": "..."}}

Gas and deposit are decimal strings (yoctoNEAR for the deposit) so they
survive JSON without precision loss.
"""

from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field


class FunctionCallParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    method_name: str = Field(..., alias="methodName", description="Contract method to invoke.")
    args: Dict[str, Any] = Field(..., description="Method arguments, passed through verbatim.")
    gas: str = Field(..., description="Gas budget as a decimal string.")
    deposit: str = Field(..., description="Attached deposit as a decimal string.")


class FunctionCallAction(BaseModel):
    """Unsigned action; a wallet signs and submits it."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["FunctionCall"] = "FunctionCall"
    params: FunctionCallParams

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = ["FunctionCallParams", "FunctionCallAction"]
