"""
Per-route input validation.

Each route owns a tuple of :class:`FieldRule` in :data:`ROUTE_FIELDS`; one
generic :func:`validate` walks it. A rule says how presence is judged:

- ``TRUTHY``: the value must be truthy in the JavaScript sense that plugin
  clients assume. ``None``, ``False``, ``0``, ``""`` and NaN fail; empty
  lists and objects pass.
- ``DEFINED``: the key must be present with a non-null value, so ``0`` is
  a valid id. JSON has no ``undefined``, so an explicit ``null`` counts as
  missing here; a JavaScript ``=== undefined`` check would let it through.

Every failure raises the same :class:`~devhub_gateway.errors.InvalidInput`
without saying which field was at fault.

The table is also the source of the request schemas published in the
OpenAPI / plugin manifest (see :func:`request_schema`).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .errors import InvalidInput

TRUTHY = "truthy"
DEFINED = "defined"


def js_truthy(v: Any) -> bool:
    if v is None or v is False:
        return False
    if isinstance(v, str):
        return v != ""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return v != 0 and not (isinstance(v, float) and math.isnan(v))
    return True


def is_array(v: Any) -> bool:
    return isinstance(v, list)


def js_number(v: Any) -> int | float:
    """
    Coerce a query-string value to a JSON number.

    Accepts what JavaScript ``Number()`` accepts for finite values: decimal
    and exponent forms plus ``0x``/``0o``/``0b`` prefixes. Digit separators
    (``1_000``) and non-ASCII digits, which Python alone would parse, raise
    ``ValueError``. So does the empty string, which ``Number()`` would turn
    into ``0``.

    Integral results come back as ``int`` so they serialize as ``42`` and
    not ``42.0``.
    """
    if isinstance(v, bool):
        raise ValueError("boolean is not a number")
    if isinstance(v, (int, float)):
        n: int | float = v
    else:
        s = str(v).strip()
        if not s:
            raise ValueError("empty number")
        if "_" in s or not s.isascii():
            raise ValueError(f"not a JavaScript number literal: {s!r}")
        low = s.lower()
        if low.startswith(("0x", "0o", "0b")):
            n = int(low, 0)
        else:
            try:
                n = int(s)
            except ValueError:
                n = float(s)
    if isinstance(n, float):
        if not math.isfinite(n):
            raise ValueError("number must be finite")
        if n.is_integer():
            return int(n)
    return n


@dataclass(frozen=True)
class FieldRule:
    name: str
    presence: str = TRUTHY
    required: bool = True
    shape: Optional[Callable[[Any], bool]] = None
    coerce: Optional[Callable[[Any], Any]] = None
    schema: Dict[str, Any] = field(default_factory=dict)

    def is_present(self, payload: Mapping[str, Any]) -> bool:
        if self.name not in payload:
            return False
        value = payload[self.name]
        if self.presence == DEFINED:
            return value is not None
        return js_truthy(value)


_OBJ: Dict[str, Any] = {"type": "object"}
_LABELS: Dict[str, Any] = {"type": "array", "items": {"type": "string"}}
_ID_LIST: Dict[str, Any] = {"type": "array", "items": {"type": "number"}}


ROUTE_FIELDS: Dict[str, Tuple[FieldRule, ...]] = {
    # mutating
    "add_member": (
        FieldRule("member", schema=_OBJ),
        FieldRule("metadata", schema=_OBJ),
    ),
    "add_proposal": (
        FieldRule("body", schema=_OBJ),
        FieldRule("labels", schema=_LABELS),
        # block height of the accepted terms and conditions
        FieldRule(
            "accepted_terms_and_conditions_version",
            presence=DEFINED,
            required=False,
            schema={"type": "integer"},
        ),
    ),
    "add_rfp": (
        FieldRule("body", schema=_OBJ),
        FieldRule("labels", schema=_LABELS),
    ),
    "cancel_rfp": (
        FieldRule("id", presence=DEFINED, schema={"type": "number"}),
        FieldRule("proposals_to_cancel", shape=is_array, schema=_ID_LIST),
        FieldRule("proposals_to_unlink", shape=is_array, schema=_ID_LIST),
    ),
    "create_community": (FieldRule("inputs", schema=_OBJ),),
    "edit_member": (
        FieldRule("member", schema=_OBJ),
        FieldRule("metadata", schema=_OBJ),
    ),
    "edit_proposal": (
        FieldRule("id", presence=DEFINED, schema={"type": "number"}),
        FieldRule("body", schema=_OBJ),
        FieldRule("labels", schema=_LABELS),
    ),
    # view
    "get_community": (FieldRule("handle", schema={"type": "string"}),),
    "get_proposal": (
        FieldRule("proposal_id", presence=DEFINED, coerce=js_number, schema={"type": "number"}),
    ),
}


def validate(route: str, payload: Any) -> Dict[str, Any]:
    """
    Narrow ``payload`` to the fields declared for ``route``.

    Returns a new dict holding only declared fields, in declaration order;
    optional fields that are absent are left out. Undeclared keys are
    dropped.
    """
    rules = ROUTE_FIELDS.get(route)
    if rules is None:
        raise KeyError(f"no validation rules for route {route!r}")
    if not isinstance(payload, Mapping):
        raise InvalidInput()

    out: Dict[str, Any] = {}
    for rule in rules:
        if not rule.is_present(payload):
            if rule.required:
                raise InvalidInput()
            continue
        value = payload[rule.name]
        if rule.shape is not None and not rule.shape(value):
            raise InvalidInput()
        if rule.coerce is not None:
            try:
                value = rule.coerce(value)
            except (TypeError, ValueError) as e:
                raise InvalidInput() from e
        out[rule.name] = value
    return out


def request_schema(route: str) -> Dict[str, Any]:
    """JSON schema of the request object accepted by ``route``."""
    rules = ROUTE_FIELDS[route]
    return {
        "type": "object",
        "properties": {r.name: dict(r.schema) for r in rules},
        "required": [r.name for r in rules if r.required],
    }


__all__ = [
    "TRUTHY",
    "DEFINED",
    "FieldRule",
    "ROUTE_FIELDS",
    "validate",
    "request_schema",
    "js_truthy",
    "js_number",
    "is_array",
]
