"""
Decoding of NEAR ``call_function`` results.

View calls come back with ``result.result`` as a list of byte values (the
contract's return bytes). The gateway turns that list into a string by
treating every entry as a UTF-16 code unit, the same way a browser's
``String.fromCharCode`` would. Anything that is not such a list is handed
back untouched.

``decode`` never raises: malformed input degrades to pass-through with the
``error`` field set.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional


@dataclass(frozen=True)
class DecodedResult:
    value: Any
    decoded: bool = False
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def _is_code(x: Any) -> bool:
    # bool is an int subclass but never a character code
    return isinstance(x, Real) and not isinstance(x, bool)


def to_code_unit(x: Real) -> int:
    """ToUint16: truncate toward zero and wrap into 0..0xFFFF. NaN/inf map to 0."""
    f = float(x)
    if not math.isfinite(f):
        return 0
    return int(f) & 0xFFFF


def code_units_to_str(units: list[int]) -> str:
    """Decode UTF-16 code units; lone surrogates become U+FFFD."""
    buf = b"".join(u.to_bytes(2, "little") for u in units)
    return buf.decode("utf-16-le", errors="replace")


def decode(raw: Any) -> DecodedResult:
    """
    Convert a raw RPC result into the value callers expect.

    >>> decode([104, 101, 108, 108, 111]).value
    'hello'
    >>> decode({"foo": "bar"}).value
    {'foo': 'bar'}
    >>> decode([]).value
    ''
    """
    if not isinstance(raw, (list, tuple)):
        return DecodedResult(value=raw)

    bad = next((i for i, x in enumerate(raw) if not _is_code(x)), None)
    if bad is not None:
        return DecodedResult(
            value=raw,
            error=f"non-numeric entry at index {bad}: {type(raw[bad]).__name__}",
        )

    return DecodedResult(value=code_units_to_str([to_code_unit(x) for x in raw]), decoded=True)


__all__ = ["DecodedResult", "decode", "to_code_unit", "code_units_to_str"]
