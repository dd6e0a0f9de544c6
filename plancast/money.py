from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from plancast.errors import InvalidInputError

D0 = Decimal("0")
D1 = Decimal("1")
D100 = Decimal("100")
_Q2 = Decimal("0.01")


def q2(v: Decimal) -> Decimal:
    return v.quantize(_Q2, rounding=ROUND_HALF_UP)


def round_int(v: Decimal) -> int:
    """Half-up rounding to an int (2.5 -> 3, 2.4 -> 2)."""
    return int(v.quantize(D1, rounding=ROUND_HALF_UP))


def as_decimal(value: Any, key: str, default: Decimal = D0) -> Decimal:
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidInputError(f"{key}: bool not allowed")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidInputError(f"{key}: must be finite")
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return default
        try:
            out = Decimal(s)
        except InvalidOperation as exc:
            raise InvalidInputError(f"{key}: invalid decimal string") from exc
    else:
        # floats go through str() so 0.1 stays 0.1
        try:
            out = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise InvalidInputError(f"{key}: invalid decimal value") from exc
    if not out.is_finite():
        raise InvalidInputError(f"{key}: must be finite")
    return out


def as_int(value: Any, key: str, default: int = 0) -> int:
    if value is None:
        return default
    return round_int(as_decimal(value, key))


def clamp(v: Decimal, lo: Decimal, hi: Decimal) -> Decimal:
    return max(lo, min(hi, v))


def safe_div(num: Decimal, den: Decimal) -> Decimal:
    """num / den, or 0 when den is 0. Never NaN or Infinity."""
    if den == D0:
        return D0
    return num / den


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    return q2(safe_div(part, whole) * D100)


def percent_change(baseline: Decimal, scenario: Decimal) -> Decimal:
    """Signed change relative to |baseline|, in percent; 0 for a zero baseline."""
    if baseline == D0:
        return D0
    return q2((scenario - baseline) / abs(baseline) * D100)


def money_str(v: Decimal) -> str:
    return str(q2(v))
