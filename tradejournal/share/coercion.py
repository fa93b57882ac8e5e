"""
Coercion helpers for values read back from an untrusted share token.

Everything decoded from a token passes through these before it reaches a
model, so a tampered or stale link degrades to defaults instead of raising.
"""
import math
import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Iterable, Optional

__all__ = [
    "to_number",
    "finite_sum",
    "round_money",
    "round_count",
    "is_asset_type",
    "is_direction",
    "is_currency",
    "is_option_type",
    "normalize_notes",
    "to_date_only",
    "utc_timestamp",
]

ASSET_TYPES = frozenset({"STOCK", "OPTION"})
DIRECTIONS = frozenset({"LONG", "SHORT"})
CURRENCIES = frozenset({"USD", "CAD"})
OPTION_TYPES = frozenset({"CALL", "PUT"})

_CENT = Decimal("0.01")
# Enough digits to quantize any finite float to cents.
_MONEY_PRECISION = 400

# Numeric strings a browser's Number() accepts; Python-only forms such as
# "1_000", "nan" or "infinity" are not numbers on the wire.
_DECIMAL_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_RADIX_LITERAL = re.compile(r"0(?:[xX](?P<hex>[0-9a-fA-F]+)|[oO](?P<oct>[0-7]+)|[bB](?P<bin>[01]+))")


def _parse_numeric_string(text: str) -> Optional[float]:
    text = text.strip()
    if _DECIMAL_LITERAL.fullmatch(text):
        return float(text)
    radix = _RADIX_LITERAL.fullmatch(text)
    if radix is None:
        return None
    if radix.group("hex"):
        return float(int(radix.group("hex"), 16))
    if radix.group("oct"):
        return float(int(radix.group("oct"), 8))
    return float(int(radix.group("bin"), 2))


def to_number(value: Any, fallback: Optional[float] = 0.0) -> Optional[float]:
    """
    Returns `value` as a finite float, or `fallback` when it is not one.

    Numeric strings are accepted in the forms a browser would parse. Booleans,
    None, containers, NaN and infinities all resolve to the fallback.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        candidate = value
    elif isinstance(value, str):
        try:
            candidate = _parse_numeric_string(value)
        except OverflowError:
            return fallback
        if candidate is None:
            return fallback
    else:
        return fallback

    try:
        numeric = float(candidate)
    except OverflowError:
        return fallback
    return numeric if math.isfinite(numeric) else fallback


def finite_sum(values: Iterable[float], fallback: float = 0.0) -> float:
    """math.fsum of `values`, or `fallback` when the sum is not finite."""
    try:
        total = math.fsum(values)
    except (OverflowError, ValueError):
        return fallback
    return total if math.isfinite(total) else fallback


def round_money(value: float) -> float:
    """
    Rounds a money amount to cents, half away from zero on its shortest repr.
    Non-finite input gives 0.0.
    """
    amount = float(value)
    if not math.isfinite(amount):
        return 0.0
    with localcontext() as ctx:
        ctx.prec = _MONEY_PRECISION
        cents = Decimal(repr(amount)).quantize(_CENT, rounding=ROUND_HALF_UP)
    result = float(cents)
    # Avoid emitting -0.0 for amounts that round to nothing.
    return result if result != 0 else 0.0


def round_count(value: float) -> int:
    """Rounds a count the way a browser would: halves go up."""
    return int(math.floor(value + 0.5))


def is_asset_type(value: Any) -> bool:
    return isinstance(value, str) and value in ASSET_TYPES


def is_direction(value: Any) -> bool:
    return isinstance(value, str) and value in DIRECTIONS


def is_currency(value: Any) -> bool:
    return isinstance(value, str) and value in CURRENCIES


def is_option_type(value: Any) -> bool:
    return isinstance(value, str) and value in OPTION_TYPES


def normalize_notes(value: Optional[str]) -> Optional[str]:
    """Trims notes; blank notes become None."""
    if not value:
        return None
    trimmed = value.strip()
    return trimmed or None


def to_date_only(value: str) -> str:
    return value[:10]


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return now.replace("+00:00", "Z")
