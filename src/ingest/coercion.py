from __future__ import annotations

import math
import re
from typing import Any

"""Field coercion utilities.

Pure, total converters from raw cell values to typed values. None of them raise:
an unusable cell degrades to the type's missing value (NaN, fallback string, False).
"""

__all__ = [
    "to_number",
    "to_int",
    "to_truthy_boolean",
    "to_trimmed_string",
    "is_blank",
]

_STRIP_CHARS = re.compile(r"[,£%]")
# Leading numeric prefix, same leniency as a JS parseFloat ("12 units" -> 12)
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_TRUE_TOKENS = frozenset({"y", "yes", "true", "1", "t"})
_FALSE_TOKENS = frozenset({"n", "no", "false", "0", "f"})


def _as_text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, float) and math.isnan(raw):
        return ""
    return str(raw)


def is_blank(raw: Any) -> bool:
    return _as_text(raw).strip() == ""


def to_number(raw: Any) -> float:
    """Parse a currency/percent/thousands-separated cell into a float.

    ``"£1,234.50"`` -> 1234.5, ``"12%"`` -> 12.0. Empty or unparseable input and
    non-finite results give NaN.
    """
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else math.nan
    cleaned = _STRIP_CHARS.sub("", _as_text(raw)).strip()
    if not cleaned:
        return math.nan
    match = _NUMBER_PREFIX.match(cleaned)
    if match is None:
        return math.nan
    try:
        value = float(match.group(0))
    except ValueError:  # pragma: no cover (regex guarantees a float literal)
        return math.nan
    return value if math.isfinite(value) else math.nan


def to_int(raw: Any) -> float:
    """As to_number but truncated toward zero. NaN propagates."""
    value = to_number(raw)
    if math.isnan(value):
        return value
    return float(math.trunc(value))


def to_truthy_boolean(raw: Any) -> bool:
    """Lenient free-text flag parsing.

    Exact tokens y/yes/true/1/t are true and n/no/false/0/f are false. Anything
    else containing "yes" or "true" (e.g. "Yes - verified") is true; the rest,
    including blank, is false.
    """
    text = _as_text(raw).strip().lower()
    if text in _TRUE_TOKENS:
        return True
    if text in _FALSE_TOKENS:
        return False
    return "yes" in text or "true" in text


def to_trimmed_string(raw: Any, fallback: str = "") -> str:
    text = _as_text(raw).strip()
    return text if text else fallback
