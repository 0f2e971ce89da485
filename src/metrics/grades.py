from __future__ import annotations

import functools
import re
from collections.abc import Iterable
from typing import Any

"""Letter-grade ranking for classification values such as "A+", "B" or "D-"."""

__all__ = [
    "grade_rank",
    "compare_classifications",
    "sort_classifications",
]

_GRADE = re.compile(r"^([A-Z])([+-])?$")


def grade_rank(value: Any) -> float | None:
    """Rank a grade; higher is better. None for values that are not grades.

    rank = 26 - (letter - 'A') + bump, bump is +0.2 for '+' and -0.2 for '-'.
    """
    text = str(value if value is not None else "").strip().upper()
    match = _GRADE.match(text)
    if match is None:
        return None
    letter, sign = match.group(1), match.group(2) or ""
    bump = 0.2 if sign == "+" else (-0.2 if sign == "-" else 0.0)
    return (26 - (ord(letter) - ord("A"))) + bump


def _text_key(value: Any) -> str:
    return str(value if value is not None else "").casefold()


def compare_classifications(a: Any, b: Any) -> int:
    """Best grade first, non-grades after all grades, then case-insensitive text."""
    ar, br = grade_rank(a), grade_rank(b)
    if ar is not None and br is not None:
        return (ar < br) - (ar > br)
    if ar is not None:
        return -1
    if br is not None:
        return 1
    ak, bk = _text_key(a), _text_key(b)
    return (ak > bk) - (ak < bk)


def sort_classifications(values: Iterable[Any]) -> list[Any]:
    return sorted(values, key=functools.cmp_to_key(compare_classifications))
