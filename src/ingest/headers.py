from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ..models.canonical_fields import CanonicalField

"""Header resolution for catalogue exports.

The same export format drifts between versions: stray spaces, case changes,
a byte-order mark glued to the first header, carriage returns left over from
Windows line endings. Every field lookup goes through a HeaderIndex built from
the first populated row instead of direct key access.
"""

__all__ = [
    "normalize_header_key",
    "HeaderIndex",
    "Found",
    "NotFound",
    "NOT_FOUND",
    "Resolution",
    "build_index",
    "resolve",
    "resolve_field",
]

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_header_key(raw: Any) -> str:
    """Normalize a header name for lookup.

    Strips U+FEFF and carriage returns, trims, lowercases and collapses internal
    whitespace runs to one space. Idempotent: normalizing a normalized key
    returns it unchanged.
    """
    if raw is None:
        return ""
    text = str(raw).replace("\ufeff", "").replace("\r", "")
    return _WHITESPACE.sub(" ", text.strip().lower())


@dataclass(frozen=True)
class Found:
    column: str  # header exactly as it appears in the file
    candidate: str  # candidate spelling that matched


@dataclass(frozen=True)
class NotFound:
    pass


NOT_FOUND = NotFound()

Resolution = Found | NotFound


class HeaderIndex:
    """Normalized header key -> original column name for one loaded dataset.

    On collision (two source columns normalizing to the same key) the first-seen
    column wins and later ones are ignored.
    """

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        self._mapping: dict[str, str] = dict(mapping or {})

    @classmethod
    def from_columns(cls, columns: Iterable[Any]) -> HeaderIndex:
        mapping: dict[str, str] = {}
        for column in columns:
            key = normalize_header_key(column)
            if not key:
                continue
            if key in mapping:
                logger.debug("header collision key=%r kept=%r dropped=%r", key, mapping[key], column)
                continue
            mapping[key] = column
        return cls(mapping)

    def resolve(self, name: str) -> str | None:
        """Return the actual column for a header name, or None when absent."""
        return self._mapping.get(normalize_header_key(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_header_key(name) in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)

    @property
    def columns(self) -> list[str]:
        return list(self._mapping.values())

    def as_dict(self) -> dict[str, str]:
        return dict(self._mapping)


def build_index(row: Mapping[Any, Any] | None) -> HeaderIndex:
    """Build a HeaderIndex from the keys of a raw row."""
    return HeaderIndex.from_columns((row or {}).keys())


def resolve(index: HeaderIndex, name: str) -> str | None:
    return index.resolve(name)


def resolve_field(index: HeaderIndex, candidates: Iterable[str] | CanonicalField) -> Resolution:
    """Try candidate spellings in priority order.

    Accepts either a CanonicalField (its built-in candidates) or an explicit
    ordered iterable of candidate names.
    """
    names = candidates.candidates if isinstance(candidates, CanonicalField) else candidates
    for name in names:
        column = index.resolve(name)
        if column is not None:
            return Found(column=column, candidate=name)
    return NOT_FOUND
