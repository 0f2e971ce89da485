from __future__ import annotations

import functools
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from ..ingest.coercion import to_number
from ..metrics.grades import grade_rank, sort_classifications
from ..models.canonical_fields import CanonicalField, NUMERIC_FIELDS
from ..models.product_record import ProductRecord

"""Filtering, option lists and table sorting over the record set.

All functions return new sequences; records are never mutated.
"""

__all__ = [
    "RecordFilters",
    "normalize_filters",
    "apply_filters",
    "unique_sorted",
    "FilterOptions",
    "filter_options",
    "sort_records",
    "NUMERIC_SORT_KEYS",
]

NUMERIC_SORT_KEYS = frozenset(f.value for f in NUMERIC_FIELDS) | {
    "revenue",
    "profit",
    "discount_percent",
    "weeks_of_cover",
}


@dataclass(frozen=True)
class RecordFilters:
    brand: str = ""
    parent_category: str = ""
    sub_category: str = ""
    classification: str = ""
    query: str = ""  # matched against "sku name", case-insensitive
    only_selling: bool = False
    min_stock_value: float = math.nan
    max_stock_value: float = math.nan


def normalize_filters(raw: dict[str, Any]) -> RecordFilters:
    """Build RecordFilters from loosely typed input (query params, form values)."""
    def _text(key: str) -> str:
        value = raw.get(key)
        return str(value).strip() if value is not None else ""

    return RecordFilters(
        brand=_text("brand"),
        parent_category=_text("parent_category"),
        sub_category=_text("sub_category"),
        classification=_text("classification"),
        query=_text("query").lower(),
        only_selling=bool(raw.get("only_selling", False)),
        min_stock_value=to_number(raw.get("min_stock_value")),
        max_stock_value=to_number(raw.get("max_stock_value")),
    )


def _matches(record: ProductRecord, f: RecordFilters) -> bool:
    if f.brand and record.brand != f.brand:
        return False
    if f.parent_category and record.parent_category != f.parent_category:
        return False
    if f.sub_category and record.sub_category != f.sub_category:
        return False
    if f.classification and record.classification != f.classification:
        return False
    if f.only_selling and not record.is_selling:
        return False
    has_stock_value = math.isfinite(record.stock_value)
    if math.isfinite(f.min_stock_value) and not (has_stock_value and record.stock_value >= f.min_stock_value):
        return False
    if math.isfinite(f.max_stock_value) and not (has_stock_value and record.stock_value <= f.max_stock_value):
        return False
    if f.query:
        haystack = f"{record.sku} {record.name}".lower()
        if f.query.lower() not in haystack:
            return False
    return True


def apply_filters(records: Iterable[ProductRecord], filters: RecordFilters) -> list[ProductRecord]:
    return [r for r in records if _matches(r, filters)]


def unique_sorted(values: Iterable[Any]) -> list[str]:
    """Distinct non-blank trimmed values, sorted."""
    distinct = {str(v).strip() for v in values if v is not None and str(v).strip()}
    return sorted(distinct, key=lambda s: (s.casefold(), s))


@dataclass(frozen=True)
class FilterOptions:
    brands: list[str]
    parent_categories: list[str]
    sub_categories: list[str]  # empty until a parent category is chosen
    classifications: list[str]  # best grade first


def filter_options(records: Sequence[ProductRecord], parent_category: str = "") -> FilterOptions:
    subs: list[str] = []
    if parent_category:
        subs = unique_sorted(r.sub_category for r in records if r.parent_category == parent_category)
    return FilterOptions(
        brands=unique_sorted(r.brand for r in records),
        parent_categories=unique_sorted(r.parent_category for r in records),
        sub_categories=subs,
        classifications=sort_classifications(unique_sorted(r.classification for r in records)),
    )


def _compare_text(a: Any, b: Any) -> int:
    ar, br = grade_rank(a), grade_rank(b)
    if ar is not None and br is not None:
        return (ar > br) - (ar < br)
    ak = str(a if a is not None else "").casefold()
    bk = str(b if b is not None else "").casefold()
    return (ak > bk) - (ak < bk)


def sort_records(
    records: Iterable[ProductRecord],
    key: str | CanonicalField,
    *,
    descending: bool = True,
    numeric: bool | None = None,
) -> list[ProductRecord]:
    """Sort a copy of the records by one attribute.

    Numeric sorts always put missing values last regardless of direction. Text
    sorts compare grades by rank (ascending rank = worst grade first) and
    everything else case-insensitively.
    """
    name = key.value if isinstance(key, CanonicalField) else key
    if numeric is None:
        numeric = name in NUMERIC_SORT_KEYS
    direction = -1 if descending else 1
    items = list(records)

    if numeric:
        def _num_cmp(ra: ProductRecord, rb: ProductRecord) -> int:
            a, b = getattr(ra, name), getattr(rb, name)
            af, bf = math.isfinite(a), math.isfinite(b)
            if af and bf:
                return ((a > b) - (a < b)) * direction
            if af:
                return -1
            if bf:
                return 1
            return 0
        return sorted(items, key=functools.cmp_to_key(_num_cmp))

    def _text_cmp(ra: ProductRecord, rb: ProductRecord) -> int:
        return _compare_text(getattr(ra, name), getattr(rb, name)) * direction
    return sorted(items, key=functools.cmp_to_key(_text_cmp))

