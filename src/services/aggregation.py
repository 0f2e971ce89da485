from __future__ import annotations

import functools
import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import asdict, dataclass, field

import pandas as pd

from ..metrics.derived import cap_weeks_of_cover
from ..models.config_models import MetricsSettings
from ..models.product_record import UNKNOWN, ProductRecord

"""Aggregations and KPI totals over the normalized record set.

Missing (NaN) values contribute zero to sums; they never make a total NaN.
Inputs are record sequences (usually a filtered view), outputs are plain
dataclasses or lists of (label, value) pairs ready for charting.
"""

__all__ = [
    "CLASS_ORDER",
    "DISCOUNT_BANDS",
    "BrandRollup",
    "ClassificationUnits",
    "KpiSummary",
    "safe_sum",
    "aggregate_by_brand",
    "units_by_classification",
    "revenue_by_classification",
    "stock_value_by_classification",
    "revenue_by_parent_category",
    "stock_value_by_grade",
    "top_n_with_other",
    "discount_band",
    "units_by_discount_band",
    "weeks_of_cover_bins",
    "top_records_by",
    "compute_kpis",
    "records_to_frame",
]

CLASS_ORDER = ("A+", "A", "B", "C", "D", "E", "F")

DISCOUNT_BANDS = ("0 to 5%", "5 to 10%", "10 to 20%", "20 to 30%", "30 to 40%", "40%+")

Pair = tuple[str, float]


def _v(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def safe_sum(values: Iterable[float]) -> float:
    return sum(_v(v) for v in values)


def _label(value: str) -> str:
    return value or UNKNOWN


def _normalise_label(value: str) -> str:
    return " ".join(str(value).strip().lower().split())


def _frame(records: Iterable[ProductRecord]) -> pd.DataFrame:
    return records_to_frame(list(records))


def _grouped_sum(frame: pd.DataFrame, key: str, values: list[str]) -> pd.DataFrame:
    """Sum value columns per key label, groups kept in first-seen order.

    DataFrame.sum skips NaN, so missing values count as zero.
    """
    labelled = frame.assign(**{key: frame[key].map(_label)})
    return labelled.groupby(key, sort=False)[values].sum()


@dataclass
class BrandRollup:
    brand: str
    units_this_year: float = 0.0
    units_last_year: float = 0.0
    revenue_ytd: float = 0.0  # export's reported revenue
    profit: float = 0.0


@dataclass
class ClassificationUnits:
    classification: str
    this_year: float = 0.0
    last_year: float = 0.0


def aggregate_by_brand(records: Iterable[ProductRecord]) -> list[BrandRollup]:
    """Per-brand totals sorted by reported revenue, then profit (both descending)."""
    frame = _frame(records)
    if frame.empty:
        return []
    totals = _grouped_sum(
        frame, "brand", ["units_this_year", "units_last_year", "reported_revenue_ytd", "profit"]
    ).sort_values(["reported_revenue_ytd", "profit"], ascending=False)
    return [
        BrandRollup(
            brand=str(row.Index),
            units_this_year=float(row.units_this_year),
            units_last_year=float(row.units_last_year),
            revenue_ytd=float(row.reported_revenue_ytd),
            profit=float(row.profit),
        )
        for row in totals.itertuples()
    ]


def units_by_classification(records: Iterable[ProductRecord]) -> list[ClassificationUnits]:
    frame = _frame(records)
    if frame.empty:
        return []
    totals = _grouped_sum(frame, "classification", ["units_this_year", "units_last_year"]).sort_values(
        "units_this_year", ascending=False, kind="stable"
    )
    return [
        ClassificationUnits(str(row.Index), float(row.units_this_year), float(row.units_last_year))
        for row in totals.itertuples()
    ]


def _sum_by(records: Iterable[ProductRecord], key: str, value: str) -> list[Pair]:
    frame = _frame(records)
    if frame.empty:
        return []
    totals = _grouped_sum(frame, key, [value])[value].sort_values(ascending=False, kind="stable")
    return [(str(k), float(v)) for k, v in totals.items()]


def revenue_by_classification(records: Iterable[ProductRecord]) -> list[Pair]:
    return _sum_by(records, "classification", "reported_revenue_ytd")


def stock_value_by_classification(records: Iterable[ProductRecord]) -> list[Pair]:
    return _sum_by(records, "classification", "stock_value")


def revenue_by_parent_category(records: Iterable[ProductRecord]) -> list[Pair]:
    return _sum_by(records, "parent_category", "reported_revenue_ytd")


def stock_value_by_grade(records: Iterable[ProductRecord]) -> list[Pair]:
    """Stock value in fixed grade order A+..F, then any other classifications."""
    totals = pd.Series(dict(stock_value_by_classification(records)), dtype=float)
    by_key = totals.groupby(totals.index.map(_normalise_label)).sum() if not totals.empty else totals
    ordered = [(label, float(by_key.get(_normalise_label(label), 0.0))) for label in CLASS_ORDER]
    known = {_normalise_label(label) for label in CLASS_ORDER}
    extras = [(str(k), float(v)) for k, v in totals.items() if _normalise_label(k) not in known]
    return ordered + extras


def top_n_with_other(pairs: Sequence[Pair], n: int = 10) -> list[Pair]:
    """Keep the first n pairs and fold the rest into an "Other" bucket."""
    if len(pairs) <= n:
        return list(pairs)
    rest = sum(v for _, v in pairs[n:])
    return list(pairs[:n]) + [("Other", rest)]


# Lower edges of DISCOUNT_BANDS; each band is [edge, next edge)
_DISCOUNT_EDGES = (-math.inf, 5, 10, 20, 30, 40, math.inf)


def discount_band(percent: float) -> str | None:
    if not math.isfinite(percent):
        return None
    for band, hi in zip(DISCOUNT_BANDS, _DISCOUNT_EDGES[1:]):
        if percent < hi:
            return band
    return DISCOUNT_BANDS[-1]


def units_by_discount_band(records: Iterable[ProductRecord]) -> list[Pair]:
    """Units sold this year per discount band; records without a sale are skipped."""
    frame = _frame(records)
    if frame.empty:
        return [(band, 0.0) for band in DISCOUNT_BANDS]
    bands = pd.cut(
        frame["discount_percent"].astype(float),
        bins=list(_DISCOUNT_EDGES),
        right=False,
        labels=list(DISCOUNT_BANDS),
    )
    totals = (
        frame["units_this_year"].astype(float)
        .groupby(bands, observed=False)
        .sum()
        .reindex(list(DISCOUNT_BANDS), fill_value=0.0)
    )
    return [(band, float(totals[band])) for band in DISCOUNT_BANDS]


def weeks_of_cover_bins(
    records: Iterable[ProductRecord],
    edges: Sequence[float] = (0, 4, 8, 13, 26, 52, 104, 260),
    settings: MetricsSettings | None = None,
) -> list[Pair]:
    """Count records per weeks-of-cover bin, clipping at the configured display cap.

    Bins are [edge_i, edge_i+1). Edges at or above the cap are replaced by the cap
    itself, so the last bin ("<cap>+") collects everything clipped. Records with
    missing cover or cover below the first edge (negative available stock) are
    not counted.
    """
    cap = (settings or MetricsSettings()).weeks_of_cover_cap
    bounds = [float(e) for e in edges if e < cap] + [cap]
    labels = [f"{lo:g}-{hi:g}" for lo, hi in zip(bounds, bounds[1:])] + [f"{bounds[-1]:g}+"]
    frame = _frame(records)
    if frame.empty:
        return [(label, 0.0) for label in labels]
    weeks = frame["weeks_of_cover"].astype(float).map(functools.partial(cap_weeks_of_cover, cap=cap))
    weeks = weeks[weeks >= bounds[0]]
    binned = pd.cut(weeks, bins=[*bounds, math.inf], right=False, labels=labels)
    counts = binned.value_counts().reindex(labels, fill_value=0)
    return [(label, float(counts[label])) for label in labels]


def top_records_by(
    records: Iterable[ProductRecord],
    value: Callable[[ProductRecord], float],
    n: int = 18,
) -> list[tuple[ProductRecord, float]]:
    """Top n records by a metric, keeping only finite positive values."""
    scored = [(r, value(r)) for r in records]
    scored = [(r, v) for r, v in scored if math.isfinite(v) and v > 0]
    scored.sort(key=lambda rv: -rv[1])
    return scored[:n]

@dataclass(frozen=True)
class KpiSummary:
    products: int
    units_this_year: float
    units_last_year: float
    revenue_ytd: float
    revenue_last_year: float
    revenue: float
    profit: float
    stock_value: float
    content_ready: int
    stock_value_by_grade: list[Pair] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def compute_kpis(records: Sequence[ProductRecord]) -> KpiSummary:
    return KpiSummary(
        products=len(records),
        units_this_year=safe_sum(r.units_this_year for r in records),
        units_last_year=safe_sum(r.units_last_year for r in records),
        revenue_ytd=safe_sum(r.reported_revenue_ytd for r in records),
        revenue_last_year=safe_sum(r.reported_revenue_last_year for r in records),
        revenue=safe_sum(r.revenue for r in records),
        profit=safe_sum(r.profit for r in records),
        stock_value=safe_sum(r.stock_value for r in records),
        content_ready=sum(1 for r in records if r.content_ready),
        stock_value_by_grade=stock_value_by_grade(records)[: len(CLASS_ORDER)],
    )


def records_to_frame(records: Sequence[ProductRecord]) -> pd.DataFrame:
    """DataFrame view of the records (raw_values excluded), NaN kept as NaN."""
    rows = []
    for r in records:
        row = asdict(r)
        row.pop("raw_values", None)
        rows.append(row)
    if not rows:
        columns = [name for name in ProductRecord.__dataclass_fields__ if name != "raw_values"]
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(rows)
