from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..metrics.derived import derive_metrics
from ..models.canonical_fields import CanonicalField, FieldKind
from ..models.config_models import NormalizerSettings
from ..models.load_result import CoercionIssue, FieldResolution
from ..models.product_record import ProductRecord
from .coercion import is_blank, to_int, to_number, to_trimmed_string, to_truthy_boolean
from .headers import Found, HeaderIndex, build_index, resolve_field

"""Record normalizer: raw CSV rows -> derived ProductRecords.

Steps:
1. Drop rows whose every cell is blank (before the header index is built, so the
   index comes from the first genuinely populated row)
2. Resolve each canonical field once through the HeaderIndex
3. Coerce every cell with the field's coercion utility; absent columns behave
   exactly like blank cells
4. Run the derived metrics engine on each record

Nothing in here raises on bad data: a malformed cell degrades that one field.
"""

__all__ = [
    "NormalizationResult",
    "is_blank_row",
    "drop_blank_rows",
    "resolve_columns",
    "normalize_row",
    "normalize_rows",
    "normalize",
]

logger = logging.getLogger(__name__)

RawRow = Mapping[Any, Any]


@dataclass
class NormalizationResult:
    records: list[ProductRecord]
    raw_rows: int
    blank_rows: int
    header_index: HeaderIndex
    resolutions: list[FieldResolution] = field(default_factory=list)
    issues: list[CoercionIssue] = field(default_factory=list)


def is_blank_row(row: RawRow | None) -> bool:
    if not row:
        return True
    return all(is_blank(v) for v in row.values())


def drop_blank_rows(rows: Iterable[RawRow | None]) -> list[tuple[int, RawRow]]:
    """Return (row_number, row) for populated rows, row_number 1-based over the input."""
    return [(i, r) for i, r in enumerate(rows, start=1) if r is not None and not is_blank_row(r)]


def resolve_columns(index: HeaderIndex, settings: NormalizerSettings) -> dict[CanonicalField, FieldResolution]:
    resolved: dict[CanonicalField, FieldResolution] = {}
    for canonical in CanonicalField:
        res = resolve_field(index, settings.candidates_for(canonical))
        if isinstance(res, Found):
            resolved[canonical] = FieldResolution(canonical, res.column, res.candidate)
        else:
            resolved[canonical] = FieldResolution(canonical, None)
    return resolved


def _coerce(kind: FieldKind, raw: Any, unknown_label: str) -> Any:
    if kind is FieldKind.NUMBER:
        return to_number(raw)
    if kind is FieldKind.INTEGER:
        return to_int(raw)
    if kind is FieldKind.FLAG:
        return to_truthy_boolean(raw)
    if kind is FieldKind.CATEGORY:
        return to_trimmed_string(raw, unknown_label)
    return to_trimmed_string(raw, "")


def normalize_row(
    row: RawRow,
    row_number: int,
    columns: Mapping[CanonicalField, FieldResolution],
    settings: NormalizerSettings,
    issues: list[CoercionIssue] | None = None,
) -> ProductRecord:
    """Normalize and derive one populated raw row."""
    values: dict[str, Any] = {}
    for canonical, resolution in columns.items():
        raw = row.get(resolution.column) if resolution.column is not None else None
        value = _coerce(canonical.kind, raw, settings.unknown_label)
        if (
            issues is not None
            and isinstance(value, float)
            and math.isnan(value)
            and not is_blank(raw)
        ):
            issues.append(CoercionIssue(row_number, canonical, resolution.column or "", str(raw)))
        values[canonical.value] = value
    raw_values = None
    if settings.keep_raw_values:
        raw_values = tuple((str(k), "" if is_blank(v) else str(v)) for k, v in row.items())
    record = ProductRecord(row_number=row_number, raw_values=raw_values, **values)
    return derive_metrics(record, settings.metrics)


def normalize_rows(
    raw_rows: Sequence[RawRow | None],
    header_index: HeaderIndex | None = None,
    settings: NormalizerSettings | None = None,
    *,
    on_row: Callable[[], None] | None = None,
) -> NormalizationResult:
    """Normalize raw rows into derived ProductRecords, keeping diagnostics.

    Args:
        raw_rows: Parsed CSV rows (column name -> raw cell)
        header_index: Prebuilt index; built from the first populated row when None
        settings: Normalizer settings (defaults when None)
        on_row: Callback invoked after each populated row (progress display)

    Returns:
        NormalizationResult with records in input order
    """
    settings = settings or NormalizerSettings()
    populated = drop_blank_rows(raw_rows)
    blank_rows = len(raw_rows) - len(populated)
    if header_index is None:
        header_index = build_index(populated[0][1] if populated else None)
    columns = resolve_columns(header_index, settings)
    missing = sorted(c.value for c, r in columns.items() if not r.found)
    if populated and missing:
        logger.debug("fields without a source column: %s", missing)

    issues: list[CoercionIssue] = []
    records: list[ProductRecord] = []
    for row_number, row in populated:
        records.append(normalize_row(row, row_number, columns, settings, issues))
        if on_row is not None:
            on_row()
    logger.debug(
        "normalized rows=%d blank=%d records=%d issues=%d",
        len(raw_rows), blank_rows, len(records), len(issues),
    )
    return NormalizationResult(
        records=records,
        raw_rows=len(raw_rows),
        blank_rows=blank_rows,
        header_index=header_index,
        resolutions=list(columns.values()),
        issues=issues,
    )


def normalize(
    raw_rows: Sequence[RawRow | None],
    header_index: HeaderIndex | None = None,
    settings: NormalizerSettings | None = None,
) -> list[ProductRecord]:
    """Shortcut returning only the records."""
    return normalize_rows(raw_rows, header_index, settings).records
