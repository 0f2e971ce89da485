from __future__ import annotations

import math
from dataclasses import dataclass, field

"""ProductRecord model for the catalogue metrics pipeline.

A ProductRecord is one normalized catalogue row plus the metrics derived from it.
Numeric fields are always a float: either finite or ``math.nan`` meaning "missing".
Consumers must treat NaN as missing, never as zero.
"""

__all__ = [
    "ProductRecord",
    "UNKNOWN",
]

UNKNOWN = "Unknown"

NAN = math.nan


@dataclass(frozen=True)
class ProductRecord:
    """Logical representation of a single catalogue row after normalization.

    row_number is the 1-based position of the row among the raw data rows handed
    to the normalizer (blank rows included), so diagnostics point at the source line.
    Records are immutable; derived metrics are filled in one pass via
    ``dataclasses.replace`` and never updated afterwards.
    """
    row_number: int
    # identity
    sku: str = ""
    product_id: str = ""
    name: str = ""
    # categorical
    brand: str = UNKNOWN
    parent_category: str = UNKNOWN
    sub_category: str = UNKNOWN
    classification: str = UNKNOWN
    # pricing
    cost_ex_vat: float = NAN
    sell_ex_vat: float = NAN
    sell_inc_vat: float = NAN
    sale_price: float = NAN  # ex VAT
    sale_inc_vat: float = NAN
    profit_percent: float = NAN
    # volume
    units_this_year: float = NAN
    units_last_year: float = NAN
    available_stock: float = NAN
    supplier_stock: float = NAN
    image_count: float = NAN
    # figures reported by the export itself
    reported_revenue_ytd: float = NAN
    reported_revenue_last_year: float = NAN
    # flags
    on_order: bool = False
    has_pdp: bool = False
    has_optimised_description: bool = False
    filters_correct: bool = False
    # derived
    revenue: float = NAN
    profit: float = NAN
    discount_percent: float = NAN
    stock_value: float = NAN
    weeks_of_cover: float = NAN
    content_ready: bool = False
    raw_values: tuple[tuple[str, str], ...] | None = field(default=None, compare=False, repr=False)  # (列名, 生値)

    @property
    def effective_selling_price(self) -> float:
        """Sale price when present and positive, else the standing ex-VAT price."""
        if math.isfinite(self.sale_price) and self.sale_price > 0:
            return self.sale_price
        return self.sell_ex_vat

    @property
    def is_selling(self) -> bool:
        return math.isfinite(self.units_this_year) and self.units_this_year > 0
