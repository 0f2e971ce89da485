from __future__ import annotations

import math
from dataclasses import replace

from ..models.config_models import MetricsSettings
from ..models.product_record import ProductRecord

"""Derived metrics engine.

Every metric is a pure function of fields already on the record. derive_metrics
computes them all in one pass and returns a new record; nothing is ever
partially updated. NaN means "missing" and a missing operand always yields NaN,
while a zero operand yields a real zero.
"""

__all__ = [
    "derive_metrics",
    "effective_selling_price",
    "compute_revenue",
    "compute_profit",
    "compute_discount_percent",
    "compute_stock_value",
    "compute_weeks_of_cover",
    "compute_content_ready",
    "cap_weeks_of_cover",
    "fill_sale_prices",
]


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def _positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def effective_selling_price(sale_price: float, sell_ex_vat: float) -> float:
    """Sale price when finite and > 0, else the standing ex-VAT price."""
    if _positive(sale_price):
        return sale_price
    return sell_ex_vat


def compute_revenue(units_this_year: float, price: float) -> float:
    if not _finite(units_this_year, price):
        return math.nan
    return units_this_year * price


def compute_profit(units_this_year: float, price: float, cost_ex_vat: float) -> float:
    """Units * (price - cost). Negative values are valid loss-making SKUs."""
    if not _finite(units_this_year, price, cost_ex_vat):
        return math.nan
    return units_this_year * (price - cost_ex_vat)


def compute_discount_percent(sell_inc_vat: float, sale_inc_vat: float, sale_price: float = math.inf) -> float:
    """Percentage off the inc-VAT selling price.

    Only defined when both inc-VAT prices are strictly positive. sale_price (ex
    VAT) must also be positive when given, so a record without a sale never
    shows a fabricated 0% discount.
    """
    if not (_positive(sell_inc_vat) and _positive(sale_inc_vat)):
        return math.nan
    if not (sale_price > 0):  # NaN compares False
        return math.nan
    return ((sell_inc_vat - sale_inc_vat) / sell_inc_vat) * 100


def compute_stock_value(reported: float, available_stock: float, cost_ex_vat: float) -> float:
    """Export's own stock value when present, else available stock at cost."""
    if math.isfinite(reported):
        return reported
    if _finite(available_stock, cost_ex_vat):
        return available_stock * cost_ex_vat
    return math.nan


def compute_weeks_of_cover(available_stock: float, units_this_year: float, weeks_per_year: float = 52.0) -> float:
    """Available stock divided by the weekly sales rate (uncapped)."""
    if not (_positive(units_this_year) and math.isfinite(available_stock)):
        return math.nan
    weekly_rate = units_this_year / weeks_per_year
    if weekly_rate <= 0:
        return math.nan
    return available_stock / weekly_rate


def cap_weeks_of_cover(weeks: float, cap: float = 260.0) -> float:
    """Clip weeks of cover for charts/binning. NaN stays NaN."""
    if math.isnan(weeks):
        return weeks
    return min(weeks, cap)


def compute_content_ready(record: ProductRecord, image_threshold: int = 2) -> bool:
    if not (record.has_pdp and record.has_optimised_description and record.filters_correct):
        return False
    return math.isfinite(record.image_count) and record.image_count >= image_threshold


def fill_sale_prices(sale_price: float, sale_inc_vat: float, vat_rate: float) -> tuple[float, float]:
    """Fill whichever of the ex/inc-VAT sale prices is missing from the other."""
    factor = 1 + vat_rate
    if math.isnan(sale_price) and math.isfinite(sale_inc_vat) and factor > 0:
        sale_price = sale_inc_vat / factor
    elif math.isnan(sale_inc_vat) and math.isfinite(sale_price):
        sale_inc_vat = sale_price * factor
    return sale_price, sale_inc_vat


def derive_metrics(record: ProductRecord, settings: MetricsSettings | None = None) -> ProductRecord:
    """Return a copy of ``record`` with every derived field computed."""
    settings = settings or MetricsSettings()
    sale_price, sale_inc_vat = fill_sale_prices(record.sale_price, record.sale_inc_vat, settings.vat_rate)
    price = effective_selling_price(sale_price, record.sell_ex_vat)
    filled = replace(record, sale_price=sale_price, sale_inc_vat=sale_inc_vat)
    return replace(
        filled,
        revenue=compute_revenue(record.units_this_year, price),
        profit=compute_profit(record.units_this_year, price, record.cost_ex_vat),
        discount_percent=compute_discount_percent(record.sell_inc_vat, sale_inc_vat, sale_price),
        stock_value=compute_stock_value(record.stock_value, record.available_stock, record.cost_ex_vat),
        weeks_of_cover=compute_weeks_of_cover(
            record.available_stock, record.units_this_year, settings.weeks_per_year
        ),
        content_ready=compute_content_ready(record, settings.content_image_threshold),
    )
