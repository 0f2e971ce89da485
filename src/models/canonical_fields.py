from __future__ import annotations

from enum import Enum

"""Canonical field catalogue for catalogue exports.

Each canonical field owns an ordered tuple of candidate header spellings. Header
resolution tries them in order and the first one present in the file wins. The
value kind decides which coercion is applied by the normalizer.
"""

__all__ = [
    "FieldKind",
    "CanonicalField",
    "CATEGORY_FIELDS",
    "NUMERIC_FIELDS",
    "FLAG_FIELDS",
    "CONTENT_FLAGS",
]


class FieldKind(Enum):
    TEXT = "text"
    CATEGORY = "category"  # blank -> unknown label
    NUMBER = "number"
    INTEGER = "integer"
    FLAG = "flag"


class CanonicalField(str, Enum):
    """Stable internal field names independent of the export's header spelling."""

    PRODUCT_ID = "product_id"
    SKU = "sku"
    NAME = "name"
    BRAND = "brand"
    PARENT_CATEGORY = "parent_category"
    SUB_CATEGORY = "sub_category"
    CLASSIFICATION = "classification"
    COST_EX_VAT = "cost_ex_vat"
    SELL_INC_VAT = "sell_inc_vat"
    SELL_EX_VAT = "sell_ex_vat"
    SALE_INC_VAT = "sale_inc_vat"
    SALE_PRICE = "sale_price"
    PROFIT_PERCENT = "profit_percent"
    STOCK_VALUE = "stock_value"
    REPORTED_REVENUE_YTD = "reported_revenue_ytd"
    REPORTED_REVENUE_LAST_YEAR = "reported_revenue_last_year"
    AVAILABLE_STOCK = "available_stock"
    SUPPLIER_STOCK = "supplier_stock"
    UNITS_THIS_YEAR = "units_this_year"
    UNITS_LAST_YEAR = "units_last_year"
    IMAGE_COUNT = "image_count"
    ON_ORDER = "on_order"
    HAS_PDP = "has_pdp"
    HAS_OPTIMISED_DESCRIPTION = "has_optimised_description"
    FILTERS_CORRECT = "filters_correct"

    @property
    def kind(self) -> FieldKind:
        return _KINDS[self]

    @property
    def candidates(self) -> tuple[str, ...]:
        """Header spellings in priority order."""
        return _CANDIDATES[self]


_CANDIDATES: dict[CanonicalField, tuple[str, ...]] = {
    CanonicalField.PRODUCT_ID: ("Product ID", "Product Id", "ID"),
    CanonicalField.SKU: ("Product SKU", "SKU"),
    CanonicalField.NAME: ("Product Name", "Name"),
    CanonicalField.BRAND: ("Brand",),
    CanonicalField.PARENT_CATEGORY: ("Parent Category", "Category"),
    CanonicalField.SUB_CATEGORY: ("Sub Category 1", "Sub Category", "Subcategory"),
    CanonicalField.CLASSIFICATION: ("Best Seller Status", "Classification", "Status"),
    CanonicalField.COST_EX_VAT: ("Cost Price ex VAT", "Cost Price"),
    CanonicalField.SELL_INC_VAT: ("Selling Price inc VAT",),
    CanonicalField.SELL_EX_VAT: ("Selling Price ex VAT", "Selling Price"),
    CanonicalField.SALE_INC_VAT: ("Sale Price inc VAT",),
    CanonicalField.SALE_PRICE: ("Sale Price ex VAT", "Sale Price"),
    CanonicalField.PROFIT_PERCENT: ("Calculated Profit % Per Unit", "Profit %"),
    CanonicalField.STOCK_VALUE: ("Stock Value",),
    CanonicalField.REPORTED_REVENUE_YTD: (
        "Calculated Revenue YTD",
        "Calculated Revenue",
        "Revenue YTD",
    ),
    CanonicalField.REPORTED_REVENUE_LAST_YEAR: (
        "Calculated Revenue Last Year",
        "Revenue Last Year",
    ),
    # 実エクスポートのスペルミス "Availabile" を優先
    CanonicalField.AVAILABLE_STOCK: ("Availabile Stock", "Available Stock"),
    CanonicalField.SUPPLIER_STOCK: ("Supplier Stock",),
    CanonicalField.UNITS_THIS_YEAR: ("Total Sales this Year", "Units Sold This Year"),
    CanonicalField.UNITS_LAST_YEAR: ("Total Sales Last Year", "Units Sold Last Year"),
    CanonicalField.IMAGE_COUNT: ("Image Count", "Number of Images", "Images"),
    CanonicalField.ON_ORDER: ("On Order",),
    CanonicalField.HAS_PDP: ("Has PDP", "PDP"),
    CanonicalField.HAS_OPTIMISED_DESCRIPTION: (
        "Has Optimised Description",
        "Optimised Description",
    ),
    CanonicalField.FILTERS_CORRECT: ("Filters Correct",),
}

CATEGORY_FIELDS = frozenset({
    CanonicalField.BRAND,
    CanonicalField.PARENT_CATEGORY,
    CanonicalField.SUB_CATEGORY,
    CanonicalField.CLASSIFICATION,
})

FLAG_FIELDS = frozenset({
    CanonicalField.ON_ORDER,
    CanonicalField.HAS_PDP,
    CanonicalField.HAS_OPTIMISED_DESCRIPTION,
    CanonicalField.FILTERS_CORRECT,
})

# Flags that make up content readiness (on_order is operational, not content)
CONTENT_FLAGS = (
    CanonicalField.HAS_PDP,
    CanonicalField.HAS_OPTIMISED_DESCRIPTION,
    CanonicalField.FILTERS_CORRECT,
)

_TEXT_FIELDS = frozenset({
    CanonicalField.PRODUCT_ID,
    CanonicalField.SKU,
    CanonicalField.NAME,
})

_KINDS: dict[CanonicalField, FieldKind] = {}
for _field in CanonicalField:
    if _field in CATEGORY_FIELDS:
        _KINDS[_field] = FieldKind.CATEGORY
    elif _field in FLAG_FIELDS:
        _KINDS[_field] = FieldKind.FLAG
    elif _field in _TEXT_FIELDS:
        _KINDS[_field] = FieldKind.TEXT
    elif _field is CanonicalField.IMAGE_COUNT:
        _KINDS[_field] = FieldKind.INTEGER
    else:
        _KINDS[_field] = FieldKind.NUMBER
del _field

NUMERIC_FIELDS = frozenset(
    f for f, k in _KINDS.items() if k in (FieldKind.NUMBER, FieldKind.INTEGER)
)
