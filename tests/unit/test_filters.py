from __future__ import annotations

import math

from src.models.product_record import ProductRecord
from src.services.filters import (
    RecordFilters,
    apply_filters,
    filter_options,
    normalize_filters,
    sort_records,
    unique_sorted,
)


def _rec(sku, **kw):
    kw.setdefault("row_number", 1)
    return ProductRecord(sku=sku, **kw)


RECORDS = [
    _rec("M1", name="Drill", brand="Makita", parent_category="Power Tools", sub_category="Drills",
         classification="B", units_this_year=5, stock_value=100.0, revenue=50.0),
    _rec("M2", name="Saw", brand="Makita", parent_category="Power Tools", sub_category="Saws",
         classification="A+", units_this_year=0, stock_value=900.0, revenue=math.nan),
    _rec("D1", name="Hammer", brand="dewalt", parent_category="Hand Tools", sub_category="Hammers",
         classification="Unknown", units_this_year=2, revenue=10.0),
]


def test_no_filters_returns_everything():
    assert len(apply_filters(RECORDS, RecordFilters())) == 3


def test_filter_by_brand_and_selling():
    out = apply_filters(RECORDS, RecordFilters(brand="Makita", only_selling=True))
    assert [r.sku for r in out] == ["M1"]


def test_query_matches_sku_or_name_case_insensitively():
    assert [r.sku for r in apply_filters(RECORDS, RecordFilters(query="hammer"))] == ["D1"]
    assert [r.sku for r in apply_filters(RECORDS, RecordFilters(query="m2"))] == ["M2"]


def test_stock_value_range_excludes_missing():
    out = apply_filters(RECORDS, RecordFilters(min_stock_value=50.0))
    assert [r.sku for r in out] == ["M1", "M2"]
    out = apply_filters(RECORDS, RecordFilters(max_stock_value=500.0))
    assert [r.sku for r in out] == ["M1"]


def test_normalize_filters():
    f = normalize_filters({"brand": " Makita ", "query": "DRILL", "min_stock_value": "£1,000", "only_selling": 1})
    assert f.brand == "Makita"
    assert f.query == "drill"
    assert f.min_stock_value == 1000.0
    assert f.only_selling is True
    assert math.isnan(f.max_stock_value)


def test_unique_sorted():
    assert unique_sorted(["b", " a", "B", "", None, "a"]) == ["a", "B", "b"]


def test_filter_options():
    opts = filter_options(RECORDS)
    assert opts.brands == ["dewalt", "Makita"]
    assert opts.parent_categories == ["Hand Tools", "Power Tools"]
    assert opts.sub_categories == []
    assert opts.classifications == ["A+", "B", "Unknown"]
    assert filter_options(RECORDS, "Power Tools").sub_categories == ["Drills", "Saws"]


def test_numeric_sort_puts_missing_last_both_directions():
    desc = sort_records(RECORDS, "revenue")
    asc = sort_records(RECORDS, "revenue", descending=False)
    assert [r.sku for r in desc] == ["M1", "D1", "M2"]
    assert [r.sku for r in asc] == ["D1", "M1", "M2"]


def test_text_sort_uses_grade_rank():
    asc = sort_records(RECORDS[:2], "classification", descending=False)
    assert [r.classification for r in asc] == ["B", "A+"]
    desc = sort_records(RECORDS[:2], "classification")
    assert [r.classification for r in desc] == ["A+", "B"]


def test_text_sort_case_insensitive():
    out = sort_records(RECORDS, "brand", descending=False)
    assert [r.brand for r in out] == ["dewalt", "Makita", "Makita"]


def test_sort_does_not_mutate_input():
    data = list(RECORDS)
    sort_records(data, "revenue")
    assert data == RECORDS
