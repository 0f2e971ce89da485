from __future__ import annotations

import pytest

from src.ingest.headers import (
    NOT_FOUND,
    Found,
    HeaderIndex,
    build_index,
    normalize_header_key,
    resolve,
    resolve_field,
)
from src.models.canonical_fields import CanonicalField


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Product SKU", "product sku"),
        ("\ufeff Product SKU \r", "product sku"),
        ("  Selling   Price\tinc VAT ", "selling price inc vat"),
        ("Stock\r\nValue", "stock value"),
        (None, ""),
        ("", ""),
    ],
)
def test_normalize_header_key(raw, expected):
    assert normalize_header_key(raw) == expected


@pytest.mark.parametrize("raw", ["\ufeffBrand", " Total  Sales this Year\r", "A B", "x"])
def test_normalize_header_key_is_idempotent(raw):
    once = normalize_header_key(raw)
    assert normalize_header_key(once) == once


def test_bom_and_carriage_return_header_resolves_like_plain_header():
    noisy = build_index({"\ufeff Product SKU \r": "X1"})
    plain = build_index({"Product SKU": "X1"})
    assert resolve_field(noisy, CanonicalField.SKU) == Found("\ufeff Product SKU \r", "Product SKU")
    assert resolve_field(plain, CanonicalField.SKU) == Found("Product SKU", "Product SKU")


def test_collision_keeps_first_seen_column():
    index = build_index({"Brand": "a", " brand ": "b", "BRAND\r": "c"})
    assert len(index) == 1
    assert index.resolve("brand") == "Brand"


def test_resolve_missing_returns_none():
    index = build_index({"Brand": "Makita"})
    assert resolve(index, "Supplier Stock") is None
    assert "Supplier Stock" not in index
    assert "BRAND" in index


def test_blank_header_keys_are_not_indexed():
    index = HeaderIndex.from_columns(["", "   ", None, "Brand"])
    assert index.columns == ["Brand"]


def test_resolve_field_uses_candidate_priority():
    # Both spellings present: the first candidate wins even though it is second in the file
    index = build_index({"Selling Price": "1", "Selling Price ex VAT": "2"})
    res = resolve_field(index, CanonicalField.SELL_EX_VAT)
    assert isinstance(res, Found)
    assert res.column == "Selling Price ex VAT"
    assert res.candidate == "Selling Price ex VAT"


def test_resolve_field_falls_back_to_later_candidate():
    index = build_index({"Available Stock": "4"})
    res = resolve_field(index, CanonicalField.AVAILABLE_STOCK)
    assert res == Found("Available Stock", "Available Stock")


def test_resolve_field_not_found():
    index = build_index({"Brand": "x"})
    assert resolve_field(index, CanonicalField.IMAGE_COUNT) is NOT_FOUND
    assert resolve_field(index, ["Nope", "Also Nope"]) is NOT_FOUND


def test_build_index_from_none_row():
    assert len(build_index(None)) == 0
