from __future__ import annotations

import math

import pytest

from src.ingest.coercion import is_blank, to_int, to_number, to_trimmed_string, to_truthy_boolean


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("£1,234.50", 1234.5),
        ("12%", 12.0),
        (" 42 ", 42.0),
        ("-3.5", -3.5),
        ("£-1,000", -1000.0),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("12 units", 12.0),
        (7, 7.0),
        (2.5, 2.5),
    ],
)
def test_to_number_parses(raw, expected):
    assert to_number(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", None, "abc", "£", "%", ",", "n/a", "inf", "nan", float("nan"), "-"])
def test_to_number_missing_is_nan(raw):
    assert math.isnan(to_number(raw))


@pytest.mark.parametrize("text", ["£1,234.50", "12%", "1,000,000", "£9.99"])
def test_to_number_matches_stripped_parse(text):
    stripped = text.replace("£", "").replace("%", "").replace(",", "")
    assert to_number(text) == float(stripped)


def test_to_int_truncates_toward_zero():
    assert to_int("3.9") == 3.0
    assert to_int("-3.9") == -3.0
    assert math.isnan(to_int(""))
    assert math.isnan(to_int("x"))


@pytest.mark.parametrize("raw", ["y", "YES", " true ", "1", "t", "Yes - verified", "it is TRUE", "yes please"])
def test_to_truthy_boolean_true(raw):
    assert to_truthy_boolean(raw) is True


@pytest.mark.parametrize("raw", ["n", "No", "false", "0", "F", "", None, "maybe", "2", "ok"])
def test_to_truthy_boolean_false(raw):
    assert to_truthy_boolean(raw) is False


def test_to_trimmed_string():
    assert to_trimmed_string("  Makita ") == "Makita"
    assert to_trimmed_string("   ", "Unknown") == "Unknown"
    assert to_trimmed_string(None, "Unknown") == "Unknown"
    assert to_trimmed_string(123) == "123"


def test_is_blank():
    assert is_blank(None)
    assert is_blank(" \t")
    assert is_blank(float("nan"))
    assert not is_blank("0")
