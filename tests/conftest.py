# Shared pytest fixtures
from __future__ import annotations
import csv
import tempfile
from pathlib import Path
import pytest

from src.logging.init import reset_logging


HEADERS = [
    "Product SKU",
    "Product Name",
    "Brand",
    "Parent Category",
    "Sub Category 1",
    "Best Seller Status",
    "Cost Price ex VAT",
    "Selling Price ex VAT",
    "Selling Price inc VAT",
    "Sale Price inc VAT",
    "Availabile Stock",
    "Total Sales this Year",
    "Total Sales Last Year",
    "Stock Value",
    "Calculated Revenue YTD",
]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CATALOGUE_SOURCE", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_rows() -> list[dict[str, str]]:
    return [
        {
            "Product SKU": "MAK-001",
            "Product Name": "18V Combi Drill",
            "Brand": "Makita",
            "Parent Category": "Power Tools",
            "Sub Category 1": "Drills",
            "Best Seller Status": "A+",
            "Cost Price ex VAT": "£60.00",
            "Selling Price ex VAT": "£100.00",
            "Selling Price inc VAT": "£120.00",
            "Sale Price inc VAT": "£96.00",
            "Availabile Stock": "26",
            "Total Sales this Year": "1,040",
            "Total Sales Last Year": "900",
            "Stock Value": "£1,560.00",
            "Calculated Revenue YTD": "£104,000.00",
        },
        {header: "" for header in HEADERS},
        {
            "Product SKU": "DEW-002",
            "Product Name": "Circular Saw",
            "Brand": " ",
            "Parent Category": "Power Tools",
            "Sub Category 1": "Saws",
            "Best Seller Status": "B",
            "Cost Price ex VAT": "50",
            "Selling Price ex VAT": "80",
            "Selling Price inc VAT": "96",
            "Sale Price inc VAT": "",
            "Availabile Stock": "10",
            "Total Sales this Year": "0",
            "Total Sales Last Year": "12",
            "Stock Value": "",
            "Calculated Revenue YTD": "0",
        },
    ]


@pytest.fixture()
def write_csv(temp_workdir: Path):
    def _write(rows: list[dict[str, str]], name: str = "catalogue.csv", headers: list[str] | None = None) -> Path:
        path = temp_workdir / "data" / name
        fieldnames = headers or (list(rows[0].keys()) if rows else HEADERS)
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
        return path
    return _write


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source: ./data/catalogue.csv
unknown_label: Unknown
metrics:
  content_image_threshold: 2
  weeks_per_year: 52
  weeks_of_cover_cap: 260
  vat_rate: 0.2
header_aliases:
  sku: ["Item Code"]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "catalogue.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
