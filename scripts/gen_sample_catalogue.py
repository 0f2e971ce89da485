#!/usr/bin/env python3
"""Synthetic catalogue export generator.

Produces a CSV shaped like a real range export, messy on purpose:
- Currency/percent/thousands-separator text in numeric columns
- Header drift (stray spaces, optional BOM, mixed case)
- Fully blank rows and a sprinkling of unparseable cells
- Free-text content flags ("Yes - verified", "N", "")

Useful for demos, perf checks and trying --inspect-data against odd headers.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

BRANDS = ["Makita", "DeWalt", "Bosch", "Milwaukee", "Ryobi", "Stanley"]
CATEGORIES = {
    "Power Tools": ["Drills", "Saws", "Grinders"],
    "Hand Tools": ["Spanners", "Hammers"],
    "Accessories": ["Batteries", "Blades", "Bits"],
}
GRADES = ["A+", "A", "B", "C", "D", "", "Unclassified"]
FLAG_TEXT = ["Y", "N", "Yes", "No", "yes - verified", "", "TRUE", "0"]


def _money(values: np.ndarray) -> list[str]:
    return [f"£{v:,.2f}" for v in values]


def generate_catalogue(rows: int, seed: int = 42, blank_every: int = 50, junk_rate: float = 0.01) -> pd.DataFrame:
    """Generate a catalogue DataFrame with every cell as text.

    Args:
        rows: Number of product rows (blank rows come on top)
        seed: Random seed for reproducible data
        blank_every: Insert a fully blank row after every N products (0 disables)
        junk_rate: Share of numeric cells replaced by unparseable text
    """
    rng = np.random.default_rng(seed)
    parents = rng.choice(list(CATEGORIES), rows)
    subs = [rng.choice(CATEGORIES[p]) for p in parents]
    cost = np.round(rng.uniform(2, 400, rows), 2)
    sell_ex = np.round(cost * rng.uniform(1.1, 1.8, rows), 2)
    sell_inc = np.round(sell_ex * 1.2, 2)
    on_sale = rng.random(rows) < 0.3
    sale_inc = np.where(on_sale, np.round(sell_inc * rng.uniform(0.55, 0.98, rows), 2), np.nan)
    units_ty = rng.integers(0, 2000, rows)
    units_ly = rng.integers(0, 2000, rows)
    avail = rng.integers(0, 500, rows)

    data: dict[str, list[str]] = {
        "Product SKU": [f"SKU{100000 + i}" for i in range(rows)],
        "Product Name": [f"Product {i + 1}" for i in range(rows)],
        "Brand": rng.choice(BRANDS, rows).tolist(),
        "Parent Category": parents.tolist(),
        "Sub Category 1": subs,
        "Best Seller Status": rng.choice(GRADES, rows).tolist(),
        "Cost Price ex VAT": _money(cost),
        "Selling Price ex VAT": _money(sell_ex),
        "Selling Price inc VAT": _money(sell_inc),
        "Sale Price inc VAT": ["" if np.isnan(v) else f"£{v:,.2f}" for v in sale_inc],
        "Calculated Profit % Per Unit": [f"{p:.1f}%" for p in (sell_ex - cost) / sell_ex * 100],
        "Calculated Revenue YTD": _money(units_ty * sell_ex),
        "Calculated Revenue Last Year": _money(units_ly * sell_ex),
        "Availabile Stock": [f"{v:,}" for v in avail],
        "Supplier Stock": [f"{v:,}" for v in rng.integers(0, 5000, rows)],
        "Total Sales this Year": [f"{v:,}" for v in units_ty],
        "Total Sales Last Year": [f"{v:,}" for v in units_ly],
        "Stock Value": _money(avail * cost),
        "Image Count": [str(v) for v in rng.integers(0, 6, rows)],
        "Has PDP": rng.choice(FLAG_TEXT, rows).tolist(),
        "Optimised Description": rng.choice(FLAG_TEXT, rows).tolist(),
        "Filters Correct": rng.choice(FLAG_TEXT, rows).tolist(),
        "On Order": rng.choice(FLAG_TEXT, rows).tolist(),
    }
    df = pd.DataFrame(data)

    if junk_rate > 0:
        numeric_cols = ["Cost Price ex VAT", "Total Sales this Year", "Availabile Stock"]
        for col in numeric_cols:
            mask = rng.random(rows) < junk_rate
            df.loc[mask, col] = "n/a"

    if blank_every > 0 and rows > blank_every:
        blank = pd.DataFrame([[""] * len(df.columns)], columns=df.columns)
        parts = []
        for start in range(0, rows, blank_every):
            parts.append(df.iloc[start:start + blank_every])
            parts.append(blank)
        df = pd.concat(parts, ignore_index=True)
    return df


def write_catalogue(df: pd.DataFrame, output: Path, *, bom: bool = False, drift_headers: bool = False) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    if drift_headers:
        df = df.rename(columns={c: f" {c.upper()}  " if i % 2 else c for i, c in enumerate(df.columns)})
    df.to_csv(output, index=False, encoding="utf-8-sig" if bom else "utf-8", lineterminator="\r\n")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic catalogue export CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/catalogue.csv
  %(prog)s data/big.csv --rows 100000 --bom --drift-headers
        """,
    )
    parser.add_argument("output", type=Path, help="Output CSV path")
    parser.add_argument("--rows", type=int, default=5_000, help="Number of product rows (default: 5,000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--blank-every", type=int, default=50, help="Blank row after every N products (0 disables)")
    parser.add_argument("--bom", action="store_true", help="Write a UTF-8 byte-order mark")
    parser.add_argument("--drift-headers", action="store_true", help="Uppercase and pad every other header")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    df = generate_catalogue(args.rows, seed=args.seed, blank_every=args.blank_every)
    write_catalogue(df, args.output, bom=args.bom, drift_headers=args.drift_headers)
    print(f"Created catalogue: {args.output} ({args.rows:,} products, {len(df) - args.rows:,} blank rows)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
