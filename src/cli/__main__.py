from __future__ import annotations

import argparse
import math
import sys
from pathlib import Path

from dotenv import load_dotenv

from src.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from src.ingest.normalizer import normalize_rows
from src.ingest.reader import CatalogueReadError, read_catalogue_csv
from src.logging.error_log import ErrorLogBuffer
from src.logging.init import log_summary, set_debug, setup_logging
from src.models.config_models import NormalizerSettings
from src.services.aggregation import compute_kpis, records_to_frame
from src.services.loader import load_catalogue
from src.services.record_store import RecordStore
from src.services.summary import render_kpi_line, render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (missing config file means defaults)
- Resolve the CSV source: positional argument > CATALOGUE_SOURCE > config `source`
- Load into a RecordStore, print KPI and SUMMARY lines, optionally export
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env so CATALOGUE_SOURCE can be set per checkout."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Normalize a catalogue CSV export and report KPIs")
    p.add_argument("source", nargs="?", help="CSV path or http(s) URL (overrides config)")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print resolved headers & first records then exit")
    p.add_argument("--export", type=Path, default=None, help="Write normalized records to this CSV")
    return p.parse_args(argv)


def _fmt(value: object) -> object:
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _inspect_data(source: str, settings: NormalizerSettings) -> int:
    try:
        table = read_catalogue_csv(source)
    except CatalogueReadError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    result = normalize_rows(table.rows, settings=settings)
    print(f"SOURCE: {source} columns={len(table.columns)} rows={result.raw_rows} blank_rows={result.blank_rows}")
    for res in result.resolutions:
        column = repr(res.column) if res.found else "-"
        print(f"  {res.field.value:<28} <- {column}")
    for record in result.records[:3]:
        print("  record=", {
            "sku": record.sku,
            "brand": record.brand,
            "classification": record.classification,
            "revenue": _fmt(record.revenue),
            "profit": _fmt(record.profit),
            "discount_percent": _fmt(record.discount_percent),
            "weeks_of_cover": _fmt(record.weeks_of_cover),
        })
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む (テストで [] を渡すケース)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug()

    config_path: Path = args.config
    try:
        # Explicit --config must exist; the default location is optional
        cfg = load_config(config_path, required=config_path != DEFAULT_CONFIG_PATH)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    source = args.source or cfg.source
    if not source:
        logger.error("no csv source given (argument, CATALOGUE_SOURCE or config 'source')")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(source, cfg.settings)

    logger.info(f"Loading catalogue from: {source}")
    store = RecordStore()
    error_log = ErrorLogBuffer()
    result = load_catalogue(source, store, cfg.settings, error_log=error_log)

    diagnostics = error_log.flush()
    if diagnostics is not None:
        logger.info(f"diagnostics written to {diagnostics}")

    if result.succeeded:
        missing = [f.value for f in result.missing_fields]
        if missing:
            logger.info(f"fields without a source column: {', '.join(missing)}")
        logger.info(render_kpi_line(compute_kpis(store.records)))
        if args.export is not None:
            args.export.parent.mkdir(parents=True, exist_ok=True)
            records_to_frame(store.records).to_csv(args.export, index=False)
            logger.info(f"exported {len(store)} records to {args.export}")

    # log_summary が "SUMMARY " を付けるので先頭を除去
    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])

    return EXIT_SUCCESS if result.succeeded else EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
