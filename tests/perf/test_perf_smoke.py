from __future__ import annotations

import time
from pathlib import Path

import pytest

from scripts.gen_sample_catalogue import generate_catalogue, write_catalogue
from src.services.loader import load_catalogue
from src.services.record_store import RecordStore

"""Performance smoke test: synthetic export through the full load path.

Kept small so CI stays fast; the generator script covers larger manual runs.
"""


@pytest.mark.perf
def test_load_throughput_smoke(temp_workdir: Path):
    rows = 5_000
    path = temp_workdir / "data" / "perf.csv"
    write_catalogue(generate_catalogue(rows), path)

    store = RecordStore()
    start = time.perf_counter()
    result = load_catalogue(path, store)
    elapsed = time.perf_counter() - start

    assert result.succeeded
    assert result.record_count == rows
    assert elapsed < 30.0, f"load took {elapsed:.3f}s"
    throughput = rows / elapsed
    print(f"\nPerf smoke: {rows:,} rows in {elapsed:.3f}s ({throughput:.1f} rows/sec)")
    assert throughput > 200
