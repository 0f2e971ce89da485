from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..ingest.normalizer import normalize_rows
from ..ingest.reader import CatalogueReadError, RawTable, read_catalogue_csv
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import NormalizerSettings
from ..models.load_result import LoadResult, LoadStatus
from .progress import ProgressTracker
from .record_store import RecordStore

"""Load pipeline for catalogue CSV exports.

One load is one transaction: read -> normalize -> derive -> commit. Field and row
level problems are recovered inside the normalizer. Dataset level failures (read
error, no populated rows) leave the store untouched and come back as a FAILED
LoadResult; load_or_raise turns them into LoadError for callers that prefer it.
"""

__all__ = [
    "LoadError",
    "load_catalogue",
    "load_table",
    "load_or_raise",
]

logger = logging.getLogger(__name__)

DATASET_ROW = -1


class LoadError(Exception):
    """Raised by load_or_raise when a load does not succeed."""

    def __init__(self, result: LoadResult) -> None:
        super().__init__(result.error or f"load {result.status.value}")
        self.result = result


def _failed(
    source: str,
    load_id: int,
    start_time: datetime,
    error: str,
    error_type: str,
    error_log: ErrorLogBuffer | None,
    **counts: int,
) -> LoadResult:
    logger.error("load failed source=%s: %s", source, error)
    if error_log is not None:
        error_log.append(ErrorRecord.create(source, DATASET_ROW, "", error_type, error))
    end_time = datetime.now(UTC)
    return LoadResult(
        source=source,
        status=LoadStatus.FAILED,
        load_id=load_id,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        error=error,
        **counts,
    )


def load_table(
    table: RawTable,
    store: RecordStore,
    settings: NormalizerSettings | None = None,
    *,
    source: str = "<memory>",
    load_id: int | None = None,
    error_log: ErrorLogBuffer | None = None,
    start_time: datetime | None = None,
) -> LoadResult:
    """Normalize already-parsed rows and commit them to the store."""
    start_time = start_time or datetime.now(UTC)
    if load_id is None:
        load_id = store.begin_load()

    with ProgressTracker(len(table.rows), description="Normalizing rows", unit="row") as progress:
        result = normalize_rows(table.rows, settings=settings, on_row=progress.advance)

    counts = {"raw_rows": result.raw_rows, "blank_rows": result.blank_rows}
    if not result.records:
        return _failed(
            source, load_id, start_time, "no populated rows in dataset", "EMPTY_DATASET", error_log, **counts
        )

    if error_log is not None:
        for issue in result.issues:
            error_log.append(ErrorRecord.create(
                source,
                issue.row_number,
                issue.field.value,
                "COERCION_FAILURE",
                f"column={issue.column!r} value={issue.raw_value!r}",
            ))
    if result.issues:
        logger.warning("source=%s coercion issues=%d (fields degraded to missing)", source, len(result.issues))

    committed = store.commit(load_id, result.records)
    status = LoadStatus.SUCCESS if committed else LoadStatus.STALE
    if not committed and error_log is not None:
        error_log.append(ErrorRecord.create(
            source, DATASET_ROW, "", "STALE_LOAD", f"load_id={load_id} superseded by {store.committed_load_id}"
        ))
    end_time = datetime.now(UTC)
    logger.info(
        "loaded source=%s records=%d blank_rows=%d status=%s",
        source, len(result.records), result.blank_rows, status.value,
    )
    return LoadResult(
        source=source,
        status=status,
        load_id=load_id,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        record_count=len(result.records),
        resolutions=result.resolutions,
        issues=result.issues,
        **counts,
    )


def load_catalogue(
    source: str | Path,
    store: RecordStore,
    settings: NormalizerSettings | None = None,
    *,
    error_log: ErrorLogBuffer | None = None,
) -> LoadResult:
    """Read a CSV (path or URL) and load it into the store.

    The load id is taken before I/O starts so a slower earlier load that finishes
    after a newer one is discarded rather than overwriting it.
    """
    source_name = str(source)
    load_id = store.begin_load()
    start_time = datetime.now(UTC)
    try:
        table = read_catalogue_csv(source)
    except CatalogueReadError as e:
        return _failed(source_name, load_id, start_time, str(e), "LOAD_FAILURE", error_log)
    return load_table(
        table,
        store,
        settings,
        source=source_name,
        load_id=load_id,
        error_log=error_log,
        start_time=start_time,
    )


def load_or_raise(
    source: str | Path,
    store: RecordStore,
    settings: NormalizerSettings | None = None,
) -> LoadResult:
    result = load_catalogue(source, store, settings)
    if not result.succeeded:
        raise LoadError(result)
    return result
