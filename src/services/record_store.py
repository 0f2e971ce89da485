from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from ..models.product_record import ProductRecord

"""Owned store for the normalized record set.

Single writer (the load pipeline), many readers. Each load takes a load id from
begin_load(); commit() replaces the whole record set only when no newer load has
committed yet, so a slow load finishing late cannot overwrite newer data.
"""

__all__ = [
    "RecordStore",
]

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self) -> None:
        self._records: tuple[ProductRecord, ...] = ()
        self._lock = threading.Lock()
        self._next_load_id = 0
        self._committed_load_id = 0

    @property
    def records(self) -> tuple[ProductRecord, ...]:
        """Current record set; a tuple so consumers cannot mutate it."""
        return self._records

    @property
    def committed_load_id(self) -> int:
        return self._committed_load_id

    def __len__(self) -> int:
        return len(self._records)

    def begin_load(self) -> int:
        with self._lock:
            self._next_load_id += 1
            return self._next_load_id

    def is_stale(self, load_id: int) -> bool:
        return load_id <= self._committed_load_id

    def commit(self, load_id: int, records: Iterable[ProductRecord]) -> bool:
        """Atomically replace the record set.

        Returns:
            False when a newer load already committed (records discarded)
        """
        snapshot = tuple(records)
        with self._lock:
            if self.is_stale(load_id):
                logger.warning(
                    "discarding stale load load_id=%d committed=%d", load_id, self._committed_load_id
                )
                return False
            self._records = snapshot
            self._committed_load_id = load_id
        return True

    def clear(self) -> None:
        with self._lock:
            self._records = ()
