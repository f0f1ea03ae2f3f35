"""
Module Cache

Process-lifetime store of fully crawled ModuleRecords, keyed by URI.

An explicit object: whoever owns the top-level parses constructs one and
hands it to every crawl. Safe to share between threads; the only write
primitive is insert-if-absent, so a record, once cached, is never
replaced.
"""

import logging
import threading
from typing import Dict, Optional

from .module_record import ModuleRecord

logger = logging.getLogger(__name__)


class ModuleCache:
    """Thread-safe uri -> ModuleRecord map with insert-if-absent semantics"""

    def __init__(self):
        self._records: Dict[str, ModuleRecord] = {}
        self._lock = threading.Lock()

    def get(self, uri: str) -> Optional[ModuleRecord]:
        with self._lock:
            return self._records.get(uri)

    def put_if_absent(self, record: ModuleRecord) -> ModuleRecord:
        """
        Insert record unless its URI is already cached.

        Returns the record that is cached for the URI afterwards (the
        given one, or the one inserted earlier).
        """
        with self._lock:
            existing = self._records.get(record.uri)
            if existing is not None:
                return existing
            self._records[record.uri] = record
        logger.debug(f"Cached module {record.uri}")
        return record

    def __contains__(self, uri: object) -> bool:
        with self._lock:
            return uri in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        """Drop every cached record (tests, long-running tools)"""
        with self._lock:
            self._records.clear()
