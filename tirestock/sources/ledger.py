"""
Price ledger adapters and the session ledger cache.
"""

from __future__ import annotations

import csv
import io
import logging
import threading
import time
from collections.abc import Callable, Iterable

import requests

from tirestock.config import LedgerSourceSettings
from tirestock.domain.records import LedgerRecord
from tirestock.normalization.ledger import LedgerNormalizer
from tirestock.scraping.logging_utils import log_event
from tirestock.sources.base import (
    LedgerSource,
    SourceUnavailableError,
    build_http_session,
    fetch_text,
)

logger = logging.getLogger(__name__)


class CsvLedgerSource(LedgerSource):
    """
    Download a CSV export of the price sheet and normalize its rows.
    """

    def __init__(
        self,
        *,
        settings: LedgerSourceSettings,
        session: requests.Session | None = None,
        normalizer: LedgerNormalizer | None = None,
    ) -> None:
        self._session = session or build_http_session(
            max_retries=settings.max_retries,
            backoff_factor=settings.backoff_factor,
        )
        self._timeout_seconds = settings.timeout_seconds
        self._url = settings.csv_url
        self._normalizer = normalizer or LedgerNormalizer()

    def fetch_ledger_records(self) -> tuple[LedgerRecord, ...]:
        if not self._url:
            log_event(logger, logging.WARNING, "ledger_source_not_configured")
            return ()
        try:
            text = fetch_text(
                self._session,
                source="ledger_csv",
                url=self._url,
                timeout_seconds=self._timeout_seconds,
                headers={"Accept": "text/csv"},
            )
        except SourceUnavailableError as exc:
            log_event(logger, logging.WARNING, "ledger_source_unavailable", error=str(exc))
            return ()
        return tuple(self._normalizer.normalize_rows(read_csv_rows(text)))


def read_csv_rows(text: str) -> list[dict[str, str]]:
    stream = io.StringIO(text.lstrip("\ufeff"))
    reader = csv.DictReader(stream)
    if not reader.fieldnames:
        return []
    return [
        {key: value for key, value in row.items() if key is not None}
        for row in reader
    ]


class StaticLedgerSource(LedgerSource):
    """
    Serve ledger records held in memory.
    """

    def __init__(self, records: Iterable[LedgerRecord] = ()) -> None:
        self._records = tuple(records)

    def fetch_ledger_records(self) -> tuple[LedgerRecord, ...]:
        return self._records


class CachedLedgerSource(LedgerSource):
    """
    Session cache in front of a ledger source.

    A snapshot is reused until ``ttl_seconds`` elapse or ``invalidate`` is
    called. Empty results are never cached.
    """

    def __init__(
        self,
        inner: LedgerSource,
        *,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._inner = inner
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: tuple[LedgerRecord, ...] | None = None
        self._loaded_at = 0.0
        self._lock = threading.Lock()

    def fetch_ledger_records(self) -> tuple[LedgerRecord, ...]:
        with self._lock:
            now = self._clock()
            if self._snapshot is not None and now - self._loaded_at < self._ttl_seconds:
                log_event(logger, logging.DEBUG, "ledger_cache_hit", records=len(self._snapshot))
                return self._snapshot

            records = self._inner.fetch_ledger_records()
            if records:
                self._snapshot = records
                self._loaded_at = now
            else:
                self._snapshot = None
            log_event(logger, logging.INFO, "ledger_cache_refreshed", records=len(records))
            return records

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None
