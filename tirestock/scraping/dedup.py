"""
Duplicate removal for parsed stock rows.
"""

from __future__ import annotations

from collections.abc import Iterable

from tirestock.domain.records import StockRecord


def dedupe_stock_records(records: Iterable[StockRecord]) -> list[StockRecord]:
    """
    Keep the first record for each trimmed (brand, model, size, unique code) key.
    """

    seen: set[tuple[str, str, str, str]] = set()
    deduped: list[StockRecord] = []
    for record in records:
        key = record.dedup_key()
        if key in seen:
            continue
        seen.add(key)
        deduped.append(record)
    return deduped
