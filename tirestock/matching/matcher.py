"""
tirestock/matching/matcher.py

Cross-source join between ledger records and live stock records.

Codes are compared as trimmed, case-sensitive strings. Brand comparison
elsewhere in the package goes through ``normalize_brand`` and is
case-insensitive; the two rules differ on purpose and must not be unified.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from tirestock.domain.records import LedgerRecord, StockRecord
from tirestock.normalization.formatters import normalize_size
from tirestock.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

# stock identifier fields in match priority order
STOCK_KEY_FIELDS: tuple[str, ...] = ("unique_code", "it_id", "st_id")


class MergeDirection(str, Enum):
    """
    Which source drives the join iteration.
    """

    LEDGER_DRIVEN = "ledger_driven"
    STOCK_DRIVEN = "stock_driven"


@dataclass(frozen=True)
class MatchPair:
    """
    One joined candidate; either side may be missing.
    """

    ledger: LedgerRecord | None
    stock: StockRecord | None

    @property
    def matched(self) -> bool:
        return self.ledger is not None and self.stock is not None


def match_key(value: str | None) -> str:
    return (value or "").strip()


def filter_ledger_by_size(
    ledger: Sequence[LedgerRecord],
    size_query: str | None,
) -> list[LedgerRecord]:
    """
    Keep ledger records whose bare-digit size contains the bare-digit query.
    """

    query = normalize_size(size_query)
    if not query:
        return list(ledger)
    return [record for record in ledger if query in normalize_size(record.size)]


class CrossSourceMatcher:
    """
    First-match join on codes with ordered identifier fallback.
    """

    def __init__(self, direction: MergeDirection = MergeDirection.LEDGER_DRIVEN) -> None:
        self.direction = direction

    def match(
        self,
        ledger: Sequence[LedgerRecord],
        stock: Sequence[StockRecord],
    ) -> list[MatchPair]:
        if self.direction is MergeDirection.STOCK_DRIVEN:
            pairs = self._match_stock_driven(ledger, stock)
        else:
            pairs = self._match_ledger_driven(ledger, stock)

        log_event(
            logger,
            logging.INFO,
            "sources_matched",
            direction=self.direction.value,
            ledger_records=len(ledger),
            stock_records=len(stock),
            matched=sum(1 for pair in pairs if pair.matched),
        )
        return pairs

    def find_stock(self, code: str | None, stock: Sequence[StockRecord]) -> StockRecord | None:
        """
        Return the first stock record whose identifiers equal ``code``.

        The primary unique code is checked across every record before any
        alternate identifier is consulted.
        """

        key = match_key(code)
        if not key:
            return None
        for field_name in STOCK_KEY_FIELDS:
            for record in stock:
                if match_key(getattr(record, field_name)) == key:
                    return record
        return None

    def _match_ledger_driven(
        self,
        ledger: Sequence[LedgerRecord],
        stock: Sequence[StockRecord],
    ) -> list[MatchPair]:
        index = self._build_stock_index(stock)
        pairs: list[MatchPair] = []
        for entry in ledger:
            key = match_key(entry.code)
            found = None
            if key:
                for field_name in STOCK_KEY_FIELDS:
                    found = index[field_name].get(key)
                    if found is not None:
                        break
            if found is None:
                log_event(logger, logging.DEBUG, "ledger_code_unmatched", code=key)
            pairs.append(MatchPair(ledger=entry, stock=found))
        return pairs

    def _match_stock_driven(
        self,
        ledger: Sequence[LedgerRecord],
        stock: Sequence[StockRecord],
    ) -> list[MatchPair]:
        ledger_by_code: dict[str, int] = {}
        for position, entry in enumerate(ledger):
            key = match_key(entry.code)
            if key and key not in ledger_by_code:
                ledger_by_code[key] = position

        used: set[int] = set()
        pairs: list[MatchPair] = []
        for record in stock:
            position = None
            for field_name in STOCK_KEY_FIELDS:
                key = match_key(getattr(record, field_name))
                candidate = ledger_by_code.get(key) if key else None
                if candidate is not None and candidate not in used:
                    position = candidate
                    break
            if position is None:
                pairs.append(MatchPair(ledger=None, stock=record))
                continue
            used.add(position)
            pairs.append(MatchPair(ledger=ledger[position], stock=record))

        for position, entry in enumerate(ledger):
            if position not in used:
                pairs.append(MatchPair(ledger=entry, stock=None))
        return pairs

    @staticmethod
    def _build_stock_index(stock: Sequence[StockRecord]) -> dict[str, dict[str, StockRecord]]:
        index: dict[str, dict[str, StockRecord]] = {field_name: {} for field_name in STOCK_KEY_FIELDS}
        for record in stock:
            for field_name in STOCK_KEY_FIELDS:
                key = match_key(getattr(record, field_name))
                if key and key not in index[field_name]:
                    index[field_name][key] = record
        return index
