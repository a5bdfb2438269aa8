"""
Normalization of raw price-ledger rows into ledger records.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence

from tirestock.domain.records import LedgerRecord
from tirestock.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

_HEADER_NOISE = re.compile(r"[\s_\-]+")
_DOT_SEPARATORS = re.compile(r"[,\n/;]+")

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "brand": ("brand", "브랜드", "제조사"),
    "model": ("model", "모델", "패턴"),
    "size": ("size", "사이즈", "규격"),
    "code": ("code", "코드", "고유코드", "partno", "uniquecode"),
    "factory_price": ("factoryprice", "공장도가", "공장도", "price", "가격"),
    "dot_list": ("dot", "dotlist", "dots", "생산년도"),
    "type": ("type", "타입", "유형"),
    "season": ("season", "시즌", "계절"),
}


def parse_price(value: object) -> int:
    """
    Convert a price cell to an integer by keeping digits only; no digits yields 0.
    """

    if value is None:
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return 0
    digits = re.sub(r"\D", "", str(value))
    if not digits:
        return 0
    try:
        return int(digits)
    except ValueError:
        log_event(logger, logging.WARNING, "ledger_price_unparseable", digits=len(digits))
        return 0


def parse_dot_list(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        items: Iterable[object] = value
    else:
        items = _DOT_SEPARATORS.split(str(value))
    return tuple(text for text in (str(item).strip() for item in items) if text)


class LedgerNormalizer:
    """
    Map loosely-labelled ledger rows (English or Korean headers) onto LedgerRecord.
    """

    def __init__(self, aliases: Mapping[str, Sequence[str]] | None = None) -> None:
        merged = {name: tuple(values) for name, values in FIELD_ALIASES.items()}
        if aliases:
            for name, values in aliases.items():
                merged[name] = tuple(self._header_key(value) for value in values) + merged.get(name, ())
        self._alias_to_field = {
            alias: field_name for field_name, values in merged.items() for alias in values
        }

    def normalize_rows(self, rows: Iterable[Mapping[str, object]]) -> list[LedgerRecord]:
        records: list[LedgerRecord] = []
        skipped = 0
        for row in rows:
            record = self.normalize_row(row)
            if record is None:
                skipped += 1
                continue
            records.append(record)

        log_event(
            logger,
            logging.DEBUG,
            "ledger_rows_normalized",
            records=len(records),
            skipped=skipped,
        )
        return records

    def normalize_row(self, row: Mapping[str, object]) -> LedgerRecord | None:
        values: dict[str, object] = {}
        for header, value in row.items():
            field_name = self._alias_to_field.get(self._header_key(header))
            if field_name is not None and field_name not in values:
                values[field_name] = value

        brand = self._text(values.get("brand"))
        model = self._text(values.get("model"))
        size = self._text(values.get("size"))
        code = self._text(values.get("code"))
        if not any((brand, model, size, code)):
            return None

        return LedgerRecord(
            brand=brand,
            model=model,
            size=size,
            code=code,
            factory_price=parse_price(values.get("factory_price")),
            dot_list=parse_dot_list(values.get("dot_list")),
            type=self._text(values.get("type")),
            season=self._text(values.get("season")),
        )

    @staticmethod
    def _header_key(header: object) -> str:
        return _HEADER_NOISE.sub("", str(header)).lower()

    @staticmethod
    def _text(value: object) -> str:
        if value is None:
            return ""
        return str(value).strip()
