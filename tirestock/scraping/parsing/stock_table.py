"""
BeautifulSoup-based parser for the supplier stock-list table.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from bs4 import BeautifulSoup, Tag

from tirestock.domain.records import StockRecord
from tirestock.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

LOGIN_MARKERS = ("login", "로그인")
DEFAULT_ROW_SELECTOR = "table.stock-list_table tbody tr"
DISCONTINUED_MARKER = "단종"


class UniqueCodePolicy(str, Enum):
    """
    Whether a row without a unique code is kept.
    """

    REQUIRE_CODE = "require_code"
    ALLOW_MISSING = "allow_missing"


@dataclass(frozen=True)
class StockTableLayout:
    """
    Column positions (0-based ``td`` index) and row rules of the stock table.
    """

    row_selector: str = DEFAULT_ROW_SELECTOR
    brand_col: int = 1
    model_col: int = 2
    part_no_col: int = 3
    size_col: int = 4
    unique_code_col: int = 5
    stock_col: int = 9
    supply_price_col: int = 10
    min_columns: int = 5
    discontinued_marker: str = DISCONTINUED_MARKER
    unique_code_policy: UniqueCodePolicy = UniqueCodePolicy.REQUIRE_CODE
    keep_discontinued: bool = False


def is_login_page(document: str) -> bool:
    """
    Detect an authentication page served instead of the stock table.
    """

    if any(marker in document for marker in LOGIN_MARKERS):
        return True
    return "<!DOCTYPE html>" in document and "<table" not in document


def parse_int(value: str) -> int:
    """
    Keep digits only. No digits, or a digit run too long to convert, yields 0.
    """

    digits = re.sub(r"\D", "", value or "")
    if not digits:
        return 0
    try:
        return int(digits)
    except ValueError:
        log_event(logger, logging.WARNING, "numeric_cell_unparseable", digits=len(digits))
        return 0


class StockTableParser:
    """
    Parse a raw stock-list document into StockRecord rows in document order.
    """

    def __init__(self, layout: StockTableLayout | None = None) -> None:
        self.layout = layout or StockTableLayout()

    def parse(self, document: str | None) -> list[StockRecord]:
        if not document or not document.strip():
            return []
        if is_login_page(document):
            log_event(logger, logging.WARNING, "stock_document_login_page", length=len(document))
            return []

        soup = BeautifulSoup(document, "html.parser")
        rows = self._select_rows(soup)
        if not rows:
            log_event(logger, logging.WARNING, "stock_table_no_rows")
            return []

        records: list[StockRecord] = []
        malformed = 0
        excluded = 0
        for index, row in enumerate(rows):
            cells = row.find_all("td", recursive=False) or row.find_all("td")
            if len(cells) < self.layout.min_columns:
                malformed += 1
                log_event(
                    logger,
                    logging.DEBUG,
                    "stock_row_malformed",
                    row_index=index,
                    columns=len(cells),
                    min_columns=self.layout.min_columns,
                )
                continue

            record = self._parse_row(row=row, cells=cells)
            if record is None:
                excluded += 1
                continue
            records.append(record)

        log_event(
            logger,
            logging.INFO,
            "stock_table_parsed",
            rows=len(rows),
            records=len(records),
            malformed=malformed,
            excluded=excluded,
            unique_code_policy=self.layout.unique_code_policy.value,
        )
        return records

    def _select_rows(self, soup: BeautifulSoup) -> list[Tag]:
        rows = soup.select(self.layout.row_selector)
        if rows:
            return rows
        return [row for row in soup.find_all("tr") if row.find("td") is not None]

    def _parse_row(self, *, row: Tag, cells: list[Tag]) -> StockRecord | None:
        layout = self.layout
        discontinued = self._is_discontinued(cells)
        if discontinued and not layout.keep_discontinued:
            return None

        unique_cell = self._cell(cells, layout.unique_code_col)
        unique_code = self._value(unique_cell)
        if layout.unique_code_policy is UniqueCodePolicy.REQUIRE_CODE and unique_code in {"", "0"}:
            return None

        return StockRecord(
            brand=self._text(self._cell(cells, layout.brand_col)),
            model=self._text(self._cell(cells, layout.model_col)),
            part_no=self._text(self._cell(cells, layout.part_no_col)),
            size=self._text(self._cell(cells, layout.size_col)),
            unique_code=unique_code,
            supply_price=parse_int(self._value(self._cell(cells, layout.supply_price_col))),
            stock_qty=parse_int(self._text(self._cell(cells, layout.stock_col))),
            discontinued=discontinued,
            it_id=self._identifier(row, unique_cell, "it_id"),
            st_id=self._identifier(row, unique_cell, "st_id"),
        )

    def _is_discontinued(self, cells: list[Tag]) -> bool:
        marker = self.layout.discontinued_marker
        for cell in cells[-2:]:
            if marker in self._text(cell):
                return True
        return False

    @staticmethod
    def _cell(cells: list[Tag], index: int) -> Tag | None:
        if 0 <= index < len(cells):
            return cells[index]
        return None

    @staticmethod
    def _text(cell: Tag | None) -> str:
        if cell is None:
            return ""
        return re.sub(r"\s+", " ", cell.get_text(" ", strip=True)).strip()

    @classmethod
    def _value(cls, cell: Tag | None) -> str:
        """
        Prefer the current value of an editable text input, else the cell text.
        """

        if cell is None:
            return ""
        node = cell.select_one('input[type="text"]')
        if node is not None:
            return str(node.get("value") or "").strip()
        return cls._text(cell)

    @staticmethod
    def _identifier(row: Tag, unique_cell: Tag | None, name: str) -> str:
        attribute = "data-" + name.replace("_", "-")
        candidates: list[Tag] = [row]
        if unique_cell is not None:
            candidates.extend(unique_cell.find_all("input"))
        for node in candidates:
            value = node.get(attribute)
            if value:
                return str(value).strip()

        hidden = row.find("input", attrs={"name": name})
        if hidden is not None and hidden.get("value"):
            return str(hidden.get("value")).strip()
        return ""
