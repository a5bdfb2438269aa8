"""
tests/test_stock_table_parser.py

Pytest unit tests for StockTableParser and the stock deduplicator.
"""

from __future__ import annotations

import pytest

from factories import make_stock, stock_document, stock_row
from tirestock.scraping.dedup import dedupe_stock_records
from tirestock.scraping.parsing.stock_table import (
    StockTableLayout,
    StockTableParser,
    UniqueCodePolicy,
    is_login_page,
    parse_int,
)


@pytest.fixture()
def parser() -> StockTableParser:
    return StockTableParser()


# ---------------------------------------------------------------------------
# Row extraction
# ---------------------------------------------------------------------------


class TestRowExtraction:
    def test_discontinued_row_is_excluded(self, parser: StockTableParser, sample_document: str) -> None:
        records = parser.parse(sample_document)

        assert len(records) == 2
        assert [record.unique_code for record in records] == ["AB12", "MX77"]

    def test_fields_are_read_from_fixed_columns(self, parser: StockTableParser, sample_document: str) -> None:
        first = parser.parse(sample_document)[0]

        assert first.brand == "Hankook"
        assert first.model == "Ventus S1 evo3"
        assert first.part_no == "1024587"
        assert first.size == "245/45R18 100Y XL"
        assert first.stock_qty == 12
        assert first.supply_price == 98000
        assert first.discontinued is False

    def test_input_value_is_preferred_over_cell_text(self, parser: StockTableParser) -> None:
        row = stock_row(unique_code="AB12").replace(
            '<td><input type="text" value="AB12"></td>',
            '<td>label<input type="text" value=" AB12 "></td>',
        )

        records = parser.parse(stock_document(row))

        assert records[0].unique_code == "AB12"

    def test_plain_text_is_used_without_input(self, parser: StockTableParser) -> None:
        row = stock_row(unique_code="AB12").replace(
            '<td><input type="text" value="98,000"></td>',
            "<td>77,500원</td>",
        )

        assert parser.parse(stock_document(row))[0].supply_price == 77500

    def test_numeric_cells_without_digits_parse_to_zero(self, parser: StockTableParser) -> None:
        records = parser.parse(stock_document(stock_row(stock="없음", price="")))

        assert records[0].stock_qty == 0
        assert records[0].supply_price == 0

    def test_marker_in_second_to_last_column_excludes_row(self) -> None:
        row = stock_row().replace('<td><input type="text" value="98,000"></td>', "<td>단종</td>")
        parser = StockTableParser()

        assert parser.parse(stock_document(row)) == []

    def test_keep_discontinued_flags_row(self) -> None:
        parser = StockTableParser(StockTableLayout(keep_discontinued=True))

        records = parser.parse(stock_document(stock_row(status="단종")))

        assert len(records) == 1
        assert records[0].discontinued is True

    def test_alternate_identifiers_from_data_attributes(self, parser: StockTableParser) -> None:
        row = stock_row(attrs=' data-it-id="IT-9" data-st-id="ST-3"')

        record = parser.parse(stock_document(row))[0]

        assert record.it_id == "IT-9"
        assert record.st_id == "ST-3"

    def test_preserves_document_order(self, parser: StockTableParser) -> None:
        document = stock_document(*(stock_row(unique_code=f"C{index}") for index in range(5)))

        assert [record.unique_code for record in parser.parse(document)] == [
            "C0",
            "C1",
            "C2",
            "C3",
            "C4",
        ]


# ---------------------------------------------------------------------------
# Malformed and empty input
# ---------------------------------------------------------------------------


class TestEmptyAndMalformed:
    @pytest.mark.parametrize("document", ["", "   ", None, "<p>no table here</p>"])
    def test_no_rows_returns_empty(self, parser: StockTableParser, document: str | None) -> None:
        assert parser.parse(document) == []

    def test_empty_tbody_returns_empty(self, parser: StockTableParser) -> None:
        assert parser.parse(stock_document()) == []

    def test_short_rows_are_skipped(self, parser: StockTableParser) -> None:
        document = stock_document(
            "<tr><td>1</td><td>Hankook</td><td>x</td></tr>",
            stock_row(unique_code="AB12"),
        )

        records = parser.parse(document)

        assert [record.unique_code for record in records] == ["AB12"]

    def test_falls_back_to_any_table_rows(self, parser: StockTableParser) -> None:
        document = stock_document(stock_row(unique_code="AB12"), table_class="other")

        assert len(parser.parse(document)) == 1

    def test_login_page_is_treated_as_empty(self, parser: StockTableParser) -> None:
        document = "<!DOCTYPE html><html><body><form>로그인</form></body></html>"

        assert is_login_page(document)
        assert parser.parse(document) == []

    def test_full_document_without_table_is_login_page(self) -> None:
        assert is_login_page("<!DOCTYPE html><html><body>hello</body></html>")
        assert not is_login_page(stock_document(stock_row()))


# ---------------------------------------------------------------------------
# Unique-code policy
# ---------------------------------------------------------------------------


class TestUniqueCodePolicy:
    @pytest.fixture()
    def document(self) -> str:
        return stock_document(
            stock_row(unique_code="AB12"),
            stock_row(unique_code="0", model="Zero"),
            stock_row(unique_code="", model="Blank"),
        )

    def test_require_code_excludes_zero_and_blank(self, document: str) -> None:
        parser = StockTableParser(StockTableLayout(unique_code_policy=UniqueCodePolicy.REQUIRE_CODE))

        assert [record.unique_code for record in parser.parse(document)] == ["AB12"]

    def test_allow_missing_keeps_every_live_row(self, document: str) -> None:
        parser = StockTableParser(StockTableLayout(unique_code_policy=UniqueCodePolicy.ALLOW_MISSING))

        assert [record.model for record in parser.parse(document)] == [
            "Ventus S1 evo3",
            "Zero",
            "Blank",
        ]


def test_parse_int_strips_non_digits() -> None:
    assert parse_int("₩1,234,500") == 1234500
    assert parse_int("n/a") == 0


def test_parse_int_oversized_digit_run_reads_as_zero() -> None:
    assert parse_int("9" * 5000) == 0


def test_oversized_numeric_cell_does_not_break_parse(parser: StockTableParser) -> None:
    records = parser.parse(stock_document(stock_row(stock="9" * 5000, price="1" * 4500)))

    assert len(records) == 1
    assert records[0].stock_qty == 0
    assert records[0].supply_price == 0
    assert records[0].unique_code == "AB12"


# ---------------------------------------------------------------------------
# Deduplication
# ---------------------------------------------------------------------------


class TestDedupe:
    def test_first_occurrence_wins(self) -> None:
        first = make_stock("AB12", stock_qty=5)
        duplicate = make_stock("AB12", stock_qty=99)

        assert dedupe_stock_records([first, duplicate]) == [first]

    def test_key_is_compared_after_trimming(self) -> None:
        first = make_stock("AB12", brand="Hankook")
        padded = make_stock(" AB12 ", brand=" Hankook ")

        assert dedupe_stock_records([first, padded]) == [first]

    def test_distinct_sizes_are_kept(self) -> None:
        records = [make_stock("AB12", size="245/45R18"), make_stock("AB12", size="245/40R19")]

        assert dedupe_stock_records(records) == records

    def test_is_idempotent_and_keeps_first_seen_order(self) -> None:
        records = [
            make_stock("C"),
            make_stock("A"),
            make_stock("C"),
            make_stock("B"),
            make_stock("A"),
        ]

        once = dedupe_stock_records(records)

        assert [record.unique_code for record in once] == ["C", "A", "B"]
        assert dedupe_stock_records(once) == once
