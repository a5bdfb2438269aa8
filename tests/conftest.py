from __future__ import annotations

import pytest

from factories import stock_document, stock_row


@pytest.fixture()
def sample_document() -> str:
    """Two live rows and one discontinued row."""
    return stock_document(
        stock_row(unique_code="AB12", stock="12개", price="98,000"),
        stock_row(
            brand="Michelin",
            model="Pilot Sport 4",
            part_no="2200311",
            unique_code="MX77",
            stock="3",
            price="141,000",
        ),
        stock_row(
            brand="Kumho",
            model="Ecsta PS71",
            unique_code="KU01",
            status="단종",
        ),
    )
