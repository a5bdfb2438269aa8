"""
External stock and ledger sources.
"""

from tirestock.sources.base import (
    LedgerSource,
    SourceUnavailableError,
    StockSource,
    build_http_session,
    fetch_text,
)
from tirestock.sources.ledger import (
    CachedLedgerSource,
    CsvLedgerSource,
    StaticLedgerSource,
    read_csv_rows,
)
from tirestock.sources.stock import HttpStockSource, StaticStockSource

__all__ = [
    "CachedLedgerSource",
    "CsvLedgerSource",
    "HttpStockSource",
    "LedgerSource",
    "SourceUnavailableError",
    "StaticLedgerSource",
    "StaticStockSource",
    "StockSource",
    "build_http_session",
    "fetch_text",
    "read_csv_rows",
]
