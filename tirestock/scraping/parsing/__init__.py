"""
Parsing layer exports.
"""

from tirestock.scraping.parsing.stock_table import (
    StockTableLayout,
    StockTableParser,
    UniqueCodePolicy,
    is_login_page,
)

__all__ = ["StockTableLayout", "StockTableParser", "UniqueCodePolicy", "is_login_page"]
