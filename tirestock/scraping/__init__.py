"""
Stock feed scraping: table parsing and duplicate removal.
"""

from tirestock.scraping.dedup import dedupe_stock_records
from tirestock.scraping.parsing import StockTableLayout, StockTableParser, UniqueCodePolicy

__all__ = ["StockTableLayout", "StockTableParser", "UniqueCodePolicy", "dedupe_stock_records"]
