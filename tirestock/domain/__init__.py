"""
Domain models for stock reconciliation.
"""

from tirestock.domain.inventory import (
    InsufficientStockError,
    InventoryRecord,
    LowStockAlert,
    OrderPlacementError,
    OrderResult,
    RecordNotFoundError,
    StockLocation,
)
from tirestock.domain.pricing import clamp_discount_rate, discounted_price
from tirestock.domain.records import LedgerRecord, MergedProduct, StockRecord, build_product_id

__all__ = [
    "InsufficientStockError",
    "InventoryRecord",
    "LedgerRecord",
    "LowStockAlert",
    "MergedProduct",
    "OrderPlacementError",
    "OrderResult",
    "RecordNotFoundError",
    "StockLocation",
    "StockRecord",
    "build_product_id",
    "clamp_discount_rate",
    "discounted_price",
]
