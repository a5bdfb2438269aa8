"""
tirestock/domain/inventory.py

Inventory and order-placement domain models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StockLocation(str, Enum):
    STORE = "store"
    WAREHOUSE = "warehouse"


class OrderPlacementError(Exception):
    """
    Base class for rejected order requests.
    """


class RecordNotFoundError(OrderPlacementError):
    """
    Raised when no inventory record exists for the product and location.
    """

    def __init__(self, product_id: str, location: str) -> None:
        self.product_id = product_id
        self.location = location
        super().__init__(f"Inventory record not found product_id={product_id} location={location}")


class InsufficientStockError(OrderPlacementError):
    """
    Raised when the requested quantity exceeds the available stock.
    """

    def __init__(self, product_id: str, location: str, requested: int, available: int) -> None:
        self.product_id = product_id
        self.location = location
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock product_id={product_id} location={location} "
            f"requested={requested} available={available}"
        )


@dataclass
class InventoryRecord:
    """
    Mutable on-hand quantity for one product at one location.
    """

    product_id: str
    location: StockLocation
    stock_qty: int
    reorder_point: int = 0


@dataclass(frozen=True)
class LowStockAlert:
    """
    Advisory signal raised when stock falls to or below the reorder point.
    """

    product_id: str
    location: StockLocation
    remaining: int
    reorder_point: int


@dataclass(frozen=True)
class OrderResult:
    product_id: str
    location: StockLocation
    quantity: int
    remaining: int
    alert: LowStockAlert | None = None
