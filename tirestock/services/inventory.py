"""
tirestock/services/inventory.py

Per-location stock bookkeeping and order placement.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from tirestock.domain.inventory import (
    InsufficientStockError,
    InventoryRecord,
    LowStockAlert,
    OrderResult,
    RecordNotFoundError,
    StockLocation,
)
from tirestock.domain.records import MergedProduct
from tirestock.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)


class InventoryStore:
    """
    Map of (product id, location) to inventory records.
    """

    def __init__(self, *, default_reorder_point: int = 0) -> None:
        self._default_reorder_point = default_reorder_point
        self._records: dict[tuple[str, StockLocation], InventoryRecord] = {}

    def load_from_products(
        self,
        products: Iterable[MergedProduct],
        *,
        reorder_point: int | None = None,
    ) -> None:
        """
        Rebuild store-location records from a merged result set.
        """

        point = self._default_reorder_point if reorder_point is None else reorder_point
        self._records = {}
        for product in products:
            self.upsert(
                InventoryRecord(
                    product_id=product.product_id,
                    location=StockLocation.STORE,
                    stock_qty=product.total_stock,
                    reorder_point=point,
                )
            )

    def upsert(self, record: InventoryRecord) -> None:
        self._records[(record.product_id, StockLocation(record.location))] = record

    def get(self, product_id: str, location: StockLocation | str) -> InventoryRecord | None:
        try:
            resolved = StockLocation(location)
        except ValueError:
            return None
        return self._records.get((product_id, resolved))

    def total_for(self, product_id: str) -> int:
        return sum(
            record.stock_qty
            for (record_product_id, _), record in self._records.items()
            if record_product_id == product_id
        )

    def apply_order(
        self,
        product_id: str,
        quantity: int,
        source: StockLocation | str = StockLocation.STORE,
    ) -> OrderResult:
        """
        Decrement stock for an order.

        Raises RecordNotFoundError or InsufficientStockError without touching
        any record. A low-stock alert is advisory and never blocks the order.
        """

        if quantity <= 0:
            raise ValueError("Order quantity must be positive.")

        record = self.get(product_id, source)
        if record is None:
            raise RecordNotFoundError(product_id, str(getattr(source, "value", source)))
        if record.stock_qty < quantity:
            raise InsufficientStockError(
                product_id,
                record.location.value,
                requested=quantity,
                available=record.stock_qty,
            )

        record.stock_qty -= quantity
        alert = None
        if record.stock_qty <= record.reorder_point:
            alert = LowStockAlert(
                product_id=product_id,
                location=record.location,
                remaining=record.stock_qty,
                reorder_point=record.reorder_point,
            )
            log_event(
                logger,
                logging.WARNING,
                "low_stock_alert",
                product_id=product_id,
                location=record.location.value,
                remaining=record.stock_qty,
                reorder_point=record.reorder_point,
            )

        log_event(
            logger,
            logging.INFO,
            "order_applied",
            product_id=product_id,
            location=record.location.value,
            quantity=quantity,
            remaining=record.stock_qty,
        )
        return OrderResult(
            product_id=product_id,
            location=record.location,
            quantity=quantity,
            remaining=record.stock_qty,
            alert=alert,
        )
