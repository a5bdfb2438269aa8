"""
Service layer exports.
"""

from tirestock.services.cart import Cart, CartLine, Quote, QuoteLine, build_quote, render_quote_text
from tirestock.services.inventory import InventoryStore
from tirestock.services.product_store import ProductNotFoundError, ProductStore, parse_edit_number
from tirestock.services.reconciliation_service import (
    ReconciliationService,
    build_reconciliation_service,
    get_reconciliation_service,
)

__all__ = [
    "Cart",
    "CartLine",
    "InventoryStore",
    "ProductNotFoundError",
    "ProductStore",
    "Quote",
    "QuoteLine",
    "ReconciliationService",
    "build_quote",
    "build_reconciliation_service",
    "get_reconciliation_service",
    "parse_edit_number",
    "render_quote_text",
]
