"""
API schema exports.
"""

from tirestock.schemas.products import (
    CartAddRequest,
    OrderRequest,
    OrderResponse,
    PricingUpdateRequest,
    ProductResponse,
    QuoteResponse,
)

__all__ = [
    "CartAddRequest",
    "OrderRequest",
    "OrderResponse",
    "PricingUpdateRequest",
    "ProductResponse",
    "QuoteResponse",
]
