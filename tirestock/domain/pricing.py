"""
tirestock/domain/pricing.py

Derived pricing values shared by merged products and local edits.
"""

from __future__ import annotations

import math
from decimal import Decimal

MIN_DISCOUNT_RATE = 0.0
MAX_DISCOUNT_RATE = 100.0


def discounted_price(factory_price: float, discount_rate: float) -> int:
    """
    ``floor(factory_price * (1 - discount_rate / 100))``.

    No clamping happens here: out-of-range rates give negative or inflated
    prices. Edits are clamped with ``clamp_discount_rate`` before they reach
    a product.
    """

    price = Decimal(str(factory_price or 0))
    rate = Decimal(str(discount_rate or 0))
    return math.floor(price * (100 - rate) / 100)


def clamp_discount_rate(value: float) -> float:
    return min(MAX_DISCOUNT_RATE, max(MIN_DISCOUNT_RATE, value))
