"""
tirestock/services/product_store.py

Session-scoped store of merged products keyed by product id, with local
pricing overrides and id-based selection.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import replace

from tirestock.domain.pricing import clamp_discount_rate
from tirestock.domain.records import MergedProduct

_EDIT_NOISE = re.compile(r"[^0-9.\-]+")


class ProductNotFoundError(LookupError):
    """
    Raised when a product id is not present in the current result set.
    """

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product not found product_id={product_id}")


def parse_edit_number(value: object) -> float:
    """
    Clean a user-entered number; blank input reads as 0.

    Non-blank text with no digit at all (``"abc"``, ``"-"``) is rejected
    rather than read as 0.
    """

    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError("Boolean is not a valid number.")
    if isinstance(value, (int, float)):
        cleaned: object = value
    else:
        text = str(value).strip()
        if not text:
            return 0.0
        if not any(char.isdigit() for char in text):
            raise ValueError(f"Invalid number '{value}'.")
        cleaned = _EDIT_NOISE.sub("", text)
    try:
        number = float(cleaned)
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Invalid number '{value}'.") from exc
    if not math.isfinite(number):
        raise ValueError(f"Invalid number '{value}'.")
    return number


class ProductStore:
    """
    Holds the products of the latest reconcile pass in merge order.
    """

    def __init__(self, products: Iterable[MergedProduct] = ()) -> None:
        self._products: dict[str, MergedProduct] = {}
        self._selected: set[str] = set()
        self.replace(products)

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    def replace(self, products: Iterable[MergedProduct]) -> None:
        """
        Swap in a fresh result set; selection does not survive a new search.
        """

        self._products = {product.product_id: product for product in products}
        self._selected = set()

    def list(self) -> list[MergedProduct]:
        return list(self._products.values())

    def as_mapping(self) -> Mapping[str, MergedProduct]:
        return dict(self._products)

    def get(self, product_id: str) -> MergedProduct:
        try:
            return self._products[product_id]
        except KeyError as exc:
            raise ProductNotFoundError(product_id) from exc

    def update_pricing(
        self,
        product_id: str,
        *,
        discount_rate: object = None,
        factory_price: object = None,
    ) -> MergedProduct:
        """
        Apply a local discount-rate and/or factory-price override.

        The discount rate is clamped to [0, 100]; a factory price must stay
        above zero.
        """

        product = self.get(product_id)
        changes: dict[str, object] = {}
        if discount_rate is not None:
            changes["discount_rate"] = clamp_discount_rate(parse_edit_number(discount_rate))
        if factory_price is not None:
            price = int(parse_edit_number(factory_price))
            if price <= 0:
                raise ValueError("Factory price must be greater than zero.")
            changes["factory_price"] = price
        if not changes:
            return product

        updated = replace(product, **changes)
        self._products[product_id] = updated
        return updated

    def set_stock(self, product_id: str, total_stock: int) -> MergedProduct:
        updated = replace(self.get(product_id), total_stock=total_stock)
        self._products[product_id] = updated
        return updated

    def toggle_selection(self, product_id: str) -> bool:
        """
        Flip selection of one product; returns the new selected state.
        """

        self.get(product_id)
        if product_id in self._selected:
            self._selected.discard(product_id)
            return False
        self._selected.add(product_id)
        return True

    def toggle_select_all(self, visible_ids: Iterable[str]) -> frozenset[str]:
        """
        Select every visible product, or clear when all of them are already selected.
        """

        visible = {product_id for product_id in visible_ids if product_id in self._products}
        if visible and self._selected == visible:
            self._selected = set()
        else:
            self._selected = visible
        return frozenset(self._selected)

    def clear_selection(self) -> None:
        self._selected = set()

    def selected_ids(self) -> frozenset[str]:
        return frozenset(self._selected)

    def selected_products(self) -> list[MergedProduct]:
        return [product for product in self._products.values() if product.product_id in self._selected]
