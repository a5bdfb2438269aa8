"""
tirestock/search/facade.py

Filtering and ordering of merged products for the presentation layer.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from tirestock.domain.records import MergedProduct
from tirestock.normalization.formatters import ALL_OPTION, brand_display_name, matches_brand_filter
from tirestock.scraping.parsing.stock_table import DISCONTINUED_MARKER

SortDirection = Literal["asc", "desc"]

NUMERIC_SORT_KEYS = frozenset(
    {"factory_price", "discounted_price", "supply_price", "total_stock", "discount_rate"}
)
TEXT_SORT_KEYS = frozenset({"brand", "model", "size", "part_no"})
SORT_KEYS = NUMERIC_SORT_KEYS | TEXT_SORT_KEYS


@dataclass(frozen=True)
class SearchCriteria:
    """
    User filters; empty or ``All`` values disable a filter.
    """

    query: str = ""
    brand: str = ALL_OPTION
    type: str = ALL_OPTION
    season: str = ALL_OPTION


@dataclass(frozen=True)
class SortState:
    key: str = "total_stock"
    direction: SortDirection = "desc"

    def __post_init__(self) -> None:
        if self.key not in SORT_KEYS:
            raise ValueError(f"Unsupported sort key '{self.key}'. Allowed: {sorted(SORT_KEYS)}.")
        if self.direction not in ("asc", "desc"):
            raise ValueError(f"Unsupported sort direction '{self.direction}'.")

    def toggle(self, key: str) -> "SortState":
        """
        Select ``key``; re-selecting the current ascending key flips to descending.
        """

        if self.key == key and self.direction == "asc":
            return SortState(key=key, direction="desc")
        return SortState(key=key, direction="asc")


def is_discontinued(product: MergedProduct) -> bool:
    return DISCONTINUED_MARKER in (product.brand or "") or DISCONTINUED_MARKER in (product.model or "")


def _matches_exact(value: str, wanted: str) -> bool:
    return not wanted or wanted == ALL_OPTION or value == wanted


def matches_criteria(product: MergedProduct, criteria: SearchCriteria) -> bool:
    query = (criteria.query or "").strip().lower()
    matches_query = (
        not query
        or query in (product.size or "").lower()
        or query in (product.model or "").lower()
        or query in (product.brand or "").lower()
    )
    return (
        matches_query
        and matches_brand_filter(product.brand, criteria.brand)
        and _matches_exact(product.type, criteria.type)
        and _matches_exact(product.season, criteria.season)
    )


def filter_products(
    products: Iterable[MergedProduct],
    criteria: SearchCriteria | None = None,
) -> list[MergedProduct]:
    criteria = criteria or SearchCriteria()
    return [
        product
        for product in products
        if not is_discontinued(product) and matches_criteria(product, criteria)
    ]


def _sort_value(product: MergedProduct, key: str) -> Any:
    if key == "brand":
        return brand_display_name(product.brand)
    value = getattr(product, key, None)
    if key in NUMERIC_SORT_KEYS:
        try:
            return float(value or 0)
        except (TypeError, ValueError):
            return 0.0
    return "" if value is None else str(value)


def sort_products(products: Sequence[MergedProduct], sort: SortState) -> list[MergedProduct]:
    """
    Stable sort by one key; ties keep their incoming order in both directions.
    """

    return sorted(
        products,
        key=lambda product: _sort_value(product, sort.key),
        reverse=sort.direction == "desc",
    )


def recommended_order(products: Sequence[MergedProduct]) -> list[MergedProduct]:
    """
    Default ordering: most stock first, then cheapest.
    """

    return sorted(
        products,
        key=lambda product: (-(product.total_stock or 0), product.discounted_price),
    )


def search(
    products: Iterable[MergedProduct],
    criteria: SearchCriteria | None = None,
    sort: SortState | None = None,
) -> list[MergedProduct]:
    filtered = filter_products(products, criteria)
    if sort is None:
        return recommended_order(filtered)
    return sort_products(filtered, sort)
