"""
Search and sort exports.
"""

from tirestock.search.facade import (
    SORT_KEYS,
    SearchCriteria,
    SortState,
    filter_products,
    recommended_order,
    search,
    sort_products,
)

__all__ = [
    "SORT_KEYS",
    "SearchCriteria",
    "SortState",
    "filter_products",
    "recommended_order",
    "search",
    "sort_products",
]
