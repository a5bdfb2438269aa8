"""
Normalization layer for ledger rows and cross-source comparison keys.
"""

from tirestock.normalization.formatters import (
    ALL_OPTION,
    BRAND_DISPLAY_NAMES,
    BRAND_FILTER_GROUPS,
    BRAND_FILTER_OPTIONS,
    brand_display_name,
    brand_filter_label,
    brand_group,
    matches_brand_filter,
    normalize_brand,
    normalize_size,
)
from tirestock.normalization.ledger import LedgerNormalizer, parse_dot_list, parse_price

__all__ = [
    "ALL_OPTION",
    "BRAND_DISPLAY_NAMES",
    "BRAND_FILTER_GROUPS",
    "BRAND_FILTER_OPTIONS",
    "LedgerNormalizer",
    "brand_display_name",
    "brand_filter_label",
    "brand_group",
    "matches_brand_filter",
    "normalize_brand",
    "normalize_size",
    "parse_dot_list",
    "parse_price",
]
