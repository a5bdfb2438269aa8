"""
tirestock/normalization/formatters.py

Size and brand normalizers shared by every component that compares values
across the stock feed and the ledger.
"""

from __future__ import annotations

import re

_NON_DIGIT = re.compile(r"\D+")
_NON_WORD = re.compile(r"[\W_]+", flags=re.UNICODE)
_BRAND_SUFFIXES = ("tires", "tire", "타이어")

ALL_OPTION = "All"

# canonical key -> display name
BRAND_DISPLAY_NAMES: dict[str, str] = {
    "hankook": "한국",
    "laufenn": "라우펜",
    "michelin": "미쉐린",
    "dunlop": "던롭",
    "yokohama": "요코하마",
    "goodyear": "굿이어",
    "kumho": "금호",
    "pirelli": "피렐리",
    "continental": "콘티넨탈",
    "nexen": "넥센",
    "bridgestone": "브리지스톤",
    "toyo": "토요",
}

_DISPLAY_TO_KEY: dict[str, str] = {name: key for key, name in BRAND_DISPLAY_NAMES.items()}

# filter option key -> canonical keys shown under that option
BRAND_FILTER_GROUPS: dict[str, tuple[str, ...]] = {
    "hankook": ("hankook", "laufenn"),
}

BRAND_FILTER_OPTIONS: tuple[str, ...] = (
    ALL_OPTION,
    "Hankook",
    "Michelin",
    "Dunlop",
    "Yokohama",
    "Goodyear",
    "Kumho",
    "Pirelli",
    "Continental",
)


def normalize_size(value: str | None) -> str:
    """
    Collapse a tire size to its bare digits, e.g. ``245/45R18 97W`` -> ``245451897``.
    """

    if not value:
        return ""
    return _NON_DIGIT.sub("", str(value))


def normalize_brand(value: str | None) -> str:
    """
    Return the canonical lowercase brand key.

    Known display names (Korean) and decorated English names such as
    ``Hankook Tire`` fold onto the same key; unknown brands keep their
    lowercased word characters.
    """

    if not value:
        return ""
    compact = _NON_WORD.sub("", str(value).lower())
    if not compact:
        return ""

    stripped = True
    while stripped:
        stripped = False
        for suffix in _BRAND_SUFFIXES:
            if compact.endswith(suffix) and len(compact) > len(suffix):
                compact = compact[: -len(suffix)]
                stripped = True
                break

    if compact in BRAND_DISPLAY_NAMES:
        return compact
    if compact in _DISPLAY_TO_KEY:
        return _DISPLAY_TO_KEY[compact]

    for key in BRAND_DISPLAY_NAMES:
        if compact.startswith(key):
            return key
    for name, key in _DISPLAY_TO_KEY.items():
        if compact.startswith(name):
            return key
    return compact


def brand_display_name(value: str | None) -> str:
    """
    Map a raw brand to its display name, leaving unknown brands untouched.
    """

    if not value:
        return ""
    return BRAND_DISPLAY_NAMES.get(normalize_brand(value), str(value).strip())


def brand_group(filter_brand: str | None) -> frozenset[str]:
    """
    Canonical brand keys covered by one brand filter option.
    """

    key = normalize_brand(filter_brand)
    if not key:
        return frozenset()
    return frozenset(BRAND_FILTER_GROUPS.get(key, (key,)))


def matches_brand_filter(brand: str | None, filter_brand: str | None) -> bool:
    if not filter_brand or filter_brand == ALL_OPTION:
        return True
    return normalize_brand(brand) in brand_group(filter_brand)


def brand_filter_label(option: str) -> str:
    """
    Human label for a brand filter option (group options join member names).
    """

    if option == ALL_OPTION:
        return option
    members = brand_group(option)
    if len(members) > 1:
        key = normalize_brand(option)
        ordered = BRAND_FILTER_GROUPS[key]
        return "+".join(BRAND_DISPLAY_NAMES.get(member, member) for member in ordered)
    return brand_display_name(option)
