"""
tirestock/config.py

Environment-driven configuration for stock reconciliation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_choice_env(name: str, default: str, allowed: set[str]) -> str:
    value = _get_str_env(name, default).lower()
    return value if value in allowed else default


@dataclass(frozen=True)
class StockSourceSettings:
    """
    Live stock feed settings.
    """

    url: str | None = None
    timeout_seconds: float = 8.0
    max_retries: int = 0
    backoff_factor: float = 0.5
    user_agent: str = "TireStockBot/1.0"


@dataclass(frozen=True)
class LedgerSourceSettings:
    """
    Price ledger (CSV export) settings.
    """

    csv_url: str | None = None
    timeout_seconds: float = 15.0
    max_retries: int = 1
    backoff_factor: float = 0.5
    cache_ttl_seconds: float = 300.0


@dataclass(frozen=True)
class ReconciliationSettings:
    """
    Pipeline policy settings.
    """

    unique_code_policy: str = "require_code"
    merge_direction: str = "ledger_driven"
    default_reorder_point: int = 4
    cart_default_qty: int = 4
    quote_title: str = "[견적안내]"
    quote_footer: str = ""


@lru_cache(maxsize=1)
def get_stock_source_settings() -> StockSourceSettings:
    """
    Return cached stock feed settings from environment variables.
    """

    return StockSourceSettings(
        url=_get_optional_str_env("TIRESTOCK_STOCK_URL"),
        timeout_seconds=max(1.0, _get_float_env("TIRESTOCK_STOCK_TIMEOUT_SECONDS", 8.0)),
        max_retries=max(0, _get_int_env("TIRESTOCK_STOCK_MAX_RETRIES", 0)),
        backoff_factor=max(0.0, _get_float_env("TIRESTOCK_STOCK_BACKOFF_FACTOR", 0.5)),
        user_agent=_get_str_env("TIRESTOCK_USER_AGENT", "TireStockBot/1.0"),
    )


@lru_cache(maxsize=1)
def get_ledger_source_settings() -> LedgerSourceSettings:
    """
    Return cached ledger source settings from environment variables.
    """

    return LedgerSourceSettings(
        csv_url=_get_optional_str_env("TIRESTOCK_LEDGER_CSV_URL"),
        timeout_seconds=max(1.0, _get_float_env("TIRESTOCK_LEDGER_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("TIRESTOCK_LEDGER_MAX_RETRIES", 1)),
        backoff_factor=max(0.0, _get_float_env("TIRESTOCK_LEDGER_BACKOFF_FACTOR", 0.5)),
        cache_ttl_seconds=max(0.0, _get_float_env("TIRESTOCK_LEDGER_CACHE_TTL_SECONDS", 300.0)),
    )


@lru_cache(maxsize=1)
def get_reconciliation_settings() -> ReconciliationSettings:
    """
    Return cached pipeline policy settings from environment variables.
    """

    return ReconciliationSettings(
        unique_code_policy=_get_choice_env(
            "TIRESTOCK_UNIQUE_CODE_POLICY",
            "require_code",
            {"require_code", "allow_missing"},
        ),
        merge_direction=_get_choice_env(
            "TIRESTOCK_MERGE_DIRECTION",
            "ledger_driven",
            {"ledger_driven", "stock_driven"},
        ),
        default_reorder_point=max(0, _get_int_env("TIRESTOCK_DEFAULT_REORDER_POINT", 4)),
        cart_default_qty=max(1, _get_int_env("TIRESTOCK_CART_DEFAULT_QTY", 4)),
        quote_title=_get_str_env("TIRESTOCK_QUOTE_TITLE", "[견적안내]"),
        quote_footer=_get_str_env("TIRESTOCK_QUOTE_FOOTER", ""),
    )
