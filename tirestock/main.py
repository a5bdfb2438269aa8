from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tirestock import __version__
from tirestock.config import (
    get_ledger_source_settings,
    get_reconciliation_settings,
    get_stock_source_settings,
    load_env_files,
)


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Log the effective source configuration on boot."""
    log = logging.getLogger(__name__)
    stock_settings = get_stock_source_settings()
    ledger_settings = get_ledger_source_settings()
    settings = get_reconciliation_settings()
    if not stock_settings.url:
        log.warning("TIRESTOCK_STOCK_URL is not set; stock fetches will return no rows")
    if not ledger_settings.csv_url:
        log.warning("TIRESTOCK_LEDGER_CSV_URL is not set; ledger fetches will return no rows")
    log.info(
        "Reconciliation policy unique_code_policy=%s merge_direction=%s",
        settings.unique_code_policy,
        settings.merge_direction,
    )
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    load_env_files()
    _configure_logging()

    application = FastAPI(
        title="TireStock Reconciliation API",
        version=__version__,
        lifespan=_lifespan,
    )

    from tirestock.api.routers import products_router

    application.include_router(products_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    return application


app = create_app()
