"""
Stock feed adapters.
"""

from __future__ import annotations

import logging

import requests

from tirestock.config import StockSourceSettings
from tirestock.scraping.logging_utils import log_event
from tirestock.scraping.parsing.stock_table import is_login_page
from tirestock.sources.base import (
    SourceUnavailableError,
    StockSource,
    build_http_session,
    fetch_text,
)

logger = logging.getLogger(__name__)

SIZE_QUERY_PARAM = "stx"


class HttpStockSource(StockSource):
    """
    Fetch the supplier stock-list page over HTTP.
    """

    def __init__(
        self,
        *,
        settings: StockSourceSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._session = session or build_http_session(
            max_retries=settings.max_retries,
            backoff_factor=settings.backoff_factor,
            user_agent=settings.user_agent,
        )
        self._timeout_seconds = settings.timeout_seconds
        self._url = settings.url
        self._headers = {"Accept": "text/html"}

    def fetch_stock_document(self, size_query: str) -> str:
        if not self._url:
            log_event(logger, logging.WARNING, "stock_source_not_configured")
            return ""

        params = {SIZE_QUERY_PARAM: size_query} if size_query else None
        try:
            text = fetch_text(
                self._session,
                source="stock_feed",
                url=self._url,
                timeout_seconds=self._timeout_seconds,
                params=params,
                headers=self._headers,
            )
        except SourceUnavailableError as exc:
            log_event(
                logger,
                logging.WARNING,
                "stock_source_unavailable",
                size_query=size_query,
                error=str(exc),
            )
            return ""

        if is_login_page(text):
            log_event(logger, logging.WARNING, "stock_source_login_page", size_query=size_query)
            return ""
        return text


class StaticStockSource(StockSource):
    """
    Serve a fixed document, e.g. a saved page.
    """

    def __init__(self, document: str = "") -> None:
        self._document = document

    def fetch_stock_document(self, size_query: str) -> str:
        return self._document
