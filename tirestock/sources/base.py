"""
tirestock/sources/base.py

Source abstractions and the shared HTTP session for the stock feed and ledger.

Retries live in the transport: every session mounts an ``HTTPAdapter`` whose
urllib3 ``Retry`` policy re-issues idempotent GETs on connection errors and
retryable status codes. Sources issue a single ``get`` and translate whatever
is left into ``SourceUnavailableError``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from tirestock.domain.records import LedgerRecord
from tirestock.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
BACKOFF_MAX_SECONDS = 10.0


class SourceUnavailableError(RuntimeError):
    """
    Raised when a source cannot be fetched; callers substitute empty data.
    """

    def __init__(self, source: str, url: str, reason: str) -> None:
        self.source = source
        self.url = url
        self.reason = reason
        super().__init__(f"{source} unavailable url={url}: {reason}")


class StockSource(ABC):
    """
    Provider of the raw stock-list document for a size query.
    """

    @abstractmethod
    def fetch_stock_document(self, size_query: str) -> str:
        """
        Return the raw document, or an empty string on any failure.
        """


class LedgerSource(ABC):
    """
    Provider of priced ledger records.
    """

    @abstractmethod
    def fetch_ledger_records(self) -> tuple[LedgerRecord, ...]:
        """
        Return ledger records, or an empty tuple on any failure.
        """


def build_retry_policy(*, max_retries: int, backoff_factor: float) -> Retry:
    return Retry(
        total=max_retries,
        connect=max_retries,
        read=max_retries,
        status=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=sorted(RETRYABLE_STATUS_CODES),
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
        backoff_max=BACKOFF_MAX_SECONDS,
    )


def build_http_session(
    *,
    max_retries: int,
    backoff_factor: float,
    user_agent: str | None = None,
) -> requests.Session:
    """
    Session with the retry policy mounted for both schemes.
    """

    session = requests.Session()
    adapter = HTTPAdapter(
        max_retries=build_retry_policy(max_retries=max_retries, backoff_factor=backoff_factor)
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    if user_agent:
        session.headers["User-Agent"] = user_agent
    return session


def fetch_text(
    session: requests.Session,
    *,
    source: str,
    url: str,
    timeout_seconds: float,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> str:
    """
    GET ``url`` and return the decoded body.

    Servers that omit a charset get the detected encoding instead of
    ISO-8859-1. Any transport failure, exhausted retry, or non-2xx status
    surfaces as ``SourceUnavailableError``.
    """

    try:
        response = session.get(url, params=params, headers=headers, timeout=timeout_seconds)
        response.raise_for_status()
    except requests.RequestException as exc:
        status_code = exc.response.status_code if exc.response is not None else None
        log_event(
            logger,
            logging.WARNING,
            "source_request_failed",
            source=source,
            url=url,
            status_code=status_code,
            error=str(exc),
        )
        raise SourceUnavailableError(source, url, str(exc)) from exc

    if not response.encoding or response.encoding.lower() == "iso-8859-1":
        response.encoding = response.apparent_encoding
    return response.text
