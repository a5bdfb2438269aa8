"""
tirestock/services/reconciliation_service.py

Service orchestration for one reconcile cycle:

    1. fetch the stock document and the ledger concurrently
    2. parse + dedupe stock rows
    3. narrow the ledger by the size query and the price gate
    4. match and merge into MergedProduct rows

A source that fails or runs out of time contributes an empty result; the
merge step always runs once both fetches have settled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from functools import lru_cache

from tirestock.config import (
    get_ledger_source_settings,
    get_reconciliation_settings,
    get_stock_source_settings,
)
from tirestock.domain.inventory import OrderResult, StockLocation
from tirestock.domain.records import LedgerRecord, MergedProduct
from tirestock.matching.matcher import CrossSourceMatcher, MergeDirection, filter_ledger_by_size
from tirestock.merge.engine import MergeEngine
from tirestock.scraping.dedup import dedupe_stock_records
from tirestock.scraping.logging_utils import log_event
from tirestock.scraping.parsing.stock_table import StockTableLayout, StockTableParser, UniqueCodePolicy
from tirestock.search.facade import SearchCriteria, SortState, search
from tirestock.services.cart import Cart, Quote, build_quote
from tirestock.services.inventory import InventoryStore
from tirestock.services.product_store import ProductStore
from tirestock.sources.base import BACKOFF_MAX_SECONDS, LedgerSource, StockSource
from tirestock.sources.ledger import CachedLedgerSource, CsvLedgerSource
from tirestock.sources.stock import HttpStockSource

logger = logging.getLogger(__name__)


def fetch_budget_seconds(
    *,
    timeout_seconds: float,
    max_retries: int,
    backoff_factor: float,
) -> float:
    """
    Upper bound for one source fetch: every attempt times out and every retry
    sleeps the full urllib3 backoff (capped at ``BACKOFF_MAX_SECONDS``).
    """

    attempts = max_retries + 1
    backoff = sum(
        min(BACKOFF_MAX_SECONDS, backoff_factor * (2**attempt)) for attempt in range(max_retries)
    )
    return timeout_seconds * attempts + backoff


class ReconciliationService:
    """
    Runs the reconcile pipeline and owns the session product, inventory and cart state.
    """

    def __init__(
        self,
        *,
        stock_source: StockSource,
        ledger_source: LedgerSource,
        parser: StockTableParser | None = None,
        matcher: CrossSourceMatcher | None = None,
        merge_engine: MergeEngine | None = None,
        product_store: ProductStore | None = None,
        inventory_store: InventoryStore | None = None,
        cart: Cart | None = None,
        stock_timeout_seconds: float | None = None,
        ledger_timeout_seconds: float | None = None,
    ) -> None:
        self._stock_source = stock_source
        self._ledger_source = ledger_source
        self._parser = parser or StockTableParser()
        self._matcher = matcher or CrossSourceMatcher()
        self._merge_engine = merge_engine or MergeEngine()
        self._stock_timeout_seconds = stock_timeout_seconds
        self._ledger_timeout_seconds = ledger_timeout_seconds
        self.products = product_store or ProductStore()
        self.inventory = inventory_store or InventoryStore()
        self.cart = cart or Cart()

    def reconcile(
        self,
        size_query: str,
        stock_document: str,
        ledger_records: Sequence[LedgerRecord],
    ) -> list[MergedProduct]:
        """
        Pure pipeline over already-fetched inputs; never raises for data quality.
        """

        stock = dedupe_stock_records(self._parser.parse(stock_document))
        ledger = [
            record
            for record in filter_ledger_by_size(ledger_records, size_query)
            if record.factory_price > 0
        ]
        pairs = self._matcher.match(ledger, stock)
        products = self._merge_engine.merge(pairs)
        log_event(
            logger,
            logging.INFO,
            "reconcile_completed",
            size_query=size_query,
            stock_records=len(stock),
            ledger_candidates=len(ledger),
            products=len(products),
        )
        return products

    async def load(self, size_query: str) -> list[MergedProduct]:
        """
        Fetch both sources concurrently, reconcile, and replace the session state.
        """

        stock_document, ledger_records = await asyncio.gather(
            self._fetch_stock(size_query),
            self._fetch_ledger(),
        )
        products = self.reconcile(size_query, stock_document, ledger_records)
        self.products.replace(products)
        self.inventory.load_from_products(products)
        return products

    def search(
        self,
        criteria: SearchCriteria | None = None,
        sort: SortState | None = None,
    ) -> list[MergedProduct]:
        return search(self.products.list(), criteria, sort)

    def apply_order(
        self,
        product_id: str,
        quantity: int,
        source: StockLocation | str = StockLocation.STORE,
    ) -> OrderResult:
        result = self.inventory.apply_order(product_id, quantity, source)
        if product_id in self.products:
            self.products.set_stock(product_id, self.inventory.total_for(product_id))
        return result

    def update_pricing(
        self,
        product_id: str,
        *,
        discount_rate: object = None,
        factory_price: object = None,
    ) -> MergedProduct:
        return self.products.update_pricing(
            product_id,
            discount_rate=discount_rate,
            factory_price=factory_price,
        )

    def add_selection_to_cart(self) -> int:
        selected = [product.product_id for product in self.products.selected_products()]
        self.cart.add(selected)
        self.products.clear_selection()
        return len(selected)

    def quote(self) -> Quote:
        return build_quote(self.cart, self.products.as_mapping())

    async def _fetch_stock(self, size_query: str) -> str:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._stock_source.fetch_stock_document, size_query),
                timeout=self._stock_timeout_seconds,
            )
        except Exception as exc:
            log_event(
                logger,
                logging.WARNING,
                "source_unavailable",
                source="stock_feed",
                size_query=size_query,
                error=repr(exc),
            )
            return ""

    async def _fetch_ledger(self) -> tuple[LedgerRecord, ...]:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._ledger_source.fetch_ledger_records),
                timeout=self._ledger_timeout_seconds,
            )
        except Exception as exc:
            log_event(
                logger,
                logging.WARNING,
                "source_unavailable",
                source="ledger",
                error=repr(exc),
            )
            return ()


def build_reconciliation_service(
    *,
    stock_source: StockSource | None = None,
    ledger_source: LedgerSource | None = None,
) -> ReconciliationService:
    """
    Wire a service from environment settings; explicit sources replace the HTTP ones.
    """

    stock_settings = get_stock_source_settings()
    ledger_settings = get_ledger_source_settings()
    settings = get_reconciliation_settings()

    layout = StockTableLayout(unique_code_policy=UniqueCodePolicy(settings.unique_code_policy))
    if ledger_source is None:
        ledger_source = CachedLedgerSource(
            CsvLedgerSource(settings=ledger_settings),
            ttl_seconds=ledger_settings.cache_ttl_seconds,
        )
    return ReconciliationService(
        stock_source=stock_source or HttpStockSource(settings=stock_settings),
        ledger_source=ledger_source,
        parser=StockTableParser(layout),
        matcher=CrossSourceMatcher(MergeDirection(settings.merge_direction)),
        inventory_store=InventoryStore(default_reorder_point=settings.default_reorder_point),
        cart=Cart(default_quantity=settings.cart_default_qty),
        stock_timeout_seconds=fetch_budget_seconds(
            timeout_seconds=stock_settings.timeout_seconds,
            max_retries=stock_settings.max_retries,
            backoff_factor=stock_settings.backoff_factor,
        ),
        ledger_timeout_seconds=fetch_budget_seconds(
            timeout_seconds=ledger_settings.timeout_seconds,
            max_retries=ledger_settings.max_retries,
            backoff_factor=ledger_settings.backoff_factor,
        ),
    )


@lru_cache(maxsize=1)
def get_reconciliation_service() -> ReconciliationService:
    """
    Build and cache the session reconciliation service.
    """

    return build_reconciliation_service()
