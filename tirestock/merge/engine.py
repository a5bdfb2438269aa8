"""
tirestock/merge/engine.py

Field-priority merge of matched ledger/stock pairs into MergedProduct rows.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tirestock.domain.records import MergedProduct, build_product_id
from tirestock.matching.matcher import MatchPair
from tirestock.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)


class MergeEngine:
    """
    Apply per-field source priority and the factory-price gate.
    """

    def merge(self, pairs: Sequence[MatchPair]) -> list[MergedProduct]:
        products: list[MergedProduct] = []
        seen_ids: dict[str, int] = {}
        dropped = 0

        for pair in pairs:
            ledger = pair.ledger
            stock = pair.stock
            if ledger is None or ledger.factory_price <= 0:
                dropped += 1
                continue

            brand = ledger.brand or (stock.brand if stock else "")
            model = ledger.model or (stock.model if stock else "")
            size = stock.size if stock else ledger.size

            product_id = build_product_id(ledger.code, ledger.brand, ledger.model, ledger.size)
            occurrence = seen_ids.get(product_id, 0)
            seen_ids[product_id] = occurrence + 1
            if occurrence:
                product_id = f"{product_id}-{occurrence}"

            products.append(
                MergedProduct(
                    product_id=product_id,
                    brand=brand,
                    model=model,
                    size=size,
                    part_no=ledger.code,
                    factory_price=ledger.factory_price,
                    supply_price=stock.supply_price if stock else 0,
                    total_stock=stock.stock_qty if stock else 0,
                    discount_rate=0,
                    dot_list=tuple(ledger.dot_list or ()),
                    internal_code=stock.part_no if stock else ledger.code,
                    type=ledger.type,
                    season=ledger.season,
                )
            )

        log_event(
            logger,
            logging.INFO,
            "products_merged",
            products=len(products),
            dropped_without_price=dropped,
        )
        return products
