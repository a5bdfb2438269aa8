"""
Run one reconcile cycle from the CLI and print merged products as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

from tirestock.normalization.ledger import LedgerNormalizer
from tirestock.search.facade import SearchCriteria
from tirestock.services.reconciliation_service import (
    ReconciliationService,
    build_reconciliation_service,
)
from tirestock.sources.ledger import StaticLedgerSource, read_csv_rows
from tirestock.sources.stock import StaticStockSource


def _build_service(args: argparse.Namespace) -> ReconciliationService:
    stock_source = None
    ledger_source = None
    if args.stock_file:
        stock_source = StaticStockSource(Path(args.stock_file).read_text(encoding="utf-8"))
    if args.ledger_file:
        rows = read_csv_rows(Path(args.ledger_file).read_text(encoding="utf-8-sig"))
        ledger_source = StaticLedgerSource(LedgerNormalizer().normalize_rows(rows))
    return build_reconciliation_service(stock_source=stock_source, ledger_source=ledger_source)


def main() -> int:
    parser = argparse.ArgumentParser(description="Reconcile live stock with the price ledger.")
    parser.add_argument("--size", required=True, help="Tire size query, e.g. 245/45R18.")
    parser.add_argument("--query", default="", help="Optional free-text filter.")
    parser.add_argument("--brand", default="All", help="Optional brand filter option.")
    parser.add_argument("--stock-file", default=None, help="Read the stock document from a file.")
    parser.add_argument("--ledger-file", default=None, help="Read the ledger from a CSV file.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    service = _build_service(args)
    asyncio.run(service.load(args.size))
    products = service.search(SearchCriteria(query=args.query, brand=args.brand))

    payload = [
        {
            "product_id": product.product_id,
            "brand": product.brand,
            "model": product.model,
            "size": product.size,
            "part_no": product.part_no,
            "factory_price": product.factory_price,
            "discounted_price": product.discounted_price,
            "supply_price": product.supply_price,
            "total_stock": product.total_stock,
            "dot_list": list(product.dot_list),
        }
        for product in products
    ]
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
