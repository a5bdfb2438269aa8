"""
tirestock/domain/records.py

Record types flowing through the reconciliation pipeline.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from tirestock.domain.pricing import discounted_price

PRODUCT_ID_NAMESPACE = uuid.UUID("5b0c7f5e-2f7a-4c1e-9a57-3f1f0d6c2b11")


@dataclass(frozen=True)
class StockRecord:
    """
    One row of the live supplier stock table.
    """

    brand: str
    model: str
    part_no: str
    size: str
    unique_code: str = ""
    supply_price: int = 0
    stock_qty: int = 0
    discontinued: bool = False
    it_id: str = ""
    st_id: str = ""

    def dedup_key(self) -> tuple[str, str, str, str]:
        return (
            self.brand.strip(),
            self.model.strip(),
            self.size.strip(),
            self.unique_code.strip(),
        )


@dataclass(frozen=True)
class LedgerRecord:
    """
    One priced row of the reference ledger (price sheet).
    """

    brand: str
    model: str
    size: str
    code: str
    factory_price: int = 0
    dot_list: tuple[str, ...] = field(default_factory=tuple)
    type: str = ""
    season: str = ""


@dataclass(frozen=True)
class MergedProduct:
    """
    Unified product view produced by the merge engine.

    Instances are immutable; pricing overrides replace the record in the
    session product store.
    """

    product_id: str
    brand: str
    model: str
    size: str
    part_no: str
    factory_price: int
    supply_price: int = 0
    total_stock: int = 0
    discount_rate: float = 0
    dot_list: tuple[str, ...] = field(default_factory=tuple)
    internal_code: str = ""
    type: str = ""
    season: str = ""

    @property
    def discounted_price(self) -> int:
        return discounted_price(self.factory_price, self.discount_rate)


def build_product_id(*parts: str) -> str:
    """
    Derive a stable product identifier from identifying field values.
    """

    seed = "|".join(part.strip() for part in parts)
    return str(uuid.uuid5(PRODUCT_ID_NAMESPACE, seed))
