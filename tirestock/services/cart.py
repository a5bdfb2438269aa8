"""
tirestock/services/cart.py

Quote cart keyed by product id and plain-text quote rendering.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from tirestock.domain.records import MergedProduct
from tirestock.normalization.formatters import brand_display_name

QUOTE_SEPARATOR = "-----------------------------"


@dataclass
class CartLine:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class QuoteLine:
    product: MergedProduct
    quantity: int
    unit_price: int
    subtotal: int


@dataclass(frozen=True)
class Quote:
    lines: tuple[QuoteLine, ...] = field(default_factory=tuple)
    total: int = 0


class Cart:
    """
    Ordered cart lines; adding a product again adds the default quantity again.
    """

    def __init__(self, *, default_quantity: int = 4) -> None:
        self._default_quantity = max(1, default_quantity)
        self._lines: dict[str, CartLine] = {}

    def __len__(self) -> int:
        return len(self._lines)

    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def add(self, product_ids: Iterable[str]) -> None:
        for product_id in product_ids:
            line = self._lines.get(product_id)
            if line is None:
                self._lines[product_id] = CartLine(product_id=product_id, quantity=self._default_quantity)
            else:
                line.quantity += self._default_quantity

    def update_quantity(self, product_id: str, delta: int) -> CartLine:
        """
        Shift a line's quantity by ``delta``; quantity never drops below 1.
        """

        line = self._lines[product_id]
        line.quantity = max(1, line.quantity + delta)
        return line

    def remove(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines = {}


def build_quote(cart: Cart, products: Mapping[str, MergedProduct]) -> Quote:
    """
    Price cart lines at the discounted unit price; unknown products are skipped.
    """

    lines: list[QuoteLine] = []
    for line in cart.lines():
        product = products.get(line.product_id)
        if product is None:
            continue
        unit_price = product.discounted_price
        lines.append(
            QuoteLine(
                product=product,
                quantity=line.quantity,
                unit_price=unit_price,
                subtotal=unit_price * line.quantity,
            )
        )
    return Quote(lines=tuple(lines), total=sum(item.subtotal for item in lines))


def _format_rate(rate: float) -> str:
    return str(int(rate)) if float(rate).is_integer() else f"{rate:g}"


def render_quote_text(quote: Quote, *, title: str, footer: str = "") -> str:
    parts = [f"{title}\n\n"]
    for number, item in enumerate(quote.lines, start=1):
        product = item.product
        parts.append(f"{number}. {brand_display_name(product.brand)} {product.model}\n")
        parts.append(f"   규격: {product.size}\n")
        parts.append(
            f"   단가: {item.unit_price:,}원 (할인율: {_format_rate(product.discount_rate)}%)\n"
        )
        parts.append(f"   수량: {item.quantity}개\n")
        parts.append(f"   소계: {item.subtotal:,}원\n\n")
    parts.append(f"총 합계금액: {quote.total:,}원\n")
    parts.append(f"{QUOTE_SEPARATOR}\n")
    if footer:
        parts.append(footer)
    return "".join(parts)
