"""
tirestock/schemas/products.py

Request and response schemas for product, order and quote endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tirestock.domain.inventory import OrderResult, StockLocation
from tirestock.domain.records import MergedProduct
from tirestock.normalization.formatters import brand_display_name


class ProductResponse(BaseModel):
    """
    API response model for one merged product.
    """

    product_id: str
    brand: str
    brand_display_name: str
    model: str
    size: str
    part_no: str
    factory_price: int = Field(..., gt=0)
    discount_rate: float
    discounted_price: int
    supply_price: int = Field(..., ge=0)
    total_stock: int = Field(..., ge=0)
    dot_list: list[str] = Field(default_factory=list)
    type: str = ""
    season: str = ""

    @classmethod
    def from_product(cls, product: MergedProduct) -> "ProductResponse":
        return cls(
            product_id=product.product_id,
            brand=product.brand,
            brand_display_name=brand_display_name(product.brand),
            model=product.model,
            size=product.size,
            part_no=product.part_no,
            factory_price=product.factory_price,
            discount_rate=product.discount_rate,
            discounted_price=product.discounted_price,
            supply_price=product.supply_price,
            total_stock=product.total_stock,
            dot_list=list(product.dot_list),
            type=product.type,
            season=product.season,
        )


class PricingUpdateRequest(BaseModel):
    """
    Local pricing override; omitted fields are left unchanged.
    """

    discount_rate: float | str | None = None
    factory_price: int | str | None = None


class OrderRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0)
    source: StockLocation = StockLocation.STORE


class LowStockAlertResponse(BaseModel):
    remaining: int
    reorder_point: int


class OrderResponse(BaseModel):
    product_id: str
    source: StockLocation
    quantity: int
    remaining: int
    low_stock_alert: LowStockAlertResponse | None = None

    @classmethod
    def from_result(cls, result: OrderResult) -> "OrderResponse":
        alert = None
        if result.alert is not None:
            alert = LowStockAlertResponse(
                remaining=result.alert.remaining,
                reorder_point=result.alert.reorder_point,
            )
        return cls(
            product_id=result.product_id,
            source=result.location,
            quantity=result.quantity,
            remaining=result.remaining,
            low_stock_alert=alert,
        )


class CartAddRequest(BaseModel):
    product_ids: list[str] = Field(default_factory=list)


class QuoteLineResponse(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)
    unit_price: int
    subtotal: int


class QuoteResponse(BaseModel):
    lines: list[QuoteLineResponse] = Field(default_factory=list)
    total: int
    text: str


class CartQuantityRequest(BaseModel):
    """
    Relative quantity change for one cart line; the line never drops below 1.
    """

    delta: int


class SelectAllRequest(BaseModel):
    product_ids: list[str] = Field(default_factory=list)


class SelectionResponse(BaseModel):
    selected_ids: list[str] = Field(default_factory=list)


class SelectionToggleResponse(SelectionResponse):
    product_id: str
    selected: bool


class BrandOptionResponse(BaseModel):
    value: str
    label: str
