"""
tirestock/api/routers/products.py

Product search, pricing override, selection, order, cart and quote endpoints.
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tirestock.config import get_reconciliation_settings
from tirestock.domain.inventory import InsufficientStockError, RecordNotFoundError
from tirestock.normalization.formatters import ALL_OPTION, BRAND_FILTER_OPTIONS, brand_filter_label
from tirestock.schemas.products import (
    BrandOptionResponse,
    CartAddRequest,
    CartQuantityRequest,
    OrderRequest,
    OrderResponse,
    PricingUpdateRequest,
    ProductResponse,
    QuoteLineResponse,
    QuoteResponse,
    SelectAllRequest,
    SelectionResponse,
    SelectionToggleResponse,
)
from tirestock.search.facade import SearchCriteria, SortState
from tirestock.services.cart import render_quote_text
from tirestock.services.product_store import ProductNotFoundError
from tirestock.services.reconciliation_service import (
    ReconciliationService,
    get_reconciliation_service,
)

router = APIRouter(tags=["products"])


@router.get("/products", response_model=list[ProductResponse])
async def list_products(
    size: str = Query(default="", description="Tire size query; triggers a fresh fetch when set"),
    query: str = Query(default=""),
    brand: str = Query(default=ALL_OPTION),
    product_type: str = Query(default=ALL_OPTION, alias="type"),
    season: str = Query(default=ALL_OPTION),
    sort_key: str | None = Query(default=None),
    direction: Literal["asc", "desc"] = Query(default="asc"),
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> list[ProductResponse]:
    """
    Reconcile stock and ledger for a size query, then filter and sort.
    """

    try:
        sort = SortState(key=sort_key, direction=direction) if sort_key else None
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if size.strip():
        await service.load(size.strip())

    criteria = SearchCriteria(query=query, brand=brand, type=product_type, season=season)
    return [ProductResponse.from_product(product) for product in service.search(criteria, sort)]


@router.get("/brands", response_model=list[BrandOptionResponse])
def list_brand_options() -> list[BrandOptionResponse]:
    """
    Brand filter choices in display order; group options carry a joined label.
    """

    return [BrandOptionResponse(value=option, label=brand_filter_label(option)) for option in BRAND_FILTER_OPTIONS]


@router.patch("/products/{product_id}/pricing", response_model=ProductResponse)
def update_pricing(
    product_id: str,
    body: PricingUpdateRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> ProductResponse:
    try:
        product = service.update_pricing(
            product_id,
            discount_rate=body.discount_rate,
            factory_price=body.factory_price,
        )
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ProductResponse.from_product(product)


@router.post("/products/{product_id}/selection", response_model=SelectionToggleResponse)
def toggle_selection(
    product_id: str,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> SelectionToggleResponse:
    try:
        selected = service.products.toggle_selection(product_id)
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return SelectionToggleResponse(
        product_id=product_id,
        selected=selected,
        selected_ids=_selected_ids(service),
    )


@router.post("/products/selection/all", response_model=SelectionResponse)
def toggle_select_all(
    body: SelectAllRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> SelectionResponse:
    """
    Select every visible product, or clear the selection when all are already selected.
    """

    service.products.toggle_select_all(body.product_ids)
    return SelectionResponse(selected_ids=_selected_ids(service))


@router.post("/orders", response_model=OrderResponse)
def place_order(
    body: OrderRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> OrderResponse:
    try:
        result = service.apply_order(body.product_id, body.quantity, body.source)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except InsufficientStockError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return OrderResponse.from_result(result)


@router.post("/cart", response_model=QuoteResponse)
def add_to_cart(
    body: CartAddRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> QuoteResponse:
    """
    Add products to the quote cart and return the updated quote.
    """

    unknown = [product_id for product_id in body.product_ids if product_id not in service.products]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown product ids: {', '.join(unknown)}",
        )
    service.cart.add(body.product_ids)
    return _quote_response(service)


@router.post("/cart/selection", response_model=QuoteResponse)
def add_selection_to_cart(
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> QuoteResponse:
    service.add_selection_to_cart()
    return _quote_response(service)


@router.patch("/cart/{product_id}", response_model=QuoteResponse)
def update_cart_quantity(
    product_id: str,
    body: CartQuantityRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> QuoteResponse:
    try:
        service.cart.update_quantity(product_id, body.delta)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product not in cart product_id={product_id}",
        ) from exc
    return _quote_response(service)


@router.delete("/cart/{product_id}", response_model=QuoteResponse)
def remove_from_cart(
    product_id: str,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> QuoteResponse:
    service.cart.remove(product_id)
    return _quote_response(service)


@router.delete("/cart", response_model=QuoteResponse)
def clear_cart(
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> QuoteResponse:
    service.cart.clear()
    return _quote_response(service)


@router.get("/quote", response_model=QuoteResponse)
def get_quote(
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> QuoteResponse:
    return _quote_response(service)


def _quote_response(service: ReconciliationService) -> QuoteResponse:
    settings = get_reconciliation_settings()
    quote = service.quote()
    return QuoteResponse(
        lines=[
            QuoteLineResponse(
                product_id=line.product.product_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                subtotal=line.subtotal,
            )
            for line in quote.lines
        ],
        total=quote.total,
        text=render_quote_text(quote, title=settings.quote_title, footer=settings.quote_footer),
    )


def _selected_ids(service: ReconciliationService) -> list[str]:
    return [product.product_id for product in service.products.selected_products()]
