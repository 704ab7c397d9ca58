"""
Cart routes - build a cart from the catalog and submit it as per-supplier orders.
Carts live in memory on the API process (see dependencies.CartStore).
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from supply_orders.api.dependencies import (
    CartStore,
    get_cart_store,
    get_catalog,
    get_ledger,
    get_notifier,
)
from supply_orders.api.helpers import raise_for_error, unwrap
from supply_orders.catalog.employees import find_employee
from supply_orders.catalog.products import find_product
from supply_orders.orders.cart import CartSession
from supply_orders.orders.submission import OrderSubmissionService

router = APIRouter()

# ── Pydantic models ──────────────────────────────────────────────

class CartCreateRequest(BaseModel):
    requester_code: Optional[str] = None


class CartItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class CartItemUpdate(BaseModel):
    """Either change the quantity by ``delta``, set or toggle urgency, or both."""
    delta: Optional[int] = None
    urgent: Optional[bool] = None
    toggle_urgency: bool = False


class CartSubmitRequest(BaseModel):
    requester_code: Optional[str] = None


# ── Helpers ───────────────────────────────────────────────────────

def _get_cart(cart_id: str, store: CartStore) -> CartSession:
    cart = store.get(cart_id)
    if cart is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cart not found")
    return cart


def _resolve_requester(code: str, catalog):
    employee = find_employee(unwrap(catalog.fetch_employees()), code)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown employee code: {code}",
        )
    return employee


# ── Routes ────────────────────────────────────────────────────────

@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a cart",
)
async def create_cart(
    body: Optional[CartCreateRequest] = None,
    store: CartStore = Depends(get_cart_store),
    catalog=Depends(get_catalog),
):
    requester = None
    if body and body.requester_code:
        requester = _resolve_requester(body.requester_code, catalog)
    cart = store.create()
    cart.requester = requester
    return cart.to_dict()


@router.get(
    "/{cart_id}",
    summary="Get cart contents and totals",
)
async def get_cart(cart_id: str, store: CartStore = Depends(get_cart_store)):
    return _get_cart(cart_id, store).to_dict()


@router.delete(
    "/{cart_id}",
    summary="Clear a cart",
)
async def clear_cart(cart_id: str, store: CartStore = Depends(get_cart_store)):
    cart = _get_cart(cart_id, store)
    cart.clear()
    return cart.to_dict()


@router.post(
    "/{cart_id}/items",
    summary="Add a product to a cart",
)
async def add_item(
    cart_id: str,
    item: CartItemRequest,
    store: CartStore = Depends(get_cart_store),
    catalog=Depends(get_catalog),
):
    """Adding a product that is already in the cart increases its quantity."""
    cart = _get_cart(cart_id, store)
    product = find_product(unwrap(catalog.fetch_products()), item.product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    cart.add(product, item.quantity)
    return cart.to_dict()


@router.patch(
    "/{cart_id}/items/{product_id}",
    summary="Change quantity or urgency of a cart line",
)
async def update_item(
    cart_id: str,
    product_id: str,
    update: CartItemUpdate,
    store: CartStore = Depends(get_cart_store),
):
    """A quantity that reaches zero removes the line."""
    cart = _get_cart(cart_id, store)
    if not any(line.product.id == product_id for line in cart.lines):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not in cart")

    if update.toggle_urgency:
        cart.toggle_urgency(product_id)
    elif update.urgent is not None:
        cart.set_urgency(product_id, update.urgent)
    if update.delta:
        cart.update_quantity(product_id, update.delta)
    return cart.to_dict()


@router.delete(
    "/{cart_id}/items/{product_id}",
    summary="Remove a product from a cart",
)
async def remove_item(cart_id: str, product_id: str, store: CartStore = Depends(get_cart_store)):
    cart = _get_cart(cart_id, store)
    if not cart.remove(product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not in cart")
    return cart.to_dict()


@router.post(
    "/{cart_id}/submit",
    summary="Submit a cart as one order per supplier",
)
async def submit_cart(
    cart_id: str,
    body: Optional[CartSubmitRequest] = None,
    store: CartStore = Depends(get_cart_store),
    catalog=Depends(get_catalog),
    ledger=Depends(get_ledger),
    notifier=Depends(get_notifier),
):
    """
    Submit the cart. Runs the full pipeline:

    1. Split the cart by supplier and assign order ids
    2. Generate one order PDF (with QR code) per supplier
    3. Append each order's rows to the ledger
    4. Email each written order (failures do not fail the submission)

    On success the cart is emptied. Download documents with
    GET /orders/{order_id}/pdf.
    """
    cart = _get_cart(cart_id, store)
    if cart.in_flight:
        raise_for_error('in_flight', "This cart is already being submitted")
    if body and body.requester_code:
        cart.requester = _resolve_requester(body.requester_code, catalog)

    result = OrderSubmissionService(ledger, notifier).submit(cart)
    if not result.success:
        detail = result.to_dict() if result.error_type == 'partial_append' else result.message
        raise_for_error(result.error_type, result.message, detail=detail)
    return result.to_dict()
