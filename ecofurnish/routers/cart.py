# ecofurnish/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException, status

from ecofurnish.core.auth import get_storefront
from ecofurnish.core.errors import ERROR_ITEM_NOT_IN_CART, ERROR_PRODUCT_NOT_FOUND
from ecofurnish.routers.products import get_catalog
from ecofurnish.schemas.cart import (
    CartItemCreate,
    CartItemRead,
    CartItemUpdate,
    CartPanelUpdate,
    CartSummary,
)
from ecofurnish.services.cart_store import CartStore
from ecofurnish.services.catalog_service import CatalogService
from ecofurnish.services.storefront import Storefront

router = APIRouter(prefix="/cart", tags=["Cart"])


def cart_summary(cart: CartStore) -> CartSummary:
    """
    Render the cart with its totals (computed on read, never stored).
    """
    return CartSummary(
        items=[
            CartItemRead(**item.model_dump(), line_total=item.line_total)
            for item in cart.items
        ],
        total_items=cart.total_items,
        total_price=cart.total_price,
        is_cart_open=cart.is_cart_open,
    )


@router.get("", response_model=CartSummary)
async def get_my_cart(storefront: Storefront = Depends(get_storefront)):
    """
    Get this browser's cart summary.

    Guests get their in-memory cart; signed-in visitors get the cart
    loaded from their account.
    """
    return cart_summary(storefront.cart)


@router.post("", response_model=CartSummary)
async def add_to_cart(
    payload: CartItemCreate,
    storefront: Storefront = Depends(get_storefront),
    catalog: CatalogService = Depends(get_catalog),
):
    """
    Add one unit of a product and open the cart panel.

    Returns the updated cart summary.
    """
    product = catalog.get_product(payload.product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_PRODUCT_NOT_FOUND,
        )
    storefront.cart.add_to_cart(catalog.to_cart_item(product))
    return cart_summary(storefront.cart)


@router.patch("/{product_id}", response_model=CartSummary)
async def update_cart_item(
    product_id: str,
    payload: CartItemUpdate,
    storefront: Storefront = Depends(get_storefront),
):
    """
    Set the quantity of a line; zero or less removes it.

    Returns the updated cart summary.
    """
    if storefront.cart.get_item(product_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_ITEM_NOT_IN_CART,
        )
    storefront.cart.update_quantity(product_id, payload.quantity)
    return cart_summary(storefront.cart)


@router.delete("/{product_id}", response_model=CartSummary)
async def remove_cart_item(
    product_id: str,
    storefront: Storefront = Depends(get_storefront),
):
    """
    Remove a product from the cart (no-op if absent).

    Returns the updated cart summary.
    """
    storefront.cart.remove_from_cart(product_id)
    return cart_summary(storefront.cart)


@router.delete("", response_model=CartSummary)
async def clear_cart(storefront: Storefront = Depends(get_storefront)):
    """
    Clear the entire cart.

    Returns an empty cart summary.
    """
    storefront.cart.clear_cart()
    return cart_summary(storefront.cart)


@router.put("/panel", response_model=CartSummary)
async def set_cart_panel(
    payload: CartPanelUpdate,
    storefront: Storefront = Depends(get_storefront),
):
    """Open or close the cart side panel."""
    storefront.cart.set_cart_open(payload.open)
    return cart_summary(storefront.cart)
