from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from ..db.models import User as UserModel
from ..dependencies import get_cart_service, get_current_active_user
from ..schemas.cart import CartData, CartItemAdd, CartItemData, CartItemUpdate
from ..schemas.common import Envelope
from ..services.cart import CartService, compute_summary

router = APIRouter(tags=["cart"], prefix="/api/cart")


@router.get(
    "",
    response_model=Envelope[CartData],
    summary="Get the user's cart",
    status_code=status.HTTP_200_OK,
)
def read_cart(
    cart_service: Annotated[CartService, Depends(get_cart_service)],
    user: Annotated[UserModel, Depends(get_current_active_user)],
):
    """
    Get the user's cart with its line items and a freshly computed summary.

    The cart is created on first access.
    """
    cart = cart_service.get_or_create_cart(user.id)
    return {"success": True, "data": {"cart": cart, "summary": compute_summary(cart)}}


@router.post(
    "/items",
    response_model=Envelope[CartItemData],
    summary="Add product to cart",
    status_code=status.HTTP_200_OK,
)
def add_product_to_cart(
    payload: CartItemAdd,
    cart_service: Annotated[CartService, Depends(get_cart_service)],
    user: Annotated[UserModel, Depends(get_current_active_user)],
):
    """
    Add a product to the user's cart.

    Args:
        payload (CartItemAdd): The product ID and the quantity to add (default 1).

    Returns:
        The line item for the product. Adding a product that is already in the
        cart adds to the existing quantity.

    Raises:
        NotFoundError: 404 - the product does not exist or is inactive.
        InsufficientStockError: 400 - the resulting quantity exceeds the stock.
    """
    cart_item = cart_service.add_item(user.id, payload.product_id, payload.quantity)
    return {
        "success": True,
        "message": "Item added to cart successfully",
        "data": {"cart_item": cart_item},
    }


@router.put(
    "/items/{item_id}",
    response_model=Envelope[CartItemData],
    summary="Update the quantity of a product in the user's cart",
    status_code=status.HTTP_200_OK,
)
def update_cart_item_quantity(
    item_id: Annotated[int, Path(title="Cart Item ID")],
    payload: CartItemUpdate,
    cart_service: Annotated[CartService, Depends(get_cart_service)],
    user: Annotated[UserModel, Depends(get_current_active_user)],
):
    """
    Set the quantity of a line item to exactly the given value.

    Raises:
        NotFoundError: 404 - no such item in the user's cart.
        InsufficientStockError: 400 - the quantity exceeds the stock.
    """
    cart_item = cart_service.update_item(user.id, item_id, payload.quantity)
    return {
        "success": True,
        "message": "Cart item updated successfully",
        "data": {"cart_item": cart_item},
    }


@router.delete(
    "/items/{item_id}",
    response_model=Envelope[None],
    summary="Remove a product from the user's cart",
    status_code=status.HTTP_200_OK,
)
def remove_product_from_cart(
    item_id: Annotated[int, Path(title="Cart Item ID")],
    cart_service: Annotated[CartService, Depends(get_cart_service)],
    user: Annotated[UserModel, Depends(get_current_active_user)],
):
    cart_service.remove_item(user.id, item_id)
    return {"success": True, "message": "Item removed from cart successfully"}


@router.delete(
    "",
    response_model=Envelope[None],
    summary="Remove every product from the user's cart",
    status_code=status.HTTP_200_OK,
)
def clear_cart(
    cart_service: Annotated[CartService, Depends(get_cart_service)],
    user: Annotated[UserModel, Depends(get_current_active_user)],
):
    cart_service.clear_cart(user.id)
    return {"success": True, "message": "Cart cleared successfully"}
