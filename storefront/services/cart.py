from decimal import Decimal
from typing import NoReturn

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.debug import logger
from ..core.exceptions import (
    InsufficientStockError,
    NotFoundError,
    StorefrontError,
)
from ..crud import cart as cart_crud
from ..db.models import Cart, CartItem
from ..schemas.cart import CartSummary

CENT = Decimal("0.01")


def compute_summary(cart: Cart) -> CartSummary:
    """
    Derive the item count and total of a cart from its current line items.

    Lines whose product has been deactivated are left out of both figures.
    """
    items_count = 0
    total_amount = Decimal("0")
    for item in cart.items:
        if not item.product.is_active:
            continue
        items_count += item.quantity
        total_amount += Decimal(item.product.price) * item.quantity
    return CartSummary(
        items_count=items_count, total_amount=total_amount.quantize(CENT)
    )


class CartService:
    """
    Keeps a user's cart consistent with live product stock.

    Every public method runs as one transaction on the session it was given:
    it either commits all of its writes or rolls back and raises.
    """

    def __init__(self, db: Session):
        self.db = db

    def _reject(self, error: StorefrontError) -> NoReturn:
        self.db.rollback()
        logger.warning(f"Cart operation rejected: {error.message}")
        raise error

    def get_or_create_cart(self, user_id: int) -> Cart:
        cart = cart_crud.get_cart_by_user_id(self.db, user_id, with_items=True)
        if cart is not None:
            return cart
        try:
            cart_crud.create_cart(self.db, user_id)
            self.db.commit()
            logger.info(f"Created cart for user {user_id}")
        except IntegrityError:
            # Another request created it first
            self.db.rollback()
        return cart_crud.get_cart_by_user_id(self.db, user_id, with_items=True)

    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
        try:
            return self._add_item(user_id, product_id, quantity)
        except IntegrityError:
            # A concurrent request inserted the same cart or line first;
            # the second attempt finds it and takes the additive path.
            self.db.rollback()
            logger.info(
                f"Retrying add of product {product_id} for user {user_id} after a concurrent insert"
            )
            return self._add_item(user_id, product_id, quantity)

    def _add_item(self, user_id: int, product_id: int, quantity: int) -> CartItem:
        product = cart_crud.lock_product(self.db, product_id)
        if product is None or not product.is_active:
            self._reject(NotFoundError("Product not found or inactive"))
        if product.stock < quantity:
            self._reject(InsufficientStockError("Insufficient stock available"))

        cart = cart_crud.get_cart_by_user_id(self.db, user_id)
        if cart is None:
            cart = cart_crud.create_cart(self.db, user_id)

        existing = cart_crud.get_cart_item(self.db, cart.id, product_id)
        if existing is None:
            item_id = cart_crud.create_cart_item(
                self.db, cart.id, product_id, quantity
            ).id
        else:
            if existing.quantity + quantity > product.stock or not (
                cart_crud.increment_quantity_within_stock(
                    self.db, existing.id, product_id, quantity
                )
            ):
                self._reject(
                    InsufficientStockError(
                        "Insufficient stock for the requested quantity"
                    )
                )
            item_id = existing.id

        self.db.commit()
        logger.info(f"Added {quantity} x product {product_id} to cart of user {user_id}")
        return cart_crud.get_cart_item_with_product(self.db, item_id)

    def update_item(self, user_id: int, item_id: int, quantity: int) -> CartItem:
        cart_item = cart_crud.get_owned_cart_item(self.db, user_id, item_id)
        if cart_item is None:
            self._reject(NotFoundError("Cart item not found"))
        if cart_item.product.stock < quantity or not (
            cart_crud.set_quantity_within_stock(
                self.db, cart_item.id, cart_item.product_id, quantity
            )
        ):
            self._reject(InsufficientStockError("Insufficient stock available"))

        self.db.commit()
        logger.info(f"Set quantity of cart item {item_id} to {quantity}")
        return cart_crud.get_cart_item_with_product(self.db, item_id)

    def remove_item(self, user_id: int, item_id: int) -> None:
        cart_item = cart_crud.get_owned_cart_item(self.db, user_id, item_id)
        if cart_item is None:
            self._reject(NotFoundError("Cart item not found"))
        cart_crud.delete_cart_item(self.db, cart_item)
        self.db.commit()
        logger.info(f"Removed cart item {item_id} for user {user_id}")

    def clear_cart(self, user_id: int) -> None:
        cart = cart_crud.get_cart_by_user_id(self.db, user_id)
        if cart is None:
            return
        removed = cart_crud.delete_cart_items(self.db, cart.id)
        self.db.commit()
        logger.info(f"Cleared {removed} item(s) from cart of user {user_id}")
