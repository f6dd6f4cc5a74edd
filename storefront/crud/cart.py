"""
Persistence primitives for carts and their line items.

None of these functions commit: the cart service composes several of them
into one transaction and decides when to commit or roll back.
"""
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.future import select

from ..db.base import fits_id
from ..db.models import Cart, CartItem, Product


def get_cart_by_user_id(
    db: Session, user_id: int, with_items: bool = False
) -> Optional[Cart]:
    query = select(Cart).filter(Cart.user_id == user_id)
    if with_items:
        query = query.options(
            selectinload(Cart.items).selectinload(CartItem.product)
        ).execution_options(populate_existing=True)
    return db.execute(query).scalar_one_or_none()


def create_cart(db: Session, user_id: int) -> Cart:
    cart = Cart(user_id=user_id)
    db.add(cart)
    db.flush()
    return cart


def lock_product(db: Session, product_id: int) -> Optional[Product]:
    """Read a product row and hold a write lock on it until the transaction ends."""
    if not fits_id(product_id):
        return None
    return db.execute(
        select(Product)
        .filter(Product.id == product_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()


def get_cart_item(db: Session, cart_id: int, product_id: int) -> Optional[CartItem]:
    return db.execute(
        select(CartItem)
        .filter(CartItem.cart_id == cart_id, CartItem.product_id == product_id)
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()


def get_owned_cart_item(
    db: Session, user_id: int, item_id: int
) -> Optional[CartItem]:
    """Get a line item only if it sits in the cart of `user_id`."""
    if not fits_id(item_id):
        return None
    return db.execute(
        select(CartItem)
        .join(Cart, CartItem.cart_id == Cart.id)
        .options(selectinload(CartItem.product))
        .filter(CartItem.id == item_id, Cart.user_id == user_id)
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()


def get_cart_item_with_product(db: Session, item_id: int) -> CartItem:
    return db.execute(
        select(CartItem)
        .options(selectinload(CartItem.product))
        .filter(CartItem.id == item_id)
        .execution_options(populate_existing=True)
    ).scalar_one()


def create_cart_item(
    db: Session, cart_id: int, product_id: int, quantity: int
) -> CartItem:
    cart_item = CartItem(cart_id=cart_id, product_id=product_id, quantity=quantity)
    db.add(cart_item)
    db.flush()
    return cart_item


def _stock_of(product_id: int):
    return select(Product.stock).where(Product.id == product_id).scalar_subquery()


def increment_quantity_within_stock(
    db: Session, item_id: int, product_id: int, quantity: int
) -> bool:
    """
    Add `quantity` to a line item only if the new total still fits the
    product's stock at write time. Returns False when no row was updated.
    """
    result = db.execute(
        update(CartItem)
        .where(
            CartItem.id == item_id,
            CartItem.quantity + quantity <= _stock_of(product_id),
        )
        .values(quantity=CartItem.quantity + quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def set_quantity_within_stock(
    db: Session, item_id: int, product_id: int, quantity: int
) -> bool:
    """Replace a line item's quantity if it fits the product's stock at write time."""
    result = db.execute(
        update(CartItem)
        .where(CartItem.id == item_id, _stock_of(product_id) >= quantity)
        .values(quantity=quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def delete_cart_item(db: Session, cart_item: CartItem) -> None:
    db.delete(cart_item)
    db.flush()


def delete_cart_items(db: Session, cart_id: int) -> int:
    result = db.execute(
        delete(CartItem)
        .filter(CartItem.cart_id == cart_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
