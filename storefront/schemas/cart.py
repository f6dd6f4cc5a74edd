from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import StrictInt, field_validator

from .common import APIModel, Money


class ProductSnapshot(APIModel):
    id: int
    name: str
    price: Money
    image_url: Optional[str] = None
    stock: int
    is_active: bool


class CartItem(APIModel):
    id: int
    cart_id: int
    product_id: int
    quantity: int
    created_at: datetime
    updated_at: datetime
    product: ProductSnapshot


class Cart(APIModel):
    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime
    items: list[CartItem]


class CartSummary(APIModel):
    items_count: int = 0
    total_amount: Money = Decimal("0.00")


class CartData(APIModel):
    cart: Cart
    summary: CartSummary


class CartItemData(APIModel):
    cart_item: CartItem


class CartItemAdd(APIModel):
    product_id: StrictInt
    quantity: StrictInt = 1

    @field_validator("product_id")
    def product_id_validator(cls, value: int):
        if value < 1:
            raise ValueError("Valid product ID is required")
        return value

    @field_validator("quantity")
    def quantity_validator(cls, value: int):
        if value < 1:
            raise ValueError("Quantity must be a positive integer")
        return value


class CartItemUpdate(APIModel):
    quantity: StrictInt

    @field_validator("quantity")
    def quantity_validator(cls, value: int):
        if value < 1:
            raise ValueError("Quantity must be a positive integer")
        return value
