from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import field_validator

from .common import APIModel, Money
from ..db.base import MAX_ID


class CategorySummary(APIModel):
    id: int
    name: str


class Category(CategorySummary):
    description: Optional[str] = None
    image_url: Optional[str] = None


class ProductBase(APIModel):
    name: str
    description: Optional[str] = None
    price: Money
    sku: str
    stock: int = 0
    image_url: Optional[str] = None
    images: list[str] = []


class ProductCreate(ProductBase):
    category_id: int

    @field_validator("name")
    def name_validator(cls, value: str):
        value = value.strip()
        if not value:
            raise ValueError("Product name is required")
        return value

    @field_validator("sku")
    def sku_validator(cls, value: str):
        value = value.strip()
        if not value:
            raise ValueError("SKU is required")
        return value

    @field_validator("price")
    def price_validator(cls, value: Decimal):
        if value < 0:
            raise ValueError("Price must be a positive number")
        return value

    @field_validator("stock")
    def stock_validator(cls, value: int):
        if value < 0 or value > MAX_ID:
            raise ValueError("Stock must be a non-negative integer")
        return value

    @field_validator("category_id")
    def category_id_validator(cls, value: int):
        if value < 1:
            raise ValueError("Valid category ID is required")
        return value


class Product(ProductBase):
    id: int
    is_active: bool
    category_id: int
    category: CategorySummary
    created_at: datetime
    updated_at: datetime


class ProductDetail(Product):
    category: Category


class ProductData(APIModel):
    product: ProductDetail


class Pagination(APIModel):
    page: int
    limit: int
    total: int
    pages: int


class ProductPage(APIModel):
    products: list[Product]
    pagination: Pagination


class CategoryList(APIModel):
    categories: list[Category]
