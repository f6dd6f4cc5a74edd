import datetime, decimal
from typing import Optional

from sqlalchemy.orm import mapped_column, Mapped, relationship, validates
from sqlalchemy import (
    ForeignKey,
    func,
    CheckConstraint,
    Numeric,
    JSON,
    Text,
    UniqueConstraint,
)

from .base import Base
from .enums import UserRoleType


class User(Base):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(nullable=False, unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(nullable=False)
    first_name: Mapped[str] = mapped_column(nullable=False)
    last_name: Mapped[str] = mapped_column(nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(nullable=True)
    address: Mapped[Optional[str]] = mapped_column(nullable=True)
    city: Mapped[Optional[str]] = mapped_column(nullable=True)
    country: Mapped[Optional[str]] = mapped_column(nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(nullable=True)
    role: Mapped[str] = mapped_column(
        nullable=False, index=True, insert_default=UserRoleType.USER.value
    )
    is_active: Mapped[bool] = mapped_column(nullable=False, insert_default=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now()
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now(), onupdate=func.now()
    )
    cart: Mapped[Optional["Cart"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    tokens: Mapped[list["Token"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    @validates("role")
    def validate_role(self, key, value):
        if value:
            for enum in UserRoleType:
                if value == enum.value:
                    return value
            raise ValueError(f"Invalid value for {key}: {value}")
        return value


class Token(Base):
    __tablename__ = "token"

    id: Mapped[int] = mapped_column(primary_key=True)
    jti: Mapped[str] = mapped_column(nullable=False, unique=True, index=True)
    is_active: Mapped[bool] = mapped_column(nullable=False, insert_default=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"))
    expires_at: Mapped[datetime.datetime] = mapped_column(nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now()
    )
    user: Mapped["User"] = relationship(back_populates="tokens")


class Category(Base):
    __tablename__ = "category"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(nullable=False, insert_default=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now()
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now(), onupdate=func.now()
    )
    products: Mapped[list["Product"]] = relationship(back_populates="category")


class Product(Base):
    __tablename__ = "product"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[decimal.Decimal] = mapped_column(
        Numeric(10, 2),
        CheckConstraint("price >= 0", name="price_non_negative"),
        nullable=False,
        index=True,
    )
    sku: Mapped[str] = mapped_column(nullable=False, unique=True)
    stock: Mapped[int] = mapped_column(
        CheckConstraint("stock >= 0", name="stock_non_negative"),
        nullable=False,
        insert_default=0,
    )
    image_url: Mapped[Optional[str]] = mapped_column(nullable=True)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, insert_default=list)
    # Soft-delete flag, rows are deactivated rather than removed
    is_active: Mapped[bool] = mapped_column(
        nullable=False, insert_default=True, index=True
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now(), index=True
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now(), onupdate=func.now()
    )
    category_id: Mapped[int] = mapped_column(ForeignKey("category.id"), index=True)
    category: Mapped["Category"] = relationship(back_populates="products")
    cart_items: Mapped[list["CartItem"]] = relationship(back_populates="product")


class Cart(Base):
    __tablename__ = "cart"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), unique=True
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now()
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now(), onupdate=func.now()
    )
    user: Mapped["User"] = relationship(back_populates="cart")
    items: Mapped[list["CartItem"]] = relationship(
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )


class CartItem(Base):
    __tablename__ = "cart_item"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_item_cart_product"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    quantity: Mapped[int] = mapped_column(
        CheckConstraint("quantity > 0", name="quantity_positive"), nullable=False
    )
    cart_id: Mapped[int] = mapped_column(
        ForeignKey("cart.id", ondelete="CASCADE"), index=True
    )
    cart: Mapped["Cart"] = relationship(back_populates="items")
    product_id: Mapped[int] = mapped_column(
        ForeignKey("product.id", ondelete="CASCADE")
    )
    product: Mapped["Product"] = relationship(back_populates="cart_items")
    created_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now()
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now(), onupdate=func.now()
    )
