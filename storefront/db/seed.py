from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.orm import Session

from ..core.debug import logger
from ..crud.products import get_category_by_name, get_product_by_sku
from ..crud.user import create_user, get_user_by_email
from ..schemas.user import UserCreate
from .enums import UserRoleType
from .models import Cart, Category, Product

IMAGE_BASE = "https://images.unsplash.com"

CATEGORIES = [
    {
        "name": "Electronics",
        "description": "Electronic devices and gadgets",
        "image_url": f"{IMAGE_BASE}/photo-1498049794561-7780e7231661?w=400",
    },
    {
        "name": "Clothing",
        "description": "Fashion and apparel",
        "image_url": f"{IMAGE_BASE}/photo-1441984904996-e0b6ba687e04?w=400",
    },
    {
        "name": "Books",
        "description": "Books and literature",
        "image_url": f"{IMAGE_BASE}/photo-1481627834876-b7833e8f5570?w=400",
    },
    {
        "name": "Home & Garden",
        "description": "Home improvement and garden supplies",
        "image_url": f"{IMAGE_BASE}/photo-1484154218962-a197022b5858?w=400",
    },
]

# (category, name, description, price, sku, stock, image)
PRODUCTS = [
    ("Electronics", 'MacBook Pro 14"', "Apple MacBook Pro 14-inch with M2 Pro chip",
     "1999.99", "LAPTOP001", 10, "photo-1517336714731-489689fd1ca8"),
    ("Electronics", "iPhone 15 Pro", "Latest iPhone with titanium design",
     "999.99", "PHONE001", 25, "photo-1592750475338-74b7b21085ab"),
    ("Electronics", "AirPods Pro", "Wireless earbuds with active noise cancellation",
     "249.99", "HEADPHONES001", 50, "photo-1572569511254-d8f925fe2cbb"),
    ("Clothing", "Classic White T-Shirt", "Premium cotton white t-shirt",
     "29.99", "SHIRT001", 100, "photo-1521572163474-6864f9cf17ab"),
    ("Clothing", "Blue Denim Jeans", "Classic blue jeans, regular fit",
     "79.99", "JEANS001", 75, "photo-1542272604-787c3835535d"),
    ("Books", "The Great Gatsby", "Classic American novel by F. Scott Fitzgerald",
     "12.99", "BOOK001", 200, "photo-1544947950-fa07a98d237f"),
    ("Books", "To Kill a Mockingbird", "Timeless novel by Harper Lee",
     "14.99", "BOOK002", 150, "photo-1507003211169-0a1dd7228f2d"),
    ("Home & Garden", "Monstera Deliciosa", "Beautiful indoor plant with split leaves",
     "45.99", "PLANT001", 30, "photo-1545241047-6083a3684587"),
]

USERS = [
    (
        UserRoleType.ADMIN,
        {
            "email": "admin@example.com",
            "password": "admin123",
            "first_name": "Admin",
            "last_name": "User",
            "phone": "+1234567890",
            "address": "123 Admin Street",
            "city": "New York",
            "country": "USA",
            "zip_code": "10001",
        },
    ),
    (
        UserRoleType.USER,
        {
            "email": "test@example.com",
            "password": "test123",
            "first_name": "Test",
            "last_name": "User",
            "phone": "+1987654321",
            "address": "456 Test Avenue",
            "city": "Los Angeles",
            "country": "USA",
            "zip_code": "90210",
        },
    ),
]


@dataclass
class SeedReport:
    categories: list[str] = field(default_factory=list)
    products: list[str] = field(default_factory=list)
    users: list[str] = field(default_factory=list)


def seed_database(db: Session) -> SeedReport:
    """
    Insert the demo catalog and accounts.

    Rows are matched on their unique key (category name, SKU, email) and left
    untouched when they already exist, so running it twice is harmless. The
    report lists only what was created by this run.
    """
    report = SeedReport()

    categories: dict[str, Category] = {}
    for data in CATEGORIES:
        category = get_category_by_name(db, data["name"])
        if category is None:
            category = Category(**data)
            db.add(category)
            report.categories.append(data["name"])
        categories[data["name"]] = category
    db.flush()

    for category_name, name, description, price, sku, stock, image in PRODUCTS:
        if get_product_by_sku(db, sku) is not None:
            continue
        image_url = f"{IMAGE_BASE}/{image}?w=500"
        db.add(
            Product(
                name=name,
                description=description,
                price=Decimal(price),
                sku=sku,
                stock=stock,
                image_url=image_url,
                images=[image_url],
                category=categories[category_name],
            )
        )
        report.products.append(sku)
    db.commit()

    for role, data in USERS:
        user = get_user_by_email(db, data["email"])
        if user is None:
            create_user(db, UserCreate(**data), role=role)
            report.users.append(data["email"])
        elif user.cart is None:
            user.cart = Cart()
            db.commit()

    logger.info(
        f"Seeded {len(report.categories)} categories, {len(report.products)} products, {len(report.users)} users"
    )
    return report
