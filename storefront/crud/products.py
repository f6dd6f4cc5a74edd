from decimal import Decimal
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.future import select
from sqlalchemy.orm import Session, selectinload

from ..db.base import fits_id
from ..db.enums import ProductSortField, SortDirection
from ..db.models import Product, Category
from ..schemas.products import ProductCreate

SORT_COLUMNS = {
    ProductSortField.CREATED_AT: Product.created_at,
    ProductSortField.PRICE: Product.price,
    ProductSortField.NAME: Product.name,
    ProductSortField.STOCK: Product.stock,
}


def get_category(db: Session, category_id: int) -> Optional[Category]:
    """Get a category by ID."""
    if not fits_id(category_id):
        return None
    return db.execute(
        select(Category).filter(Category.id == category_id)
    ).scalar_one_or_none()


def get_category_by_name(db: Session, name: str) -> Optional[Category]:
    """Get a category by name."""
    return db.execute(
        select(Category).filter(Category.name == name)
    ).scalar_one_or_none()


def list_categories(db: Session) -> list[Category]:
    """List active categories ordered by name."""
    return (
        db.execute(
            select(Category)
            .filter(Category.is_active.is_(True))
            .order_by(Category.name.asc())
        )
        .scalars()
        .all()
    )


def get_active_product(db: Session, product_id: int) -> Optional[Product]:
    """Get a product by ID only if it is on sale."""
    if not fits_id(product_id):
        return None
    return db.execute(
        select(Product)
        .options(selectinload(Product.category))
        .filter(Product.id == product_id, Product.is_active.is_(True))
    ).scalar_one_or_none()


def get_product_by_sku(db: Session, sku: str) -> Optional[Product]:
    """Get a product by SKU."""
    return db.execute(select(Product).filter(Product.sku == sku)).scalar_one_or_none()


def create_product(db: Session, product: ProductCreate) -> Product:
    """Create a new product."""
    db_product = Product(**product.model_dump())
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


def search_products(
    db: Session,
    offset: int,
    limit: int,
    category_id: Optional[int] = None,
    search: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    sort_by: ProductSortField = ProductSortField.CREATED_AT,
    sort_order: SortDirection = SortDirection.DESC,
) -> tuple[list[Product], int]:
    """
    Page through active products.

    Returns the requested page and the total number of matching products.
    """
    if category_id is not None and not fits_id(category_id):
        return [], 0

    filters = [Product.is_active.is_(True)]
    if category_id is not None:
        filters.append(Product.category_id == category_id)
    if search:
        filters.append(
            or_(
                Product.name.ilike(f"%{search}%"),
                Product.description.ilike(f"%{search}%"),
            )
        )
    if min_price is not None:
        filters.append(Product.price >= min_price)
    if max_price is not None:
        filters.append(Product.price <= max_price)

    total = db.execute(
        select(func.count()).select_from(Product).where(*filters)
    ).scalar_one()

    sort_column = SORT_COLUMNS[sort_by]
    if sort_order == SortDirection.ASC:
        ordering = (sort_column.asc(), Product.id.asc())
    else:
        ordering = (sort_column.desc(), Product.id.desc())
    products = (
        db.execute(
            select(Product)
            .options(selectinload(Product.category))
            .where(*filters)
            .order_by(*ordering)
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return products, total
