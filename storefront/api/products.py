from decimal import Decimal
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Path, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.debug import logger
from ..crud.products import (
    create_product,
    get_active_product,
    get_category,
    get_product_by_sku,
    list_categories,
    search_products,
)
from ..db.base import MAX_ID
from ..db.enums import ProductSortField, SortDirection
from ..db.models import User as UserModel
from ..dependencies import get_db, get_current_active_admin
from ..schemas.common import Envelope
from ..schemas.products import CategoryList, ProductCreate, ProductData, ProductPage

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get(
    "",
    response_model=Envelope[ProductPage],
    summary="Get all products",
)
def read_products(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1, le=MAX_ID // settings.max_page_size)] = 1,
    limit: Annotated[
        int, Query(ge=1, le=settings.max_page_size)
    ] = settings.default_page_size,
    category: Annotated[Optional[int], Query(description="Category ID")] = None,
    search: Annotated[Optional[str], Query()] = None,
    min_price: Annotated[Optional[Decimal], Query(alias="minPrice", ge=0)] = None,
    max_price: Annotated[Optional[Decimal], Query(alias="maxPrice", ge=0)] = None,
    sort_by: Annotated[
        ProductSortField, Query(alias="sortBy")
    ] = ProductSortField.CREATED_AT,
    sort_order: Annotated[SortDirection, Query(alias="sortOrder")] = SortDirection.DESC,
):
    """
    Endpoint to page through the active products.

    Parameters:
    - page: int - The page number, starting at 1.
    - limit: int - The number of products per page.
    - category: int - Only products of this category.
    - search: str - Case-insensitive match on name or description.
    - minPrice / maxPrice: Decimal - Inclusive price bounds.
    - sortBy: createdAt | price | name | stock.
    - sortOrder: asc | desc.

    Returns:
    - A page of products and the pagination details.
    """
    products, total = search_products(
        db,
        offset=(page - 1) * limit,
        limit=limit,
        category_id=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {
        "success": True,
        "data": {
            "products": products,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": (total + limit - 1) // limit,
            },
        },
    }


@router.get(
    "/categories/all",
    response_model=Envelope[CategoryList],
    summary="Get all categories",
)
def read_categories(db: Annotated[Session, Depends(get_db)]):
    return {"success": True, "data": {"categories": list_categories(db)}}


@router.get(
    "/{product_id}",
    response_model=Envelope[ProductData],
    summary="Get a product by ID",
)
def read_product(
    product_id: Annotated[int, Path(title="Product ID", description="The product ID")],
    db: Annotated[Session, Depends(get_db)],
):
    product = get_active_product(db, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )
    return {"success": True, "data": {"product": product}}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=Envelope[ProductData],
    summary="Create a product",
)
def add_product(
    payload: ProductCreate,
    current_admin: Annotated[UserModel, Depends(get_current_active_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """
    Endpoint to add a new product to the catalog. Admins only.

    Raises:
    - 404 if the category does not exist.
    - 400 if another product already uses the SKU.
    """
    if get_category(db, payload.category_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    if get_product_by_sku(db, payload.sku) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product with this SKU already exists",
        )

    try:
        product = create_product(db, payload)
    except IntegrityError as e:
        # Log and handle database integrity errors
        logger.error(f"Error adding product: {e}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product with this SKU already exists",
        )

    logger.info(f"Admin {current_admin.id} created product {product.id}")
    return {
        "success": True,
        "message": "Product created successfully",
        "data": {"product": product},
    }
