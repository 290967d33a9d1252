from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import as_http_error
from ..crud.products import create_product, delete_product, get_product, list_products, update_product
from ..db.session import get_db
from ..deps.auth import get_current_user, require_writer
from ..schemas.common import MessageOut, Pagination
from ..schemas.product import ProductCreate, ProductDetail, ProductOut, ProductPage, ProductUpdate

router = APIRouter(prefix="/api/products", tags=["products"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=ProductPage)
def api_list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=10000),
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    barcode: Optional[str] = None,
    db: Session = Depends(get_db),
):
    products, total = list_products(
        db, page=page, limit=limit, search=search, category_id=category_id, is_active=is_active, barcode=barcode
    )
    return ProductPage(
        products=[ProductOut.model_validate(item) for item in products],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/{product_id}", response_model=ProductDetail)
def api_get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return get_product(db, product_id)
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_writer)])
def api_create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    try:
        return create_product(db, payload.model_dump())
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.put("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_writer)])
def api_update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    try:
        product = get_product(db, product_id)
        return update_product(db, product, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.delete("/{product_id}", response_model=MessageOut, dependencies=[Depends(require_writer)])
def api_delete_product(product_id: int, db: Session = Depends(get_db)):
    try:
        product = get_product(db, product_id)
        delete_product(db, product)
    except ValueError as exc:
        raise as_http_error(exc) from exc
    return MessageOut(message="Product deleted successfully")
