from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.errors import as_http_error
from ..crud.categories import create_category, get_category, list_categories, update_category
from ..db.session import get_db
from ..deps.auth import get_current_user, require_writer
from ..schemas.category import CategoryCreate, CategoryOut, CategoryUpdate

router = APIRouter(prefix="/api/categories", tags=["categories"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[CategoryOut])
def api_list_categories(db: Session = Depends(get_db)):
    return list_categories(db)


@router.get("/{category_id}", response_model=CategoryOut)
def api_get_category(category_id: int, db: Session = Depends(get_db)):
    try:
        return get_category(db, category_id)
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_writer)])
def api_create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    try:
        return create_category(db, payload.model_dump())
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.put("/{category_id}", response_model=CategoryOut, dependencies=[Depends(require_writer)])
def api_update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    try:
        category = get_category(db, category_id)
        return update_category(db, category, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise as_http_error(exc) from exc
