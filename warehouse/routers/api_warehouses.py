from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.errors import as_http_error
from ..crud.warehouses import create_warehouse, get_warehouse, list_warehouses, update_warehouse
from ..db.session import get_db
from ..deps.auth import get_current_user, require_writer
from ..schemas.warehouse import WarehouseCreate, WarehouseOut, WarehouseUpdate

router = APIRouter(prefix="/api/warehouses", tags=["warehouses"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[WarehouseOut])
def api_list_warehouses(db: Session = Depends(get_db)):
    return list_warehouses(db)


@router.get("/{warehouse_id}", response_model=WarehouseOut)
def api_get_warehouse(warehouse_id: int, db: Session = Depends(get_db)):
    try:
        return get_warehouse(db, warehouse_id)
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.post("", response_model=WarehouseOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_writer)])
def api_create_warehouse(payload: WarehouseCreate, db: Session = Depends(get_db)):
    try:
        return create_warehouse(db, payload.model_dump())
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.put("/{warehouse_id}", response_model=WarehouseOut, dependencies=[Depends(require_writer)])
def api_update_warehouse(warehouse_id: int, payload: WarehouseUpdate, db: Session = Depends(get_db)):
    try:
        warehouse = get_warehouse(db, warehouse_id)
        return update_warehouse(db, warehouse, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise as_http_error(exc) from exc
