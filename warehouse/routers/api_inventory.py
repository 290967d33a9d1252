from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.errors import as_http_error
from ..crud.inventory import get_inventory, get_inventory_summary, list_inventory, update_inventory
from ..db.session import get_db
from ..deps.auth import get_current_user, require_writer
from ..schemas.inventory import InventoryOut, InventorySummary, InventoryUpdate

router = APIRouter(prefix="/api/inventory", tags=["inventory"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[InventoryOut])
def api_list_inventory(
    warehouse_id: Optional[int] = None,
    product_id: Optional[int] = None,
    category_id: Optional[int] = None,
    low_stock: bool = False,
    db: Session = Depends(get_db),
):
    return list_inventory(
        db,
        warehouse_id=warehouse_id,
        product_id=product_id,
        category_id=category_id,
        low_stock=low_stock,
    )


@router.get("/summary", response_model=InventorySummary)
def api_inventory_summary(db: Session = Depends(get_db)):
    return get_inventory_summary(db)


@router.patch("/{inventory_id}", response_model=InventoryOut, dependencies=[Depends(require_writer)])
def api_update_inventory(inventory_id: int, payload: InventoryUpdate, db: Session = Depends(get_db)):
    try:
        row = get_inventory(db, inventory_id)
        return update_inventory(db, row, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise as_http_error(exc) from exc
