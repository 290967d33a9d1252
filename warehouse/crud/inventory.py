"""Read and metadata helpers for per-warehouse stock levels.

Quantities are never written here; see ``crud.transactions``.
"""

from __future__ import annotations

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError
from ..core.timestamps import parse_timestamp, utcnow_iso
from ..models.inventory import Inventory
from ..models.product import Product
from ..models.warehouse import Warehouse

LOW_STOCK_CLAUSE = Inventory.quantity <= Product.min_stock_level


def list_inventory(
    db: Session,
    *,
    warehouse_id: int | None = None,
    product_id: int | None = None,
    category_id: int | None = None,
    low_stock: bool = False,
) -> list[Inventory]:
    """Stock rows, most recently touched first."""

    stmt = select(Inventory).join(Product, Product.id == Inventory.product_id)
    if warehouse_id is not None:
        stmt = stmt.where(Inventory.warehouse_id == warehouse_id)
    if product_id is not None:
        stmt = stmt.where(Inventory.product_id == product_id)
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
    if low_stock:
        stmt = stmt.where(LOW_STOCK_CLAUSE)
    stmt = stmt.order_by(desc(Inventory.updated_at), desc(Inventory.id))
    return db.execute(stmt).unique().scalars().all()


def get_inventory(db: Session, inventory_id: int) -> Inventory:
    row = db.get(Inventory, inventory_id)
    if not row:
        raise NotFoundError("Inventory record not found")
    return row


def get_inventory_summary(db: Session, *, active_only: bool = False) -> dict[str, int]:
    """Headline counts for the dashboard cards.

    With ``active_only`` the stock of deactivated products is left out.
    """

    total_products = db.execute(
        select(func.count(Product.id)).where(Product.is_active.is_(True))
    ).scalar_one()
    total_warehouses = db.execute(
        select(func.count(Warehouse.id)).where(Warehouse.is_active.is_(True))
    ).scalar_one()
    items = select(func.coalesce(func.sum(Inventory.quantity), 0)).join(Product, Product.id == Inventory.product_id)
    low_stock = select(func.count(Inventory.id)).join(Product, Product.id == Inventory.product_id).where(LOW_STOCK_CLAUSE)
    if active_only:
        items = items.where(Product.is_active.is_(True))
        low_stock = low_stock.where(Product.is_active.is_(True))
    total_items = db.execute(items).scalar_one()
    low_stock_items = db.execute(low_stock).scalar_one()
    return {
        "total_products": int(total_products or 0),
        "total_warehouses": int(total_warehouses or 0),
        "total_items": int(total_items or 0),
        "low_stock_items": int(low_stock_items or 0),
    }


def update_inventory(db: Session, row: Inventory, payload: dict) -> Inventory:
    """Update location, notes, reservation and count date of a stock row."""

    data = {key: value for key, value in payload.items() if value is not None}
    if "reserved_quantity" in data:
        reserved = int(data["reserved_quantity"])
        if reserved < 0 or reserved > (row.quantity or 0):
            raise ValueError("reserved_quantity must be between 0 and the quantity on hand")
        row.reserved_quantity = reserved
    if "location" in data:
        row.location = data["location"] or None
    if "notes" in data:
        row.notes = data["notes"] or None
    if "last_count_date" in data:
        row.last_count_date = parse_timestamp(data["last_count_date"])
    row.updated_at = utcnow_iso()
    db.commit()
    db.refresh(row)
    return row
