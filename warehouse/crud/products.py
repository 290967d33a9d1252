"""Product catalogue CRUD helpers."""

from __future__ import annotations

from sqlalchemy import desc, func, or_, select
from sqlalchemy.orm import Session

from ..core.errors import ConflictError, NotFoundError
from ..core.references import barcode_aliases
from ..core.timestamps import utcnow_iso
from ..models.category import Category
from ..models.inventory import Inventory
from ..models.product import Product
from ..models.transaction import Transaction

FIELDS = (
    "code",
    "name",
    "description",
    "category_id",
    "unit",
    "unit_price",
    "cost_price",
    "min_stock_level",
    "max_stock_level",
    "weight",
    "dimensions",
    "barcode",
    "sku",
    "image",
    "is_active",
)

NULLABLE_FIELDS = frozenset(
    ("description", "max_stock_level", "weight", "dimensions", "barcode", "sku", "image")
)


def list_products(
    db: Session,
    *,
    page: int = 1,
    limit: int = 20,
    search: str | None = None,
    category_id: int | None = None,
    is_active: bool | None = None,
    barcode: str | None = None,
) -> tuple[list[Product], int]:
    """Return one page of products (newest first) and the total match count."""

    stmt = select(Product)
    if search and search.strip():
        needle = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Product.code.ilike(needle),
                Product.name.ilike(needle),
                Product.description.ilike(needle),
            )
        )
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
    if is_active is not None:
        stmt = stmt.where(Product.is_active.is_(is_active))
    if barcode:
        # A scanned code may be stored with or without its leading zero.
        stmt = stmt.where(Product.barcode.in_(barcode_aliases(barcode)))

    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    stmt = stmt.order_by(desc(Product.created_at), desc(Product.id)).limit(limit).offset((page - 1) * limit)
    return db.execute(stmt).unique().scalars().all(), int(total)


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


def _clean(payload: dict) -> dict:
    # Optional columns may be cleared with an explicit null; the rest keep their value.
    data = {
        key: payload[key]
        for key in FIELDS
        if key in payload and (payload[key] is not None or key in NULLABLE_FIELDS)
    }
    for key in ("code", "barcode", "sku"):
        if isinstance(data.get(key), str):
            data[key] = data[key].strip() or None
    return data


def _ensure_category(db: Session, category_id: int) -> None:
    if not db.get(Category, category_id):
        raise ValueError("Invalid category ID")


def _ensure_unique(db: Session, data: dict, exclude_id: int | None = None) -> None:
    checks = (
        ("code", Product.code, "Product code already exists"),
        ("barcode", Product.barcode, "Product barcode already exists"),
        ("sku", Product.sku, "Product SKU already exists"),
    )
    for key, column, message in checks:
        value = data.get(key)
        if not value:
            continue
        stmt = select(Product.id).where(column == value)
        if exclude_id is not None:
            stmt = stmt.where(Product.id != exclude_id)
        if db.execute(stmt).first():
            raise ConflictError(message)


def _check_stock_levels(min_level: int | None, max_level: int | None) -> None:
    if min_level is not None and max_level is not None and max_level < min_level:
        raise ValueError("max_stock_level must not be lower than min_stock_level")


def create_product(db: Session, payload: dict) -> Product:
    data = _clean(payload)
    _ensure_category(db, data["category_id"])
    _ensure_unique(db, data)
    _check_stock_levels(data.get("min_stock_level"), data.get("max_stock_level"))
    data.setdefault("min_stock_level", 0)
    data.setdefault("cost_price", 0.0)
    data.setdefault("is_active", True)

    now = utcnow_iso()
    product = Product(**data, created_at=now, updated_at=now)
    product.tags = payload.get("tags")
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def update_product(db: Session, product: Product, payload: dict) -> Product:
    data = _clean(payload)
    if "category_id" in data and data["category_id"] != product.category_id:
        _ensure_category(db, data["category_id"])
    _ensure_unique(db, data, exclude_id=product.id)
    _check_stock_levels(
        data.get("min_stock_level", product.min_stock_level),
        data.get("max_stock_level", product.max_stock_level),
    )
    for key, value in data.items():
        setattr(product, key, value)
    if payload.get("tags") is not None:
        product.tags = payload["tags"]
    product.updated_at = utcnow_iso()
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product: Product) -> None:
    """Remove a product that holds no stock and has no movement history.

    Anything else should be deactivated instead so reports keep their rows.
    """

    on_hand = db.execute(
        select(func.coalesce(func.sum(Inventory.quantity), 0)).where(Inventory.product_id == product.id)
    ).scalar_one()
    if on_hand > 0:
        raise ConflictError("Cannot delete product with existing inventory. Set as inactive instead.")
    has_history = db.execute(select(Transaction.id).where(Transaction.product_id == product.id).limit(1)).first()
    if has_history:
        raise ConflictError("Cannot delete product with transaction history. Set as inactive instead.")
    db.delete(product)
    db.commit()
