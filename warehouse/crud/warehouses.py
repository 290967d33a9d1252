from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ..core.errors import ConflictError, NotFoundError
from ..core.references import normalize_code
from ..core.timestamps import utcnow_iso
from ..models.warehouse import DEFAULT_COUNTRY, Warehouse

FIELDS = (
    "name",
    "code",
    "address",
    "city",
    "state",
    "postal_code",
    "country",
    "phone",
    "email",
    "manager_name",
    "capacity",
    "is_active",
)


def list_warehouses(db: Session, *, include_inactive: bool = False) -> list[Warehouse]:
    stmt = select(Warehouse).order_by(Warehouse.name)
    if not include_inactive:
        stmt = stmt.where(Warehouse.is_active.is_(True))
    return db.execute(stmt).scalars().all()


def get_warehouse(db: Session, warehouse_id: int) -> Warehouse:
    warehouse = db.get(Warehouse, warehouse_id)
    if not warehouse:
        raise NotFoundError("Warehouse not found")
    return warehouse


def _ensure_unique(db: Session, *, name: str | None, code: str | None, exclude_id: int | None = None) -> None:
    clauses = []
    if name:
        clauses.append(Warehouse.name == name)
    if code:
        clauses.append(Warehouse.code == code)
    if not clauses:
        return
    stmt = select(Warehouse).where(or_(*clauses))
    if exclude_id is not None:
        stmt = stmt.where(Warehouse.id != exclude_id)
    if db.execute(stmt).scalars().first():
        raise ConflictError("Warehouse with this code or name already exists")


def create_warehouse(db: Session, payload: dict) -> Warehouse:
    data = {key: payload.get(key) for key in FIELDS if payload.get(key) is not None}
    data["code"] = normalize_code(data["code"])
    _ensure_unique(db, name=data["name"], code=data["code"])
    data.setdefault("country", DEFAULT_COUNTRY)
    data.setdefault("capacity", 0)
    data.setdefault("is_active", True)
    now = utcnow_iso()
    warehouse = Warehouse(**data, created_at=now, updated_at=now)
    db.add(warehouse)
    db.commit()
    db.refresh(warehouse)
    return warehouse


def update_warehouse(db: Session, warehouse: Warehouse, payload: dict) -> Warehouse:
    data = {key: value for key, value in payload.items() if key in FIELDS and value is not None}
    if "code" in data:
        data["code"] = normalize_code(data["code"])
    name = data.get("name") if data.get("name") != warehouse.name else None
    code = data.get("code") if data.get("code") != warehouse.code else None
    _ensure_unique(db, name=name, code=code, exclude_id=warehouse.id)
    for key, value in data.items():
        setattr(warehouse, key, value)
    warehouse.updated_at = utcnow_iso()
    db.commit()
    db.refresh(warehouse)
    return warehouse
