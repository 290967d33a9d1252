from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import ConflictError, NotFoundError
from ..core.timestamps import utcnow_iso
from ..models.category import Category


def list_categories(db: Session, *, include_inactive: bool = False) -> list[Category]:
    stmt = select(Category).order_by(Category.name)
    if not include_inactive:
        stmt = stmt.where(Category.is_active.is_(True))
    return db.execute(stmt).scalars().all()


def get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFoundError("Category not found")
    return category


def _ensure_unique_name(db: Session, name: str, exclude_id: int | None = None) -> None:
    stmt = select(Category.id).where(Category.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    if db.execute(stmt).first():
        raise ConflictError("Category name already exists")


def create_category(db: Session, payload: dict) -> Category:
    _ensure_unique_name(db, payload["name"])
    now = utcnow_iso()
    category = Category(
        name=payload["name"],
        description=payload.get("description"),
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category: Category, payload: dict) -> Category:
    data = {key: value for key, value in payload.items() if value is not None}
    if "name" in data and data["name"] != category.name:
        _ensure_unique_name(db, data["name"], exclude_id=category.id)
    for key in ("name", "description", "is_active"):
        if key in data:
            setattr(category, key, data[key])
    category.updated_at = utcnow_iso()
    db.commit()
    db.refresh(category)
    return category
