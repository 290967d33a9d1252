"""Aggregations behind the dashboard cards and charts."""

from __future__ import annotations

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.roles import TRANSACTION_INBOUND, TRANSACTION_OUTBOUND
from ..core.timestamps import day_floor_iso
from ..crud.inventory import get_inventory_summary
from ..models.category import Category
from ..models.product import Product
from ..models.transaction import Transaction

RECENT_LIMIT = 10


def build_overview(db: Session, *, window_days: int | None = None) -> dict[str, object]:
    """Inventory counts plus the recent-activity block for the window.

    The window starts at midnight UTC ``window_days`` days ago.
    """

    since = day_floor_iso(window_days or settings.DASHBOARD_WINDOW_DAYS)

    recent = (
        db.execute(
            select(Transaction)
            .where(Transaction.transaction_date >= since)
            .order_by(desc(Transaction.transaction_date), desc(Transaction.id))
            .limit(RECENT_LIMIT)
        )
        .unique()
        .scalars()
        .all()
    )
    counts = dict(
        db.execute(
            select(Transaction.type, func.count(Transaction.id))
            .where(Transaction.transaction_date >= since)
            .group_by(Transaction.type)
        ).all()
    )
    return {
        "overview": get_inventory_summary(db, active_only=True),
        "transactions": {
            "recent": recent,
            "inbound_count": int(counts.get(TRANSACTION_INBOUND, 0)),
            "outbound_count": int(counts.get(TRANSACTION_OUTBOUND, 0)),
        },
    }


def transaction_trends(db: Session, days: int = 30) -> list[dict[str, object]]:
    """Per-day, per-type transaction counts since ``days`` days ago.

    Stored dates are ISO text, so the first ten characters are the UTC day.
    """

    day = func.substr(Transaction.transaction_date, 1, 10).label("date")
    stmt = (
        select(day, Transaction.type, func.count(Transaction.id).label("count"))
        .where(Transaction.transaction_date >= day_floor_iso(days))
        .group_by(day, Transaction.type)
        .order_by(day, Transaction.type)
    )
    return [{"date": row.date, "type": row.type, "count": int(row.count)} for row in db.execute(stmt)]


def category_distribution(db: Session) -> list[dict[str, object]]:
    """Active product count per active category, largest first.

    Categories without active products are left out.
    """

    product_count = func.count(Product.id).label("product_count")
    stmt = (
        select(Category.id, Category.name, product_count)
        .join(Product, Product.category_id == Category.id)
        .where(Category.is_active.is_(True), Product.is_active.is_(True))
        .group_by(Category.id, Category.name)
        .order_by(desc(product_count), Category.name)
    )
    return [
        {"category_id": row.id, "name": row.name, "product_count": int(row.product_count)}
        for row in db.execute(stmt)
    ]
