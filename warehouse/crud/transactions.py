"""Stock movements and the engine that applies them to inventory.

Every change to ``Inventory.quantity`` goes through ``create_transaction`` so
that each unit moved has a matching ``Transaction`` row with a reference
number, and the before/after quantities of the affected stock row.
"""

from __future__ import annotations

import logging

from sqlalchemy import desc, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import ConflictError, InsufficientStockError, NotFoundError
from ..core.references import generate_reference_number
from ..core.roles import (
    STATUS_COMPLETED,
    TRANSACTION_ADJUSTMENT,
    TRANSACTION_INBOUND,
    TRANSACTION_OUTBOUND,
    TRANSACTION_TRANSFER,
    TRANSACTION_TYPE_CHOICES,
    normalize_transaction_type,
)
from ..core.timestamps import parse_timestamp, utcnow_iso
from ..models.inventory import Inventory
from ..models.product import Product
from ..models.transaction import Transaction
from ..models.user import User
from ..models.warehouse import Warehouse

logger = logging.getLogger(__name__)

DETAIL_FIELDS = (
    "reason",
    "notes",
    "supplier_name",
    "supplier_contact",
    "customer_name",
    "customer_contact",
    "batch_number",
)


def _filtered(
    stmt,
    *,
    type: str | None = None,
    warehouse_id: int | None = None,
    product_id: int | None = None,
    status: str | None = None,
    start_date: object | None = None,
    end_date: object | None = None,
):
    if type:
        stmt = stmt.where(Transaction.type == normalize_transaction_type(type))
    if warehouse_id is not None:
        # Transfers show up for both ends of the move.
        stmt = stmt.where(
            or_(Transaction.warehouse_id == warehouse_id, Transaction.destination_warehouse_id == warehouse_id)
        )
    if product_id is not None:
        stmt = stmt.where(Transaction.product_id == product_id)
    if status:
        stmt = stmt.where(Transaction.status == status)
    start = parse_timestamp(start_date)
    if start:
        stmt = stmt.where(Transaction.transaction_date >= start)
    end = parse_timestamp(end_date, end_of_day=True)
    if end:
        stmt = stmt.where(Transaction.transaction_date <= end)
    return stmt


def list_transactions(db: Session, *, page: int = 1, limit: int = 20, **filters) -> tuple[list[Transaction], int]:
    """Return one page of transactions (newest first) and the total match count."""

    stmt = _filtered(select(Transaction), **filters)
    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    stmt = stmt.order_by(desc(Transaction.transaction_date), desc(Transaction.id))
    stmt = stmt.limit(limit).offset((page - 1) * limit)
    return db.execute(stmt).unique().scalars().all(), int(total)


def export_transactions(db: Session, **filters) -> list[Transaction]:
    """All matching transactions, newest first, for exports."""

    stmt = _filtered(select(Transaction), **filters)
    stmt = stmt.order_by(desc(Transaction.transaction_date), desc(Transaction.id))
    return db.execute(stmt).unique().scalars().all()


def get_transaction(db: Session, transaction_id: int) -> Transaction:
    transaction = db.get(Transaction, transaction_id)
    if not transaction:
        raise NotFoundError("Transaction not found")
    return transaction


def _reference_exists(db: Session, reference: str) -> bool:
    stmt = select(Transaction.id).where(Transaction.reference_number == reference)
    return db.execute(stmt).first() is not None


def _locked_stock_row(db: Session, product_id: int, warehouse_id: int, now: str) -> Inventory:
    """Fetch the (product, warehouse) stock row for update, creating it at zero."""

    stmt = (
        select(Inventory)
        .where(Inventory.product_id == product_id, Inventory.warehouse_id == warehouse_id)
        .with_for_update(of=Inventory)
    )
    row = db.execute(stmt).unique().scalars().first()
    if row is None:
        row = Inventory(
            product_id=product_id,
            warehouse_id=warehouse_id,
            quantity=0,
            reserved_quantity=0,
            created_at=now,
            updated_at=now,
        )
        db.add(row)
        db.flush()
    return row


def _take(row: Inventory, quantity: int) -> None:
    available = row.quantity or 0
    if available < quantity:
        raise InsufficientStockError(available=available, requested=quantity)
    row.quantity = available - quantity
    if (row.reserved_quantity or 0) > row.quantity:
        row.reserved_quantity = row.quantity


def _validate(db: Session, tx_type: str, data: dict) -> tuple[Product, Warehouse, Warehouse | None, int]:
    if tx_type not in TRANSACTION_TYPE_CHOICES:
        raise ValueError("Invalid transaction type")
    quantity = int(data.get("quantity") or 0)
    minimum = 0 if tx_type == TRANSACTION_ADJUSTMENT else 1
    if quantity < minimum:
        raise ValueError(f"quantity must be at least {minimum}")

    product = db.get(Product, data.get("product_id"))
    warehouse = db.get(Warehouse, data.get("warehouse_id"))
    if not product or not warehouse:
        raise ValueError("Invalid product or warehouse ID")

    destination = None
    if tx_type == TRANSACTION_TRANSFER:
        destination_id = data.get("destination_warehouse_id")
        if not destination_id:
            raise ValueError("destination_warehouse_id is required for transfers")
        if destination_id == warehouse.id:
            raise ValueError("destination warehouse must differ from the source warehouse")
        destination = db.get(Warehouse, destination_id)
        if not destination:
            raise ValueError("Invalid destination warehouse ID")
    return product, warehouse, destination, quantity


def create_transaction(db: Session, payload: dict, user: User) -> Transaction:
    """Record a stock movement and apply it to inventory atomically.

    * ``inbound`` adds ``quantity`` to the warehouse's stock row.
    * ``outbound`` removes it, refusing to go below zero.
    * ``adjustment`` sets the stock row to ``quantity`` (a recount).
    * ``transfer`` moves ``quantity`` from ``warehouse_id`` to
      ``destination_warehouse_id``.

    Raises ``ValueError`` for invalid input and ``InsufficientStockError``
    when there is not enough stock; the session is rolled back in both cases.
    """

    data = payload.copy()
    tx_type = normalize_transaction_type(data.get("type"))
    product, warehouse, destination, quantity = _validate(db, tx_type, data)
    product_id, warehouse_id = product.id, warehouse.id

    now = utcnow_iso()
    reference = generate_reference_number(tx_type, exists=lambda candidate: _reference_exists(db, candidate))
    transaction = Transaction(
        type=tx_type,
        reference_number=reference,
        product_id=product.id,
        warehouse_id=warehouse.id,
        destination_warehouse_id=destination.id if destination else None,
        user_id=user.id,
        quantity=quantity,
        unit_cost=float(data.get("unit_cost") or 0),
        expiry_date=parse_timestamp(data.get("expiry_date")),
        transaction_date=parse_timestamp(data.get("transaction_date")) or now,
        status=STATUS_COMPLETED,
        created_at=now,
        updated_at=now,
    )
    for key in DETAIL_FIELDS:
        setattr(transaction, key, data.get(key))
    transaction.attachments = data.get("attachments")

    try:
        db.add(transaction)
        if destination is not None:
            # Lock both ends in warehouse id order so opposite transfers cannot deadlock.
            rows = {
                location_id: _locked_stock_row(db, product.id, location_id, now)
                for location_id in sorted((warehouse.id, destination.id))
            }
            source, target = rows[warehouse.id], rows[destination.id]
        else:
            source = _locked_stock_row(db, product.id, warehouse.id, now)
        before = source.quantity or 0

        if tx_type == TRANSACTION_INBOUND:
            source.quantity = before + quantity
        elif tx_type == TRANSACTION_OUTBOUND:
            _take(source, quantity)
        elif tx_type == TRANSACTION_ADJUSTMENT:
            source.quantity = quantity
            if (source.reserved_quantity or 0) > quantity:
                source.reserved_quantity = quantity
            source.last_count_date = now
        elif tx_type == TRANSACTION_TRANSFER:
            _take(source, quantity)
            target.quantity = (target.quantity or 0) + quantity
            target.updated_at = now

        source.updated_at = now
        transaction.quantity_before = before
        transaction.quantity_after = source.quantity
        db.commit()
    except InsufficientStockError as exc:
        db.rollback()
        logger.warning(
            "transaction.rejected",
            extra={
                "extra_data": {
                    "type": tx_type,
                    "product_id": product_id,
                    "warehouse_id": warehouse_id,
                    "requested": exc.requested,
                    "available": exc.available,
                }
            },
        )
        raise
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Transaction could not be recorded, please retry") from exc
    except Exception:
        db.rollback()
        raise

    db.refresh(transaction)
    logger.info(
        "transaction.created",
        extra={
            "extra_data": {
                "reference_number": transaction.reference_number,
                "type": tx_type,
                "product_id": product.id,
                "warehouse_id": warehouse.id,
                "destination_warehouse_id": transaction.destination_warehouse_id,
                "quantity": quantity,
                "quantity_after": transaction.quantity_after,
            }
        },
    )
    return transaction
