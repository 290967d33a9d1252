"""SQLAlchemy model for a stock movement (inbound, outbound, transfer, adjustment)."""

from __future__ import annotations

import json
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from ..core.roles import STATUS_COMPLETED
from ..db.session import Base

TWOPLACES = Decimal("0.01")


class Transaction(Base):
    __tablename__ = "transactions"
    __allow_unmapped__ = True

    id = Column(Integer, primary_key=True, index=True)
    type = Column(Text, nullable=False, index=True)
    reference_number = Column(Text, nullable=False, unique=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    destination_warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_cost = Column(Float, nullable=False, default=0.0)
    reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    supplier_name = Column(Text, nullable=True)
    supplier_contact = Column(Text, nullable=True)
    customer_name = Column(Text, nullable=True)
    customer_contact = Column(Text, nullable=True)
    batch_number = Column(Text, nullable=True)
    expiry_date = Column(Text, nullable=True)
    transaction_date = Column(Text, nullable=False, index=True)
    status = Column(Text, nullable=False, default=STATUS_COMPLETED, index=True)
    attachments_blob = Column("attachments", Text, nullable=False, default="[]")
    quantity_before = Column(Integer, nullable=True)
    quantity_after = Column(Integer, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    product = relationship("Product", lazy="joined")
    warehouse = relationship("Warehouse", foreign_keys=[warehouse_id], lazy="joined")
    destination_warehouse = relationship("Warehouse", foreign_keys=[destination_warehouse_id], lazy="joined")
    user = relationship("User", lazy="joined")

    @property
    def total_cost(self) -> Decimal:
        unit = Decimal(str(self.unit_cost or 0))
        return (unit * Decimal(self.quantity or 0)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)

    @property
    def attachments(self) -> list[dict[str, object]]:
        raw = self.attachments_blob
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            return []
        if not isinstance(decoded, list):
            return []
        return [dict(item) for item in decoded if isinstance(item, dict)]

    @attachments.setter
    def attachments(self, value: list[dict[str, object]] | None) -> None:
        if value is not None and not isinstance(value, list):
            raise ValueError("attachments must be a list of objects")
        cleaned = [dict(item) for item in (value or []) if isinstance(item, dict)]
        self.attachments_blob = json.dumps(cleaned)


__all__ = ["Transaction"]
