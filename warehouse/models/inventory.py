"""SQLAlchemy model for the stock level of one product in one warehouse."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ..db.session import Base


class Inventory(Base):
    """Current on-hand quantity for a (product, warehouse) pair.

    ``quantity`` is only ever changed by the transaction engine in
    ``crud.transactions`` and never drops below zero.
    """

    __tablename__ = "inventory"
    __table_args__ = (UniqueConstraint("product_id", "warehouse_id", name="uq_inventory_product_warehouse"),)

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0, index=True)
    reserved_quantity = Column(Integer, nullable=False, default=0)
    location = Column(Text, nullable=True)
    last_count_date = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    product = relationship("Product", back_populates="inventory", lazy="joined")
    warehouse = relationship("Warehouse", lazy="joined")

    @property
    def available_quantity(self) -> int:
        return (self.quantity or 0) - (self.reserved_quantity or 0)

    @property
    def is_low_stock(self) -> bool:
        if self.product is None:
            return False
        return (self.quantity or 0) <= (self.product.min_stock_level or 0)


__all__ = ["Inventory"]
