"""SQLAlchemy model for catalogue items that can be stocked."""

from __future__ import annotations

import json

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from ..db.session import Base


class Product(Base):
    __tablename__ = "products"
    __allow_unmapped__ = True

    id = Column(Integer, primary_key=True, index=True)
    code = Column(Text, nullable=False, unique=True, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    unit = Column(Text, nullable=False)
    unit_price = Column(Float, nullable=False, default=0.0)
    cost_price = Column(Float, nullable=True, default=0.0)
    min_stock_level = Column(Integer, nullable=False, default=0)
    max_stock_level = Column(Integer, nullable=True)
    weight = Column(Float, nullable=True)
    dimensions = Column(Text, nullable=True)
    barcode = Column(Text, nullable=True, unique=True)
    sku = Column(Text, nullable=True, unique=True)
    image = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    tags_blob = Column("tags", Text, nullable=False, default="[]")
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    category = relationship("Category", back_populates="products", lazy="joined")
    inventory = relationship("Inventory", back_populates="product", cascade="all, delete-orphan")

    @property
    def tags(self) -> list[str]:
        raw = self.tags_blob
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            return []
        if not isinstance(decoded, list):
            return []
        return [str(tag) for tag in decoded]

    @tags.setter
    def tags(self, value: list[str] | None) -> None:
        cleaned = [str(tag).strip() for tag in (value or []) if str(tag).strip()]
        self.tags_blob = json.dumps(cleaned)


__all__ = ["Product"]
