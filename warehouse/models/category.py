from __future__ import annotations

from sqlalchemy import Boolean, Column, Integer, Text
from sqlalchemy.orm import relationship

from ..db.session import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    products = relationship("Product", back_populates="category")
