"""SQLAlchemy model for a physical storage site."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, Integer, Text

from ..db.session import Base

DEFAULT_COUNTRY = "Iran"


class Warehouse(Base):
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False, unique=True)
    code = Column(Text, nullable=False, unique=True, index=True)
    address = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    postal_code = Column(Text, nullable=True)
    country = Column(Text, nullable=True, default=DEFAULT_COUNTRY)
    phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    manager_name = Column(Text, nullable=True)
    capacity = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)


__all__ = ["Warehouse"]
