"""SQLAlchemy model for people who sign in to the warehouse console."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, Integer, Text

from ..core.roles import ROLE_VIEWER
from ..db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(Text, nullable=False, unique=True, index=True)
    email = Column(Text, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default=ROLE_VIEWER)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(Text, nullable=True)
    avatar = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


__all__ = ["User"]
