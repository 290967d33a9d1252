"""Reusable field types and pagination envelopes shared by the API schemas."""

from __future__ import annotations

import math
from typing import Annotated, Optional

from pydantic import BaseModel, StringConstraints

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def text_field(min_length: int = 1, max_length: int | None = None, pattern: str | None = None):
    """A stripped string constrained to ``min_length``..``max_length`` characters."""

    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length, pattern=pattern),
    ]


Email = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, pattern=EMAIL_PATTERN, max_length=255)]


def blank_to_none(value: object) -> object:
    """Treat empty strings from HTML forms as "not provided"."""

    if isinstance(value, str) and not value.strip():
        return None
    return value


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit) if limit else 0)


class MessageOut(BaseModel):
    message: str
    detail: Optional[str] = None
