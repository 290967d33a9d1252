from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .common import text_field

CategoryName = text_field(2, 100)


class CategoryRef(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class CategoryCreate(BaseModel):
    name: CategoryName
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[CategoryName] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryOut(CategoryRef):
    description: Optional[str] = None
    is_active: bool
    created_at: str
    updated_at: str
