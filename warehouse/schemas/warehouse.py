from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import Email, blank_to_none, text_field

WarehouseName = text_field(2, 100)
# Upper-case letters and digits only, e.g. "MW01".
WarehouseCode = text_field(2, 20, pattern=r"^[A-Z0-9]+$")
PlaceName = text_field(2, 50)
PostalCode = text_field(5, 20)
Phone = text_field(10, 20)
ManagerName = text_field(2, 100)


class WarehouseRef(BaseModel):
    id: int
    name: str
    code: str

    model_config = {"from_attributes": True}


class _WarehouseFields(BaseModel):
    address: Optional[str] = None
    city: Optional[PlaceName] = None
    state: Optional[PlaceName] = None
    postal_code: Optional[PostalCode] = None
    country: Optional[PlaceName] = None
    phone: Optional[Phone] = None
    email: Optional[Email] = None
    manager_name: Optional[ManagerName] = None
    capacity: Optional[int] = Field(default=None, ge=0)

    @field_validator(
        "city", "state", "postal_code", "country", "phone", "email", "manager_name", mode="before"
    )
    @classmethod
    def _blank_is_missing(cls, value: object) -> object:
        return blank_to_none(value)


class WarehouseCreate(_WarehouseFields):
    name: WarehouseName
    code: WarehouseCode


class WarehouseUpdate(_WarehouseFields):
    name: Optional[WarehouseName] = None
    code: Optional[WarehouseCode] = None
    is_active: Optional[bool] = None


class WarehouseOut(WarehouseRef):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    manager_name: Optional[str] = None
    capacity: int = 0
    is_active: bool
    created_at: str
    updated_at: str
