from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.roles import TRANSACTION_STATUS_CHOICES, TRANSACTION_TYPE_CHOICES, choice_pattern
from .common import Pagination, blank_to_none
from .product import ProductRef
from .user import UserSummary
from .warehouse import WarehouseRef

TYPE_PATTERN = choice_pattern(TRANSACTION_TYPE_CHOICES)
STATUS_PATTERN = choice_pattern(TRANSACTION_STATUS_CHOICES)

OPTIONAL_TEXT_FIELDS = (
    "reason",
    "notes",
    "supplier_name",
    "supplier_contact",
    "customer_name",
    "customer_contact",
    "batch_number",
)


class TransactionCreate(BaseModel):
    type: str = Field(pattern=TYPE_PATTERN)
    product_id: int
    warehouse_id: int
    destination_warehouse_id: Optional[int] = None
    # Range checks depend on the type and happen when the movement is applied.
    quantity: int
    unit_cost: Optional[float] = Field(default=None, ge=0)
    reason: Optional[str] = None
    notes: Optional[str] = None
    supplier_name: Optional[str] = None
    supplier_contact: Optional[str] = None
    customer_name: Optional[str] = None
    customer_contact: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[datetime] = None
    transaction_date: Optional[datetime] = None
    attachments: Optional[list[dict[str, Any]]] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "type": "inbound",
                "product_id": 1,
                "warehouse_id": 1,
                "quantity": 25,
                "unit_cost": 12.5,
                "supplier_name": "Acme Supplies",
            }
        }
    }

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def _blank_is_missing(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator("expiry_date", "transaction_date", "unit_cost", mode="before")
    @classmethod
    def _blank_value_is_missing(cls, value: object) -> object:
        return blank_to_none(value)


class TransactionOut(BaseModel):
    id: int
    type: str
    reference_number: str
    product_id: int
    warehouse_id: int
    destination_warehouse_id: Optional[int] = None
    user_id: int
    quantity: int
    unit_cost: float
    total_cost: Decimal
    reason: Optional[str] = None
    notes: Optional[str] = None
    supplier_name: Optional[str] = None
    supplier_contact: Optional[str] = None
    customer_name: Optional[str] = None
    customer_contact: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[str] = None
    transaction_date: str
    status: str
    attachments: list[dict[str, Any]] = Field(default_factory=list)
    quantity_before: Optional[int] = None
    quantity_after: Optional[int] = None
    product: Optional[ProductRef] = None
    warehouse: Optional[WarehouseRef] = None
    destination_warehouse: Optional[WarehouseRef] = None
    user: Optional[UserSummary] = None
    created_at: str

    model_config = {"from_attributes": True}


class TransactionPage(BaseModel):
    transactions: list[TransactionOut]
    pagination: Pagination
