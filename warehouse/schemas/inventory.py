from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import text_field
from .product import ProductOut
from .warehouse import WarehouseRef

Location = text_field(1, 100)


class InventoryOut(BaseModel):
    id: int
    product_id: int
    warehouse_id: int
    quantity: int
    reserved_quantity: int
    available_quantity: int
    is_low_stock: bool
    location: Optional[str] = None
    last_count_date: Optional[str] = None
    notes: Optional[str] = None
    product: ProductOut
    warehouse: WarehouseRef
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class InventoryUpdate(BaseModel):
    location: Optional[Location] = None
    notes: Optional[str] = None
    reserved_quantity: Optional[int] = Field(default=None, ge=0)
    last_count_date: Optional[datetime] = None


class InventorySummary(BaseModel):
    total_products: int
    total_warehouses: int
    total_items: int
    low_stock_items: int
