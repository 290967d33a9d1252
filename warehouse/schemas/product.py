from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .category import CategoryRef
from .common import Pagination, blank_to_none, text_field
from .warehouse import WarehouseRef

ProductCode = text_field(2, 50)
ProductName = text_field(2, 200)
Unit = text_field(1, 20)

OPTIONAL_TEXT_FIELDS = ("description", "dimensions", "barcode", "sku", "image")


class ProductRef(BaseModel):
    id: int
    code: str
    name: str
    unit: str

    model_config = {"from_attributes": True}


class _ProductFields(BaseModel):
    description: Optional[str] = None
    cost_price: Optional[float] = Field(default=None, ge=0)
    min_stock_level: Optional[int] = Field(default=None, ge=0)
    max_stock_level: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    dimensions: Optional[str] = None
    barcode: Optional[str] = None
    sku: Optional[str] = None
    image: Optional[str] = None
    tags: Optional[list[str]] = None

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def _blank_is_missing(cls, value: object) -> object:
        return blank_to_none(value)


class ProductCreate(_ProductFields):
    code: ProductCode
    name: ProductName
    category_id: int
    unit: Unit
    unit_price: float = Field(ge=0)


class ProductUpdate(_ProductFields):
    code: Optional[ProductCode] = None
    name: Optional[ProductName] = None
    category_id: Optional[int] = None
    unit: Optional[Unit] = None
    unit_price: Optional[float] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class ProductOut(ProductRef):
    description: Optional[str] = None
    category_id: int
    category: Optional[CategoryRef] = None
    unit_price: float
    cost_price: Optional[float] = None
    min_stock_level: int
    max_stock_level: Optional[int] = None
    weight: Optional[float] = None
    dimensions: Optional[str] = None
    barcode: Optional[str] = None
    sku: Optional[str] = None
    image: Optional[str] = None
    is_active: bool
    tags: list[str] = Field(default_factory=list)
    created_at: str
    updated_at: str


class ProductStockOut(BaseModel):
    id: int
    warehouse: WarehouseRef
    quantity: int
    reserved_quantity: int
    available_quantity: int
    location: Optional[str] = None
    last_count_date: Optional[str] = None

    model_config = {"from_attributes": True}


class ProductDetail(ProductOut):
    inventory: list[ProductStockOut] = Field(default_factory=list)


class ProductPage(BaseModel):
    products: list[ProductOut]
    pagination: Pagination
