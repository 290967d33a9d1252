from __future__ import annotations

from pydantic import BaseModel

from .inventory import InventorySummary
from .transaction import TransactionOut


class RecentTransactions(BaseModel):
    recent: list[TransactionOut]
    inbound_count: int
    outbound_count: int


class DashboardOverview(BaseModel):
    overview: InventorySummary
    transactions: RecentTransactions


class TrendPoint(BaseModel):
    date: str
    type: str
    count: int


class CategoryShare(BaseModel):
    category_id: int
    name: str
    product_count: int
