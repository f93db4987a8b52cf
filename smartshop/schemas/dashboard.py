"""
Pydantic schemas for dashboard and status endpoints.
"""
from typing import Optional
from datetime import datetime

from smartshop.schemas.common import CamelModel


class StorageSize(CamelModel):
    text: str
    bytes: int


class InventoryStats(CamelModel):
    """Catalog overview."""
    count: int
    total_items: int
    investment: float  # sum of purchase_price * stock
    storage: StorageSize


class SyncStatus(CamelModel):
    """Background remote mirror state."""
    running: bool
    pending_count: int
    pending_by_table: dict[str, int]
    dirty_tables: list[str] = []  # remote copy is missing local writes


class HealthCheck(CamelModel):
    status: str
    version: str
    database: bool
    pending_sync: Optional[int] = None
    timestamp: datetime
