"""
Pydantic schemas for backup snapshots.
"""
from typing import Optional

from smartshop.schemas.common import CamelModel
from smartshop.schemas.product import Product
from smartshop.schemas.sale import Sale


class BackupSnapshot(CamelModel):
    """Full catalog and ledger export."""
    version: str
    timestamp: int
    device_name: Optional[str] = None
    products: list[Product]
    sales: list[Sale]


class RestoreResponse(CamelModel):
    products: int
    sales: int
