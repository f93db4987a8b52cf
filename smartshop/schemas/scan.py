"""
Pydantic schemas for image recognition.
"""
from typing import Optional
from enum import Enum
from pydantic import Field

from smartshop.schemas.common import CamelModel
from smartshop.schemas.product import Product


class ScanResult(CamelModel):
    """Raw answer of the recognition service."""
    product_id: Optional[str] = None
    confidence: float = 0
    suggested_name: Optional[str] = None
    description: Optional[str] = None


class ScanStatus(str, Enum):
    MATCHED = "matched"
    SUGGESTED = "suggested"
    NOT_FOUND = "not_found"


class SimilarProduct(CamelModel):
    id: str
    name: str
    score: float


class ScanOutcome(CamelModel):
    """What the caller acts on after a scan."""
    status: ScanStatus
    confidence: float = 0
    product: Optional[Product] = None
    suggested_name: Optional[str] = None
    description: Optional[str] = None
    similar_products: list[SimilarProduct] = Field(default_factory=list)
