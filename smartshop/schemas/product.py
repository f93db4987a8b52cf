"""
Pydantic schemas for Product records.
"""
from typing import Optional
from pydantic import Field

from smartshop.schemas.common import CamelModel
from smartshop.utils import new_id, now_millis


class ProductBase(CamelModel):
    """Base product schema."""
    name: str = Field(..., min_length=1, max_length=500)
    brand: Optional[str] = Field(None, max_length=255)
    category: Optional[str] = Field(None, max_length=255)
    description: str = ""
    unit: Optional[str] = Field(None, max_length=50)
    sku: Optional[str] = Field(None, max_length=100)
    purchase_price: float = Field(default=0, ge=0)
    selling_price: float = Field(default=0, ge=0)
    image_url: str = ""


class ProductCreate(ProductBase):
    """Schema for creating a product (manual entry or AI-suggested name)."""
    stock: int = Field(default=0, ge=0)


class ProductUpdate(CamelModel):
    """Schema for editing a product. `id` and `createdAt` are immutable."""
    name: Optional[str] = Field(None, min_length=1, max_length=500)
    brand: Optional[str] = Field(None, max_length=255)
    category: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    unit: Optional[str] = Field(None, max_length=50)
    sku: Optional[str] = Field(None, max_length=100)
    purchase_price: Optional[float] = Field(None, ge=0)
    selling_price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None


class Product(ProductBase):
    """A catalog entry as stored locally, remotely and in backups."""
    id: str = Field(default_factory=new_id)
    stock: int = Field(default=0, ge=0)
    created_at: int = Field(default_factory=now_millis)

    @property
    def stock_value(self) -> float:
        """Purchase value of the units on hand."""
        return self.purchase_price * self.stock


class RestockRequest(CamelModel):
    quantity: int = Field(..., ge=1)
