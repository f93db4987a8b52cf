"""
Pydantic schemas for Sale records.
"""
from typing import Optional
from enum import Enum
from pydantic import Field

from smartshop.schemas.common import CamelModel

WALK_IN_CUSTOMER = "Walk-in customer"


class SaleStatus(str, Enum):
    """Sale lifecycle tags. No transitions are enforced."""
    SUCCESS = "success"
    PENDING = "pending"
    SHIPPING = "shipping"


class CustomerInfo(CamelModel):
    """Customer snapshot captured at sale time."""
    full_name: str = ""
    address: str = ""
    id_card: str = ""


class Sale(CamelModel):
    """
    Immutable ledger entry.

    Name and prices are copied from the product when the sale is made so
    that repricing a product never changes historical reports.
    """
    id: str
    product_id: str
    product_name: str
    quantity: int = Field(..., ge=1)
    selling_price: float = Field(..., ge=0)
    purchase_price: float = Field(..., ge=0)
    total_amount: float
    timestamp: int
    customer: Optional[CustomerInfo] = None
    status: Optional[SaleStatus] = None

    @property
    def is_walk_in(self) -> bool:
        return self.customer is None or not self.customer.full_name.strip()

    @property
    def customer_name(self) -> str:
        return WALK_IN_CUSTOMER if self.is_walk_in else self.customer.full_name.strip()

    @property
    def cost(self) -> float:
        return self.purchase_price * self.quantity


class SaleCreate(CamelModel):
    """Schema for selling a product."""
    product_id: str
    quantity: int = 1
    customer: Optional[CustomerInfo] = None
    status: SaleStatus = SaleStatus.SUCCESS
