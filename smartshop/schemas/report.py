"""
Pydantic schemas for sales reports.
"""
from typing import Optional
from datetime import date
from pydantic import Field

from smartshop.schemas.common import CamelModel
from smartshop.schemas.sale import Sale


class ReportFilter(CamelModel):
    """Inclusive calendar-day window plus optional customer/product filters."""
    date_from: date
    date_to: date
    customer_query: Optional[str] = None
    product_id: Optional[str] = None


class ReportResult(CamelModel):
    """Aggregated totals over the filtered ledger."""
    filtered_sales: list[Sale] = Field(default_factory=list)
    revenue: float = 0
    cost: float = 0
    profit: float = 0
    margin: float = 0  # Percent of revenue
    orders_count: int = 0


class DailyReportRow(CamelModel):
    """Totals for one calendar day."""
    date: str
    revenue: float
    profit: float
    orders_count: int


class SoldProduct(CamelModel):
    """A product that appears in the ledger, for the report filter."""
    id: str
    name: str
