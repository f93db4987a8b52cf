"""
Sale collection of the local durable store.
"""
from sqlalchemy import Index

from smartshop.core.database import Base


class SaleRecord(Base):
    """Ledger entry; `sort_key` holds the sale timestamp."""

    __tablename__ = "sales"

    __table_args__ = (
        Index("idx_sales_timestamp", "sort_key"),
    )

    def __repr__(self) -> str:
        return f"<SaleRecord(id={self.id}, timestamp={self.sort_key})>"
