"""
Product collection of the local durable store.
"""
from sqlalchemy import Index

from smartshop.core.database import Base


class ProductRecord(Base):
    """Catalog entry; `sort_key` holds the product's createdAt."""

    __tablename__ = "products"

    __table_args__ = (
        Index("idx_products_created_at", "sort_key"),
    )

    def __repr__(self) -> str:
        return f"<ProductRecord(id={self.id}, created_at={self.sort_key})>"
