"""
Local store collections for the SmartShop application.
Import all records here to ensure they're registered with SQLAlchemy.
"""
from smartshop.models.product import ProductRecord
from smartshop.models.sale import SaleRecord

__all__ = [
    "ProductRecord",
    "SaleRecord",
]
