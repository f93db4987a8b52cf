"""
Pydantic schemas for request/response validation and persistence.
"""
from smartshop.schemas.common import CamelModel
from smartshop.schemas.product import (
    ProductBase, ProductCreate, ProductUpdate, Product, RestockRequest
)
from smartshop.schemas.sale import (
    SaleStatus, CustomerInfo, Sale, SaleCreate, WALK_IN_CUSTOMER
)
from smartshop.schemas.report import (
    ReportFilter, ReportResult, DailyReportRow, SoldProduct
)
from smartshop.schemas.dashboard import (
    StorageSize, InventoryStats, SyncStatus, HealthCheck
)
from smartshop.schemas.backup import BackupSnapshot, RestoreResponse
from smartshop.schemas.scan import (
    ScanResult, ScanStatus, SimilarProduct, ScanOutcome
)

__all__ = [
    "CamelModel",

    # Product schemas
    "ProductBase", "ProductCreate", "ProductUpdate", "Product", "RestockRequest",

    # Sale schemas
    "SaleStatus", "CustomerInfo", "Sale", "SaleCreate", "WALK_IN_CUSTOMER",

    # Report schemas
    "ReportFilter", "ReportResult", "DailyReportRow", "SoldProduct",

    # Dashboard schemas
    "StorageSize", "InventoryStats", "SyncStatus", "HealthCheck",

    # Backup schemas
    "BackupSnapshot", "RestoreResponse",

    # Scan schemas
    "ScanResult", "ScanStatus", "SimilarProduct", "ScanOutcome",
]
