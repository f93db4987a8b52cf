"""Core application modules."""
from smartshop.core.config import Settings, get_settings
from smartshop.core.database import Base, LocalStore
from smartshop.core.exceptions import (
    AppException,
    ConfigurationError,
    StorageFailure,
    RemoteSyncFailure,
    ResourceNotFoundError,
    ProductNotFound,
    QuantityExceedsStock,
    InvalidQuantity,
    SaleStateError,
    MalformedBackupFile,
    RestoreNotConfirmed,
    RecognitionUnavailable
)

__all__ = [
    "Settings",
    "get_settings",
    "Base",
    "LocalStore",
    "AppException",
    "ConfigurationError",
    "StorageFailure",
    "RemoteSyncFailure",
    "ResourceNotFoundError",
    "ProductNotFound",
    "QuantityExceedsStock",
    "InvalidQuantity",
    "SaleStateError",
    "MalformedBackupFile",
    "RestoreNotConfirmed",
    "RecognitionUnavailable",
]
