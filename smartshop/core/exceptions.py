"""Application exceptions shared by the services and the API layer."""
from typing import Optional, Union


class AppException(Exception):
    """Base exception for application-specific errors."""

    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(AppException):
    """Raised at startup when required credentials are missing."""

    def __init__(self, missing: list[str]):
        super().__init__(
            message=f"Missing required configuration: {', '.join(missing)}",
            status_code=500,
            details={"missing": missing}
        )


class StorageFailure(AppException):
    """Raised when the local durable store cannot be read or written."""

    def __init__(self, operation: str, original_error: Optional[str] = None):
        super().__init__(
            message=f"Local storage failed during {operation}",
            status_code=503,
            details={"operation": operation, "original_error": original_error}
        )


class RemoteSyncFailure(AppException):
    """Raised by the remote table store client. Never surfaced to API callers."""

    def __init__(self, table: str, original_error: Optional[str] = None):
        super().__init__(
            message=f"Remote sync failed for table '{table}'",
            status_code=502,
            details={"table": table, "original_error": original_error}
        )


class ResourceNotFoundError(AppException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Union[int, str]):
        super().__init__(
            message=f"{resource} with identifier '{identifier}' not found",
            status_code=404,
            details={"resource": resource, "identifier": str(identifier)}
        )


class ProductNotFound(ResourceNotFoundError):
    def __init__(self, product_id: str):
        super().__init__("Product", product_id)


class QuantityExceedsStock(AppException):
    """Raised when a sale asks for more units than are in stock."""

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__(
            message=f"Insufficient stock. Requested: {requested}, available: {available}",
            status_code=409,
            details={"product_id": product_id, "requested": requested, "available": available}
        )


class InvalidQuantity(AppException):
    def __init__(self, quantity: int):
        super().__init__(
            message=f"Quantity must be at least 1, got {quantity}",
            status_code=422,
            details={"quantity": quantity}
        )


class SaleStateError(AppException):
    """Raised when the sale transactor is driven out of order."""

    def __init__(self, action: str, state: str):
        super().__init__(
            message=f"Cannot {action} while sale is {state}",
            status_code=409,
            details={"action": action, "state": state}
        )


class MalformedBackupFile(AppException):
    """Raised when an uploaded backup is not a valid snapshot."""

    def __init__(self, reason: str, errors: list = None):
        super().__init__(
            message=f"Backup file is not a valid SmartShop snapshot: {reason}",
            status_code=422,
            details={"reason": reason, "validation_errors": errors or []}
        )


class RestoreNotConfirmed(AppException):
    def __init__(self):
        super().__init__(
            message="Restore overwrites all products and sales; confirmation is required",
            status_code=409,
            details={"confirm": False}
        )


class RecognitionUnavailable(AppException):
    """Raised when the image recognition service cannot produce a result."""

    def __init__(self, message: str, original_error: Optional[str] = None):
        super().__init__(
            message=f"Image recognition unavailable: {message}",
            status_code=503,
            details={"original_error": original_error}
        )
