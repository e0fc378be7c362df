from typing import Optional


class ServiceError(Exception):
    """Base class for errors the API turns into a JSON response."""
    status_code = 500
    body_key = "error"
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidArgument(ServiceError):
    status_code = 400
    default_message = "Invalid argument"


class InsufficientStock(ServiceError):
    status_code = 400
    default_message = "Not enough stock available"


class InvalidCredentials(ServiceError):
    status_code = 401
    body_key = "message"
    default_message = "Invalid credentials"


class ProductNotFound(ServiceError):
    status_code = 400
    default_message = "Product not found"


class RecordNotFound(ServiceError):
    status_code = 404
    default_message = "Record not found"


class AmbiguousProduct(ServiceError):
    status_code = 409
    default_message = "Product name matches more than one inventory item"


class StorageFailure(ServiceError):
    """Any error raised by the data-access layer; carries the underlying message."""
    status_code = 500
    default_message = "Storage failure"


class ConnectionLost(StorageFailure):
    """Transport-level failure. The connection manager reconnects in the background."""
    default_message = "Database connection lost"


class WorkflowTimeout(ServiceError):
    status_code = 504
    default_message = "Order placement timed out; re-read orders and inventory before retrying"
