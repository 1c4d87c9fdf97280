# tcommerce/core/exceptions.py
"""
Domain exceptions raised by the cart core.

These carry no HTTP knowledge; `tcommerce.core.error_handlers` maps
them onto status codes at the API boundary.
"""
import uuid


class DomainException(Exception):
    """Base exception for domain layer."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class CartError(DomainException):
    """Base class for every cart mutation/read failure."""


class ProductUnavailable(CartError):
    """Referenced product does not exist or is inactive."""

    def __init__(self, product_id: uuid.UUID):
        super().__init__(
            message="Product not found or inactive",
            code="PRODUCT_UNAVAILABLE",
        )
        self.product_id = product_id


class InsufficientStock(CartError):
    """Requested (or accumulated) quantity exceeds current stock."""

    def __init__(self, product_id: uuid.UUID, requested: int, available: int):
        super().__init__(
            message=f"Insufficient stock available: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidQuantity(CartError):
    """Quantity is zero, negative or not an integer."""

    def __init__(self, quantity: object):
        super().__init__(
            message="Quantity must be a positive integer",
            code="INVALID_QUANTITY",
        )
        self.quantity = quantity


class LineNotFound(CartError):
    """No cart line exists for the (owner, product) pair."""

    def __init__(self, product_id: uuid.UUID):
        super().__init__(
            message="Cart item not found",
            code="LINE_NOT_FOUND",
        )
        self.product_id = product_id


class PersistenceFailure(CartError):
    """The underlying store failed (connectivity, unexpected constraint, ...)."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message=message, code="PERSISTENCE_FAILURE")
