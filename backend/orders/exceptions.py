"""
Order domain exceptions.

Every order operation fails with one of these. The API layer maps them to
HTTP responses in core_backend.exceptions.api_exception_handler.
"""


class OrderServiceError(Exception):
    """Base exception for order lifecycle errors."""

    code = "order_error"

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class OrderValidationError(OrderServiceError):
    """Raised when order input is malformed or empty"""

    code = "validation_error"


class OrderNotFoundError(OrderServiceError):
    """Raised when a referenced order does not exist"""

    code = "not_found"


class MenuItemNotFoundError(OrderNotFoundError):
    """Raised when a line item references an unknown or unavailable menu item"""

    code = "item_not_found"


class InvalidStatusTransitionError(OrderServiceError):
    """Raised when a status change violates the order state machine"""

    code = "invalid_transition"


class PaymentFailedError(OrderServiceError):
    """Raised when the payment gateway declines or times out"""

    code = "payment_failed"


class OrderNumberConflictError(OrderServiceError):
    """Raised when an order number clash survives allocation or renumbering"""

    code = "constraint_violation"
