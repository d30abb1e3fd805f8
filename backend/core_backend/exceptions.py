"""
Project-wide DRF exception handler.

Translates order domain errors into JSON error responses so views can let
service exceptions propagate instead of catching them one by one.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from orders.exceptions import (
    InvalidStatusTransitionError,
    OrderNotFoundError,
    OrderNumberConflictError,
    OrderServiceError,
    OrderValidationError,
    PaymentFailedError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (OrderValidationError, status.HTTP_400_BAD_REQUEST),
    (OrderNotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidStatusTransitionError, status.HTTP_409_CONFLICT),
    (OrderNumberConflictError, status.HTTP_409_CONFLICT),
    (PaymentFailedError, status.HTTP_402_PAYMENT_REQUIRED),
)


def get_status_for_error(exc):
    for error_class, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def api_exception_handler(exc, context):
    """
    Handle order domain errors, then defer to DRF's default handler.
    """
    if isinstance(exc, OrderServiceError):
        status_code = get_status_for_error(exc)
        request = context.get("request")

        logger.warning(
            f"{exc.__class__.__name__} on {getattr(request, 'method', '?')} "
            f"{getattr(request, 'path', '?')}: {exc.message}"
        )

        body = {"error": exc.message, "code": exc.code}
        if exc.details:
            body["details"] = exc.details
        return Response(body, status=status_code)

    return exception_handler(exc, context)
