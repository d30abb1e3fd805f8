"""
Orders serializers package.
"""

from .order_serializers import (
    LineItemInputSerializer,
    OrderCreateSerializer,
    OrderItemCustomizationSerializer,
    OrderItemSerializer,
    OrderItemsUpdateSerializer,
    OrderSerializer,
)

from .status_serializers import (
    CapturePaymentSerializer,
    OrderNumberCorrectionSerializer,
    RevenueQuerySerializer,
    UpdateOrderStatusSerializer,
)

__all__ = [
    # Orders
    'OrderSerializer',
    'OrderItemSerializer',
    'OrderItemCustomizationSerializer',
    'OrderCreateSerializer',
    'OrderItemsUpdateSerializer',
    'LineItemInputSerializer',
    # Actions
    'UpdateOrderStatusSerializer',
    'OrderNumberCorrectionSerializer',
    'CapturePaymentSerializer',
    'RevenueQuerySerializer',
]
