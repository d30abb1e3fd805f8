import logging

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.models import Order
from orders.serializers import (
    OrderItemsUpdateSerializer,
    OrderNumberCorrectionSerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
)
from users.permissions import IsAdminRole, IsStaffRole

logger = logging.getLogger(__name__)


class StatusActionsMixin:
    """
    Mixin for order status, item edit and renumber actions.

    This mixin provides action methods for OrderViewSet.
    """

    def _order_response(self, order):
        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order, context={"request": self.request}).data)

    @action(detail=True, methods=["post"], url_path="status", permission_classes=[IsStaffRole])
    def update_status(self, request: Request, pk=None) -> Response:
        """
        Moves the order along the kitchen workflow.
        """
        order = self.get_object()
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self.get_order_service().transition_status(
            order.id, serializer.validated_data["status"]
        )
        return self._order_response(order)

    @action(detail=True, methods=["post"], url_path="cancel", permission_classes=[IsStaffRole])
    def cancel(self, request: Request, pk=None) -> Response:
        order = self.get_object()
        order = self.get_order_service().transition_status(order.id, Order.OrderStatus.CANCELLED)
        return self._order_response(order)

    @action(detail=True, methods=["put"], url_path="items", permission_classes=[IsStaffRole])
    def update_items(self, request: Request, pk=None) -> Response:
        """
        Replaces every item on the order. Prices come from the current menu.
        """
        order = self.get_object()
        serializer = OrderItemsUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self.get_order_service().edit_order(
            order.id,
            serializer.validated_data["items"],
            customer_name=serializer.validated_data.get("customer_name") or None,
        )
        return self._order_response(order)

    @action(detail=True, methods=["post"], url_path="order-number", permission_classes=[IsAdminRole])
    def correct_order_number(self, request: Request, pk=None) -> Response:
        order = self.get_object()
        serializer = OrderNumberCorrectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        logger.info(
            f"{request.user.email} renumbering order #{order.order_number} "
            f"to #{serializer.validated_data['order_number']}"
        )
        order = self.get_order_service().correct_order_number(
            order.id,
            serializer.validated_data["order_number"],
            adjust_subsequent=serializer.validated_data["adjust_subsequent"],
        )
        return self._order_response(order)
