from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import OrderSerializer
from orders.services import KitchenService
from users.permissions import IsKitchenOrAdmin

from .base import OrderServiceMixin


class KitchenOrderViewSet(OrderServiceMixin, viewsets.ViewSet):
    """
    Kitchen display queue: active orders oldest first, and bulk completion.
    """

    permission_classes = [IsKitchenOrAdmin]

    def list(self, request: Request) -> Response:
        orders = KitchenService.get_active_orders()
        return Response(OrderSerializer(orders, many=True, context={"request": request}).data)

    @action(detail=True, methods=["post"], url_path="complete-through")
    def complete_through(self, request: Request, pk=None) -> Response:
        """
        Mark every pending/preparing order up to and including this one as completed.
        """
        result = KitchenService.mark_all_up_to(self.get_order_service(), pk)
        return Response(result.to_dict())
