from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import CapturePaymentSerializer, OrderSerializer
from orders.services import TerminalCheckoutService
from users.permissions import IsCashierOrAdmin


class PaymentActionsMixin:
    """
    Card capture and tap-to-pay terminal actions for OrderViewSet.
    """

    @action(detail=True, methods=["post"], url_path="capture-payment", permission_classes=[IsCashierOrAdmin])
    def capture_payment(self, request: Request, pk=None) -> Response:
        order = self.get_object()
        serializer = CapturePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order, receipt = self.get_order_service().capture_payment(
            order.id, serializer.validated_data["payment_token"]
        )
        order = self.get_queryset().get(pk=order.pk)
        return Response(
            {
                "order": OrderSerializer(order, context={"request": request}).data,
                "receipt": receipt.to_dict(),
            }
        )

    @action(
        detail=True,
        methods=["get", "post"],
        url_path="terminal-checkout",
        permission_classes=[IsCashierOrAdmin],
    )
    def terminal_checkout(self, request: Request, pk=None) -> Response:
        order = self.get_object()
        if request.method == "GET":
            return Response(TerminalCheckoutService.check_status(order.id))
        return Response(TerminalCheckoutService.create_checkout(order.id))
