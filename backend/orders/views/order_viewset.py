import logging

from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.base.viewsets import ReadOnlyBaseViewSet
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import OrderCreateSerializer, OrderSerializer, RevenueQuerySerializer
from orders.services import OrderStoreService, RevenueService
from users.permissions import IsAdminRole

from .base import OrderServiceMixin
from .payment_actions import PaymentActionsMixin
from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)


class OrderViewSet(
    StatusActionsMixin,
    PaymentActionsMixin,
    OrderServiceMixin,
    mixins.CreateModelMixin,
    ReadOnlyBaseViewSet,
):
    """
    Orders API.

    Staff see every order; customers only see orders placed from their account.
    Writes go through OrderService so every change is priced, validated and
    announced to the kitchen.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]
    filterset_class = OrderFilter
    ordering = ["-created_at", "-order_number"]

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user
        if not user.is_staff_role:
            queryset = queryset.filter(customer=user)
        return queryset

    def get_serializer_class(self):
        if self.action == "create":
            return OrderCreateSerializer
        return OrderSerializer

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = self.get_order_service().place_order(
            caller=request.user,
            items=data["items"],
            payment_method=data["payment_method"],
            order_type=data["order_type"],
            customer_name=data.get("customer_name") or None,
        )
        order = OrderStoreService.find_by_id(order.id)
        return Response(
            OrderSerializer(order, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )

    def list(self, request: Request, *args, **kwargs) -> Response:
        queryset = self.filter_queryset(self.get_queryset())

        limit = request.query_params.get("limit")
        if limit is None:
            return super().list(request, *args, **kwargs)

        try:
            limit = int(limit)
        except ValueError:
            raise ValidationError({"limit": "Must be an integer."})

        orders = OrderStoreService.find_many(limit=limit, queryset=queryset)
        return Response(OrderSerializer(orders, many=True, context={"request": request}).data)

    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request: Request) -> Response:
        """The caller's own order history, newest first."""
        orders = OrderStoreService.find_by_customer(request.user)
        page = self.paginate_queryset(orders)
        if page is not None:
            serializer = OrderSerializer(page, many=True, context={"request": request})
            return self.get_paginated_response(serializer.data)
        return Response(OrderSerializer(orders, many=True, context={"request": request}).data)

    @action(detail=False, methods=["get"], url_path="revenue", permission_classes=[IsAdminRole])
    def revenue(self, request: Request) -> Response:
        serializer = RevenueQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        summary = RevenueService.daily_summary(
            start_date=serializer.validated_data.get("start"),
            end_date=serializer.validated_data.get("end"),
        )
        return Response(summary)
