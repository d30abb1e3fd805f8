import logging

from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import APIException
from rest_framework.response import Response

from core_backend.base.viewsets import BaseViewSet
from users.permissions import IsAdminOrReadOnly
from .models import CustomizationTemplate, MenuItem
from .serializers import CustomizationTemplateSerializer, MenuItemSerializer

logger = logging.getLogger(__name__)


class MenuItemInUse(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This menu item appears on existing orders. Mark it unavailable instead."
    default_code = "menu_item_in_use"


class MenuItemViewSet(BaseViewSet):
    """
    Public menu reads; admin-only writes.

    Anonymous and customer callers only see available items. Staff may pass
    `?include_unavailable=true` to list everything.
    """

    queryset = MenuItem.objects.all()
    serializer_class = MenuItemSerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None

    filterset_fields = ["category", "available"]
    search_fields = ["name", "description", "category"]
    ordering_fields = ["category", "name", "price"]
    ordering = ["category", "name"]

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user
        include_unavailable = self.request.query_params.get("include_unavailable") == "true"
        if include_unavailable and user.is_authenticated and user.is_staff_role:
            return queryset
        if self.action in ("list", "retrieve", "customizations") and self.request.method == "GET":
            return queryset.filter(available=True)
        return queryset

    def perform_create(self, serializer):
        menu_item = serializer.save()
        logger.info(f"Menu item {menu_item.id} '{menu_item.name}' created by {self.request.user.email}")

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise MenuItemInUse()
        logger.info(f"Menu item {instance.name} deleted by {self.request.user.email}")

    @action(detail=True, methods=["get", "post"], url_path="customizations")
    def customizations(self, request, pk=None):
        menu_item = self.get_object()

        if request.method == "GET":
            serializer = CustomizationTemplateSerializer(
                menu_item.customizations.all(), many=True
            )
            return Response(serializer.data)

        serializer = CustomizationTemplateSerializer(
            data=request.data, context={"menu_item": menu_item}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save(menu_item=menu_item)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["patch", "delete"],
        url_path=r"customizations/(?P<customization_id>[^/.]+)",
    )
    def customization_detail(self, request, pk=None, customization_id=None):
        menu_item = self.get_object()
        template = get_object_or_404(
            CustomizationTemplate, pk=customization_id, menu_item=menu_item
        )

        if request.method == "DELETE":
            template.delete()
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = CustomizationTemplateSerializer(
            template, data=request.data, partial=True, context={"menu_item": menu_item}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
