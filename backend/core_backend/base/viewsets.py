from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from .mixins import OptimizedQuerysetMixin
from ..pagination import StandardPagination


class BaseViewSet(OptimizedQuerysetMixin, viewsets.ModelViewSet):
    """
    Writable viewset for admin-managed records such as the menu.

    Lists are paginated and accept `?search=`, `?ordering=` and any
    `filterset_fields` the subclass declares. The serializer's Meta decides
    which relations get select_related/prefetch_related.
    """

    pagination_class = StandardPagination
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    ordering = ["-id"]


class ReadOnlyBaseViewSet(OptimizedQuerysetMixin, viewsets.ReadOnlyModelViewSet):
    """
    List/retrieve only. Orders and users use it and add their own
    actions for state changes.
    """

    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
