from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer that provides common functionality.

    Meta may declare `select_related_fields` and `prefetch_related_fields`;
    OptimizedQuerysetMixin applies them to the viewset queryset.
    """

    class Meta:
        select_related_fields = []
        prefetch_related_fields = []
