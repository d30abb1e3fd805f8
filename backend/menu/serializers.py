from rest_framework import serializers
from core_backend.base import BaseModelSerializer
from .models import CustomizationTemplate, MenuItem


class CustomizationTemplateSerializer(BaseModelSerializer):
    class Meta:
        model = CustomizationTemplate
        fields = ["id", "menu_item", "type", "name", "price_delta"]
        read_only_fields = ["id", "menu_item"]
        select_related_fields = ["menu_item"]

    def validate(self, attrs):
        menu_item = self.context.get("menu_item") or getattr(self.instance, "menu_item", None)
        customization_type = attrs.get("type")
        if menu_item and customization_type:
            duplicates = CustomizationTemplate.objects.filter(
                menu_item=menu_item, type=customization_type
            )
            if self.instance is not None:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                raise serializers.ValidationError(
                    {"type": f"{menu_item.name} already has a '{customization_type}' customization."}
                )
        return attrs


class MenuItemSerializer(BaseModelSerializer):
    customizations = CustomizationTemplateSerializer(many=True, read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category",
            "available",
            "customizations",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        prefetch_related_fields = ["customizations"]

    def validate_category(self, value):
        value = " ".join(value.split())
        if not value:
            raise serializers.ValidationError("Category cannot be blank.")
        return value

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value
