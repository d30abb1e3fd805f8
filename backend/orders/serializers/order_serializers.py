from rest_framework import serializers
from core_backend.base import BaseModelSerializer
from orders.models import Order, OrderItem, OrderItemCustomization


class OrderItemCustomizationSerializer(BaseModelSerializer):
    class Meta:
        model = OrderItemCustomization
        fields = ["id", "type", "name", "price_delta"]


class OrderItemSerializer(BaseModelSerializer):
    menu_item_name = serializers.CharField(source="menu_item.name", read_only=True)
    customizations = OrderItemCustomizationSerializer(many=True, read_only=True)
    total_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "menu_item",
            "menu_item_name",
            "quantity",
            "unit_price",
            "customizations",
            "total_price",
        ]


class OrderSerializer(BaseModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    customer_email = serializers.EmailField(source="customer.email", read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "payment_method",
            "order_type",
            "customer",
            "customer_email",
            "customer_name",
            "subtotal",
            "surcharge",
            "total",
            "payment_reference",
            "terminal_checkout_reference",
            "items",
            "created_at",
            "updated_at",
            "completed_at",
        ]
        read_only_fields = fields
        select_related_fields = ["customer"]
        prefetch_related_fields = ["items__menu_item", "items__customizations"]


# --- Input serializers (validated data is handed to the service layer) ---

class LineItemInputSerializer(serializers.Serializer):
    menu_item_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    customizations = serializers.ListField(
        child=serializers.RegexField(r"^[a-z][a-z0-9_]*$", max_length=50),
        required=False,
        default=list,
    )


class OrderCreateSerializer(serializers.Serializer):
    items = LineItemInputSerializer(many=True, allow_empty=False)
    payment_method = serializers.ChoiceField(choices=Order.PaymentMethod.choices)
    order_type = serializers.ChoiceField(
        choices=Order.OrderType.choices, default=Order.OrderType.IN_STORE
    )
    customer_name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=150
    )


class OrderItemsUpdateSerializer(serializers.Serializer):
    items = LineItemInputSerializer(many=True, allow_empty=False)
    customer_name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=150
    )
