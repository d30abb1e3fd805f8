from rest_framework import serializers
from orders.models import Order


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.OrderStatus.choices)


class OrderNumberCorrectionSerializer(serializers.Serializer):
    order_number = serializers.IntegerField(min_value=1)
    adjust_subsequent = serializers.BooleanField(default=True)


class CapturePaymentSerializer(serializers.Serializer):
    payment_token = serializers.CharField(max_length=255)


class RevenueQuerySerializer(serializers.Serializer):
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("start"), attrs.get("end")
        if start and end and start > end:
            raise serializers.ValidationError({"end": "End date must not be before start date."})
        return attrs
