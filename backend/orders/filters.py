import django_filters
from core_backend.base.filters import BaseFilterSet, FlexibleDateTimeFilter
from .models import Order


class OrderFilter(BaseFilterSet):
    """
    Order list filters. Date-only values cover the whole day.
    """

    status = django_filters.MultipleChoiceFilter(choices=Order.OrderStatus.choices)
    created_at__gte = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_at__lte = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='lte')

    class Meta:
        model = Order
        fields = ['status', 'payment_method', 'order_type']
