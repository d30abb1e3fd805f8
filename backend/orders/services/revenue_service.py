from datetime import datetime, time
from decimal import Decimal

from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from orders.models import Order


class RevenueService:
    @staticmethod
    def daily_summary(start_date=None, end_date=None):
        """
        Count and total of COMPLETED orders per completion date, oldest first.

        Dates are inclusive and interpreted in the current time zone.
        """
        queryset = Order.objects.filter(
            status=Order.OrderStatus.COMPLETED, completed_at__isnull=False
        )
        tz = timezone.get_current_timezone()
        if start_date:
            queryset = queryset.filter(
                completed_at__gte=timezone.make_aware(datetime.combine(start_date, time.min), tz)
            )
        if end_date:
            queryset = queryset.filter(
                completed_at__lte=timezone.make_aware(datetime.combine(end_date, time.max), tz)
            )

        rows = (
            queryset.annotate(day=TruncDate("completed_at", tzinfo=tz))
            .values("day")
            .annotate(order_count=Count("id"), revenue=Sum("total"))
            .order_by("day")
        )

        days = [
            {
                "date": row["day"],
                "order_count": row["order_count"],
                "revenue": row["revenue"] or Decimal("0.00"),
            }
            for row in rows
        ]
        return {
            "days": days,
            "order_count": sum(day["order_count"] for day in days),
            "revenue": sum((day["revenue"] for day in days), Decimal("0.00")),
        }
