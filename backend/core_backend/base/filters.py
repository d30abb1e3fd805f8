import django_filters
from django.db import models
from django.utils import timezone
from datetime import datetime, time
import logging

logger = logging.getLogger(__name__)


class FlexibleDateTimeFilter(django_filters.DateTimeFilter):
    """
    A DateTimeFilter that handles date-only inputs.

    When a date-only value like "2025-11-11" is provided:
    - For 'gte'/'gt' lookups: Uses start of day (00:00:00)
    - For 'lte'/'lt' lookups: Uses end of day (23:59:59.999999)

    A full datetime (e.g. "2025-11-11T10:30:00Z") is used as given.
    """

    def filter(self, qs, value):
        # Midnight values most likely came from a date-only string
        if isinstance(value, datetime) and value.time() == time(0, 0, 0):
            if self.lookup_expr in ['lte', 'lt']:
                value = datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)
                if timezone.is_naive(value):
                    value = timezone.make_aware(value)
                logger.debug(f"FlexibleDateTimeFilter: Adjusted {self.field_name}__{self.lookup_expr} to end of day: {value}")

        return super().filter(qs, value)


class BaseFilterSet(django_filters.FilterSet):
    """
    Base filter set with common filtering patterns.

    Uses FlexibleDateTimeFilter for every DateTimeField filter so date-only
    inputs like "2025-11-11" behave as full-day ranges.
    """

    created_after = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_before = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='lte')

    @classmethod
    def filter_for_field(cls, field, field_name, lookup_expr='exact'):
        if isinstance(field, models.DateTimeField):
            return FlexibleDateTimeFilter(field_name=field_name, lookup_expr=lookup_expr)
        return super().filter_for_field(field, field_name, lookup_expr)

    class Meta:
        abstract = True
