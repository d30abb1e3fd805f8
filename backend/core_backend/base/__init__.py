"""
Core backend base components.

Foundational classes shared by the app viewsets, serializers and filters.
"""

from .viewsets import BaseViewSet, ReadOnlyBaseViewSet
from .serializers import BaseModelSerializer
from .mixins import OptimizedQuerysetMixin
from .filters import BaseFilterSet

__all__ = [
    # ViewSets
    'BaseViewSet',
    'ReadOnlyBaseViewSet',

    # Serializers
    'BaseModelSerializer',

    # Mixins
    'OptimizedQuerysetMixin',

    # Filters
    'BaseFilterSet',
]
