"""
Orders views package - modular view layer with mixins.
"""

from .order_viewset import OrderViewSet
from .kitchen_viewset import KitchenOrderViewSet

__all__ = [
    'OrderViewSet',
    'KitchenOrderViewSet',
]
