from .bus import OrderEvent, OrderEventBus, OrderEventType
from .publishers import OrderEventPublisher

__all__ = [
    'OrderEvent',
    'OrderEventBus',
    'OrderEventType',
    'OrderEventPublisher',
]
