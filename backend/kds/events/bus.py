"""
In-process publish/subscribe for order lifecycle events.

One bus is built when the kds app loads (KdsConfig.ready) and handed to the
order services and the kitchen event stream. Tests construct their own.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional
import itertools
import logging

from django.dispatch import Signal
from django.utils import timezone

logger = logging.getLogger(__name__)


class OrderEventType(str, Enum):
    CREATED = "order.created"
    UPDATED = "order.updated"
    STATUS_CHANGED = "order.status.changed"


@dataclass(frozen=True)
class OrderEvent:
    type: OrderEventType
    order_id: str
    order_number: Optional[int] = None
    status: Optional[str] = None
    timestamp: datetime = field(default_factory=timezone.now)

    @classmethod
    def for_order(cls, event_type, order):
        return cls(
            type=OrderEventType(event_type),
            order_id=str(order.id),
            order_number=order.order_number,
            status=order.status,
        )

    def to_dict(self):
        return {
            "type": self.type.value,
            "order_id": self.order_id,
            "order_number": self.order_number,
            "status": self.status,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Subscription:
    id: int
    event_type: OrderEventType
    handler: Callable[[OrderEvent], None]


class OrderEventBus:
    """
    Fan-out of order events to subscribed handlers.

    Each bus owns one Signal per event type, so separate buses never see
    each other's events. Handlers run synchronously on the publishing
    thread, in subscription order. Events published with no subscribers
    are dropped. A failing handler is logged and does not stop delivery
    to the others.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self._signals = {event_type: Signal() for event_type in OrderEventType}

    def subscribe(self, event_type, handler) -> Subscription:
        subscription = Subscription(
            id=next(self._ids),
            event_type=OrderEventType(event_type),
            handler=handler,
        )

        def receiver(sender, event, **kwargs):
            return handler(event)

        self._signals[subscription.event_type].connect(
            receiver, weak=False, dispatch_uid=subscription.id
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        # Unknown or already removed handles are ignored
        self._signals[subscription.event_type].disconnect(dispatch_uid=subscription.id)

    def publish(self, event: OrderEvent) -> None:
        signal = self._signals[event.type]
        if not signal.has_listeners():
            logger.debug(f"No subscribers for {event.type.value} (order #{event.order_number})")
            return

        for receiver, response in signal.send_robust(sender=self.__class__, event=event):
            if isinstance(response, Exception):
                logger.error(
                    f"Order event handler failed for {event.type.value} "
                    f"(order #{event.order_number}): {response}",
                    exc_info=(type(response), response, response.__traceback__),
                )

    def subscriber_count(self, event_type=None) -> int:
        if event_type is None:
            return sum(len(signal.receivers) for signal in self._signals.values())
        return len(self._signals[OrderEventType(event_type)].receivers)
