import logging

from django.db import transaction

from .bus import OrderEvent, OrderEventType

logger = logging.getLogger(__name__)


class OrderEventPublisher:
    """
    Publishes order events to the bus once the current transaction commits.

    Subscribers re-fetch the order when notified, so they must never see an
    event for a write that could still roll back.
    """

    def __init__(self, bus):
        self.bus = bus

    def _publish(self, event: OrderEvent):
        if transaction.get_connection().in_atomic_block:
            logger.debug(f"Deferring {event.type.value} for order #{event.order_number} until commit")
            transaction.on_commit(lambda: self.bus.publish(event))
        else:
            self.bus.publish(event)

    def order_created(self, order):
        logger.info(f"Publishing order.created for order #{order.order_number}")
        self._publish(OrderEvent.for_order(OrderEventType.CREATED, order))

    def order_updated(self, order):
        logger.info(f"Publishing order.updated for order #{order.order_number}")
        self._publish(OrderEvent.for_order(OrderEventType.UPDATED, order))

    def order_status_changed(self, order):
        logger.info(f"Publishing order.status.changed for order #{order.order_number}: {order.status}")
        self._publish(OrderEvent.for_order(OrderEventType.STATUS_CHANGED, order))
