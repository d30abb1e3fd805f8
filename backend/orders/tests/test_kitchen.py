"""
Kitchen queue tests: active order ordering and "mark all up to here".
"""
import pytest

from orders.exceptions import InvalidStatusTransitionError, OrderNotFoundError
from orders.models import Order
from orders.services import KitchenService

PENDING = Order.OrderStatus.PENDING
PREPARING = Order.OrderStatus.PREPARING
READY = Order.OrderStatus.READY
COMPLETED = Order.OrderStatus.COMPLETED
CANCELLED = Order.OrderStatus.CANCELLED


@pytest.fixture
def queue(place_order, order_service):
    """Four active orders, oldest first: PENDING, READY, PREPARING, PENDING."""
    orders = [place_order() for _ in range(4)]
    order_service.transition_status(orders[1].id, READY)
    order_service.transition_status(orders[2].id, PREPARING)
    return orders


def status_of(order):
    return Order.objects.get(pk=order.pk).status


@pytest.mark.django_db
class TestActiveOrders:
    def test_oldest_first(self, queue):
        active = KitchenService.get_active_orders()
        assert [o.id for o in active] == [o.id for o in queue]

    def test_finished_orders_are_excluded(self, queue, order_service):
        order_service.transition_status(queue[0].id, COMPLETED)
        order_service.transition_status(queue[3].id, CANCELLED)

        active = KitchenService.get_active_orders()

        assert [o.id for o in active] == [queue[1].id, queue[2].id]

    def test_limit(self, queue):
        assert len(KitchenService.get_active_orders(limit=2)) == 2

    def test_default_limit_from_settings(self, queue, settings):
        settings.KITCHEN_ACTIVE_ORDER_LIMIT = 3
        assert len(KitchenService.get_active_orders()) == 3


@pytest.mark.django_db
class TestMarkAllUpTo:
    def test_completes_up_to_and_including_target(self, queue, order_service):
        result = KitchenService.mark_all_up_to(order_service, queue[2].id)

        assert result.completed == [str(queue[0].id), str(queue[2].id)]
        assert result.failed_order_id is None
        assert [status_of(o) for o in queue] == [COMPLETED, READY, COMPLETED, PENDING]

    def test_ready_orders_are_skipped(self, queue, order_service):
        result = KitchenService.mark_all_up_to(order_service, queue[1].id)

        assert result.completed == [str(queue[0].id)]
        assert status_of(queue[1]) == READY

    def test_target_must_be_active(self, queue, order_service):
        order_service.transition_status(queue[3].id, CANCELLED)

        with pytest.raises(OrderNotFoundError):
            KitchenService.mark_all_up_to(order_service, queue[3].id)

    def test_unknown_target(self, queue, order_service):
        with pytest.raises(OrderNotFoundError):
            KitchenService.mark_all_up_to(order_service, "00000000-0000-0000-0000-000000000000")

    def test_stops_at_first_failure(self, queue, order_service, monkeypatch):
        real_transition = order_service.transition_status

        def flaky_transition(order_id, new_status):
            if order_id == queue[2].id:
                raise InvalidStatusTransitionError("Order changed concurrently.")
            return real_transition(order_id, new_status)

        monkeypatch.setattr(order_service, "transition_status", flaky_transition)

        result = KitchenService.mark_all_up_to(order_service, queue[3].id)

        assert result.completed == [str(queue[0].id)]
        assert result.failed_order_id == str(queue[2].id)
        assert result.error == "Order changed concurrently."
        # Earlier completions stay, later orders are not touched
        assert [status_of(o) for o in queue] == [COMPLETED, READY, PREPARING, PENDING]
