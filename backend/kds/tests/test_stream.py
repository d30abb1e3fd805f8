"""
Order event stream tests.

The consumer is driven directly with an ApplicationCommunicator; the user is
placed in the scope the way JWTAuthMiddleware would.
"""
import asyncio
import json

import pytest
from channels.testing import ApplicationCommunicator
from django.contrib.auth.models import AnonymousUser

from kds.consumers import OrderStreamConsumer
from kds.events import OrderEvent, OrderEventBus, OrderEventType
from users.models import User


def stream_scope(user):
    return {
        "type": "http",
        "http_version": "1.1",
        "method": "GET",
        "path": "/api/orders/stream/",
        "query_string": b"",
        "headers": [],
        "user": user,
    }


def open_stream(bus, user, keepalive_seconds=60):
    app = OrderStreamConsumer.as_asgi(event_bus=bus, keepalive_seconds=keepalive_seconds)
    return ApplicationCommunicator(app, stream_scope(user))


def decode_event(message):
    text = message["body"].decode("utf-8")
    assert text.startswith("data: ") and text.endswith("\n\n")
    return json.loads(text[len("data: "):])


async def wait_for_subscribers(bus, count):
    for _ in range(100):
        if bus.subscriber_count() == count:
            return
        await asyncio.sleep(0.01)
    raise AssertionError(f"expected {count} subscribers, have {bus.subscriber_count()}")


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestOrderStream:
    async def test_kitchen_receives_connected_then_events(self):
        bus = OrderEventBus()
        communicator = open_stream(bus, User(email="kitchen@example.com", role=User.Role.KITCHEN))
        await communicator.send_input({"type": "http.request", "body": b""})

        start = await communicator.receive_output(1)
        assert start["type"] == "http.response.start"
        assert start["status"] == 200
        assert (b"Content-Type", b"text/event-stream") in start["headers"]

        connected = await communicator.receive_output(1)
        assert decode_event(connected) == {"type": "connected", "message": "Stream connected"}
        assert connected["more_body"] is True

        await wait_for_subscribers(bus, len(OrderEventType))
        bus.publish(
            OrderEvent(type=OrderEventType.STATUS_CHANGED, order_id="o-1", order_number=7, status="READY")
        )

        payload = decode_event(await communicator.receive_output(1))
        assert payload["type"] == "order.status.changed"
        assert payload["order_id"] == "o-1"
        assert payload["order_number"] == 7
        assert payload["status"] == "READY"

        await communicator.send_input({"type": "http.disconnect"})
        await communicator.wait(1)
        assert bus.subscriber_count() == 0

    async def test_events_keep_their_order(self):
        bus = OrderEventBus()
        communicator = open_stream(bus, User(email="admin@example.com", role=User.Role.ADMIN))
        await communicator.send_input({"type": "http.request", "body": b""})
        await communicator.receive_output(1)
        await communicator.receive_output(1)
        await wait_for_subscribers(bus, len(OrderEventType))

        for event_type in (OrderEventType.CREATED, OrderEventType.UPDATED):
            bus.publish(OrderEvent(type=event_type, order_id="o-2", order_number=2, status="PENDING"))

        first = decode_event(await communicator.receive_output(1))
        second = decode_event(await communicator.receive_output(1))
        assert [first["type"], second["type"]] == ["order.created", "order.updated"]

        await communicator.send_input({"type": "http.disconnect"})
        await communicator.wait(1)

    async def test_keepalive(self):
        bus = OrderEventBus()
        communicator = open_stream(
            bus, User(email="kitchen@example.com", role=User.Role.KITCHEN), keepalive_seconds=0.05
        )
        await communicator.send_input({"type": "http.request", "body": b""})
        await communicator.receive_output(1)
        await communicator.receive_output(1)

        keepalive = await communicator.receive_output(1)
        assert keepalive["body"] == b": keepalive\n\n"

        await communicator.send_input({"type": "http.disconnect"})
        await communicator.wait(1)

    async def test_anonymous_is_unauthorized(self):
        bus = OrderEventBus()
        communicator = open_stream(bus, AnonymousUser())
        await communicator.send_input({"type": "http.request", "body": b""})

        start = await communicator.receive_output(1)
        assert start["status"] == 401
        await communicator.receive_output(1)
        assert bus.subscriber_count() == 0

    @pytest.mark.parametrize("role", [User.Role.CASHIER, User.Role.CUSTOMER])
    async def test_other_roles_are_forbidden(self, role):
        bus = OrderEventBus()
        communicator = open_stream(bus, User(email="someone@example.com", role=role))
        await communicator.send_input({"type": "http.request", "body": b""})

        start = await communicator.receive_output(1)
        assert start["status"] == 403
        await communicator.receive_output(1)
        assert bus.subscriber_count() == 0

    async def test_each_connection_has_its_own_subscriptions(self):
        bus = OrderEventBus()
        user = User(email="kitchen@example.com", role=User.Role.KITCHEN)
        first, second = open_stream(bus, user), open_stream(bus, user)
        for communicator in (first, second):
            await communicator.send_input({"type": "http.request", "body": b""})
            await communicator.receive_output(1)
            await communicator.receive_output(1)
        await wait_for_subscribers(bus, 2 * len(OrderEventType))

        await first.send_input({"type": "http.disconnect"})
        await first.wait(1)
        assert bus.subscriber_count() == len(OrderEventType)

        bus.publish(OrderEvent(type=OrderEventType.CREATED, order_id="o-3", order_number=3))
        assert decode_event(await second.receive_output(1))["order_id"] == "o-3"

        await second.send_input({"type": "http.disconnect"})
        await second.wait(1)
        assert bus.subscriber_count() == 0
