import asyncio
import json
import logging

from channels.exceptions import StopConsumer
from channels.generic.http import AsyncHttpConsumer
from django.conf import settings

from .events.bus import OrderEventType

logger = logging.getLogger(__name__)

STREAM_ROLES = ("KITCHEN", "ADMIN")


class OrderStreamConsumer(AsyncHttpConsumer):
    """
    Server-Sent Events stream of order lifecycle events for kitchen displays.

    Each connection subscribes its own handlers to the order event bus and
    forwards events as `data:` lines, with a keepalive comment on a timer.
    Clients re-fetch order state when notified; nothing is replayed.
    """

    event_bus = None
    keepalive_seconds = None

    def __init__(self, *args, event_bus=None, keepalive_seconds=None, **kwargs):
        super().__init__(*args, **kwargs)
        if event_bus is not None:
            self.event_bus = event_bus
        if keepalive_seconds is not None:
            self.keepalive_seconds = keepalive_seconds
        self._subscriptions = []
        self._tasks = []
        self._queue = None
        self._streaming = False
        self._released = False

    def get_event_bus(self):
        if self.event_bus is None:
            from .apps import get_event_bus

            self.event_bus = get_event_bus()
        return self.event_bus

    def get_keepalive_seconds(self):
        if self.keepalive_seconds is None:
            return settings.ORDER_STREAM_KEEPALIVE_SECONDS
        return self.keepalive_seconds

    async def __call__(self, scope, receive, send):
        try:
            await super().__call__(scope, receive, send)
        finally:
            # Covers cancellation and server shutdown, not only http.disconnect
            self._release()

    async def http_request(self, message):
        if "body" in message:
            self.body.append(message["body"])
        if message.get("more_body"):
            return

        await self.handle(b"".join(self.body))

        # A streaming response stays open until the client goes away
        if not self._streaming:
            await self.disconnect()
            raise StopConsumer()

    async def handle(self, body):
        user = self.scope.get("user")

        if user is None or not user.is_authenticated:
            await self.send_response(401, b"Unauthorized", headers=[(b"Content-Type", b"text/plain")])
            return
        if getattr(user, "role", None) not in STREAM_ROLES:
            await self.send_response(403, b"Forbidden", headers=[(b"Content-Type", b"text/plain")])
            return

        await self.send_headers(
            status=200,
            headers=[
                (b"Content-Type", b"text/event-stream"),
                (b"Cache-Control", b"no-cache, no-transform"),
                (b"Connection", b"keep-alive"),
                (b"X-Accel-Buffering", b"no"),
            ],
        )
        await self.send_body(
            b'data: {"type":"connected","message":"Stream connected"}\n\n',
            more_body=True,
        )
        self._streaming = True

        self._queue = asyncio.Queue()
        loop = asyncio.get_running_loop()
        queue = self._queue

        def on_order_event(event):
            # Publishers may run on a worker thread
            loop.call_soon_threadsafe(queue.put_nowait, event.to_dict())

        bus = self.get_event_bus()
        for event_type in OrderEventType:
            self._subscriptions.append(bus.subscribe(event_type, on_order_event))

        self._tasks = [
            asyncio.ensure_future(self._forward_events()),
            asyncio.ensure_future(self._keepalive()),
        ]
        logger.info(f"Order stream opened for {user.email} ({user.role})")

    async def _forward_events(self):
        while True:
            payload = await self._queue.get()
            if not await self._write(f"data: {json.dumps(payload)}\n\n"):
                return

    async def _keepalive(self):
        interval = self.get_keepalive_seconds()
        while True:
            await asyncio.sleep(interval)
            if not await self._write(": keepalive\n\n"):
                return

    async def _write(self, text):
        try:
            await self.send_body(text.encode("utf-8"), more_body=True)
        except Exception as e:
            logger.warning(f"Order stream write failed, closing: {e}")
            self._release()
            return False
        return True

    async def disconnect(self):
        if self._streaming:
            logger.info("Order stream disconnected")
        self._release()

    def _release(self):
        """Unsubscribe from the bus and stop the stream tasks. Safe to call repeatedly."""
        if self._released:
            return
        self._released = True

        bus = self.get_event_bus() if self._subscriptions else None
        for subscription in self._subscriptions:
            bus.unsubscribe(subscription)
        self._subscriptions = []

        current = asyncio.current_task()
        for task in self._tasks:
            if task is not current and not task.done():
                task.cancel()
        self._tasks = []
