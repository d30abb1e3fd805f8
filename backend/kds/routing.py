from django.urls import path, re_path

from .apps import get_event_bus
from .consumers import OrderStreamConsumer


def build_http_urlpatterns(django_asgi_app):
    """
    HTTP routes for the ASGI application: the order event stream, then
    everything else handled by Django.
    """
    return [
        path(
            "api/orders/stream/",
            OrderStreamConsumer.as_asgi(event_bus=get_event_bus()),
        ),
        re_path(r"", django_asgi_app),
    ]
