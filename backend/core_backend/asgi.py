import os

# Set the Django settings module first
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core_backend.settings")

from django.core.asgi import get_asgi_application

# Initialize Django ASGI application early to ensure AppRegistry is populated
# before importing code that may import ORM models.
django_asgi_app = get_asgi_application()

from channels.auth import AuthMiddlewareStack
from channels.routing import ProtocolTypeRouter, URLRouter

from core_backend.jwt_websocket_middleware import JWTAuthMiddleware
from kds.routing import build_http_urlpatterns

application = ProtocolTypeRouter(
    {
        "http": AuthMiddlewareStack(
            JWTAuthMiddleware(URLRouter(build_http_urlpatterns(django_asgi_app)))
        ),
    }
)
