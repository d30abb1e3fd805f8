"""
URL configuration for core_backend project.

The order event stream is an ASGI consumer and is routed in asgi.py.
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny


@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/", include("users.urls")),
    path("api/menu/", include("menu.urls")),
    # The orders app registers both /api/orders/ and /api/kitchen/ routes
    path("api/", include("orders.urls")),
]
