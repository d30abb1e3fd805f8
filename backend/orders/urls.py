from django.urls import path, include
from rest_framework import routers
from .views import KitchenOrderViewSet, OrderViewSet

app_name = "orders"

router = routers.DefaultRouter()
router.register(r"orders", OrderViewSet, basename="order")
router.register(r"kitchen/orders", KitchenOrderViewSet, basename="kitchen-order")

urlpatterns = [
    path("", include(router.urls)),
]
