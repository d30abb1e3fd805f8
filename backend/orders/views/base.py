from kds.apps import get_event_bus
from orders.services import OrderService
from payments.gateways import StripeGateway


def build_order_service():
    """Lifecycle service wired to the process event bus and the Stripe gateway."""
    return OrderService(get_event_bus(), payment_gateway=StripeGateway())


class OrderServiceMixin:
    def get_order_service(self):
        if not hasattr(self, "_order_service"):
            self._order_service = build_order_service()
        return self._order_service
