"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
from decimal import Decimal

import pytest
from django.core.cache import cache

from payments.gateways import ChargeResult, PaymentGateway, PaymentGatewayError


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def clear_cache_after_test():
    """
    Clear cache after each test to prevent cache pollution.
    """
    yield
    cache.clear()


# ============================================================================
# USER FIXTURES
# ============================================================================

def _make_user(email, role, name=""):
    from users.models import User

    return User.objects.create_user(email=email, password="testpass123", name=name, role=role)


@pytest.fixture
def customer_user(db):
    from users.models import User

    return _make_user("customer@example.com", User.Role.CUSTOMER, name="Casey Customer")


@pytest.fixture
def cashier_user(db):
    from users.models import User

    return _make_user("cashier@example.com", User.Role.CASHIER, name="Cam Cashier")


@pytest.fixture
def kitchen_user(db):
    from users.models import User

    return _make_user("kitchen@example.com", User.Role.KITCHEN, name="Kit Kitchen")


@pytest.fixture
def admin_user(db):
    from users.models import User

    return _make_user("admin@example.com", User.Role.ADMIN, name="Ada Admin")


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide an unauthenticated DRF API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def client_for():
    """
    Build an API client authenticated as the given user with a bearer JWT.

    Usage:
        def test_my_api(client_for, cashier_user):
            response = client_for(cashier_user).get('/api/orders/')
    """
    from rest_framework.test import APIClient
    from rest_framework_simplejwt.tokens import RefreshToken

    def _client_for(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _client_for


@pytest.fixture
def customer_client(client_for, customer_user):
    return client_for(customer_user)


@pytest.fixture
def cashier_client(client_for, cashier_user):
    return client_for(cashier_user)


@pytest.fixture
def kitchen_client(client_for, kitchen_user):
    return client_for(kitchen_user)


@pytest.fixture
def admin_client(client_for, admin_user):
    return client_for(admin_user)


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def burger(db):
    """$7.00 burger with a $2.00 extra patty and a free 'no cheese' option."""
    from menu.models import CustomizationTemplate, MenuItem

    item = MenuItem.objects.create(name="Burger", price=Decimal("7.00"), category="Mains")
    CustomizationTemplate.objects.create(
        menu_item=item, type="extra_patty", name="Extra Patty", price_delta=Decimal("2.00")
    )
    CustomizationTemplate.objects.create(
        menu_item=item, type="remove_cheese", name="No Cheese", price_delta=Decimal("0.00")
    )
    return item


@pytest.fixture
def fries(db):
    from menu.models import MenuItem

    return MenuItem.objects.create(name="Fries", price=Decimal("3.50"), category="Sides")


@pytest.fixture
def unavailable_item(db):
    from menu.models import MenuItem

    return MenuItem.objects.create(
        name="Seasonal Pie", price=Decimal("5.00"), category="Desserts", available=False
    )


# ============================================================================
# ORDER SERVICE FIXTURES
# ============================================================================

class FakeGateway(PaymentGateway):
    """Records charges instead of calling a real processor."""

    def __init__(self, fail_with=None):
        self.fail_with = fail_with
        self.calls = []

    def charge(self, amount_minor, currency, idempotency_key, source_token):
        self.calls.append(
            {
                "amount_minor": amount_minor,
                "currency": currency,
                "idempotency_key": idempotency_key,
                "source_token": source_token,
            }
        )
        if self.fail_with:
            raise PaymentGatewayError(self.fail_with, decline_code="card_declined")
        return ChargeResult(
            external_payment_id=f"pi_fake_{len(self.calls)}",
            status="succeeded",
        )


@pytest.fixture
def event_bus():
    """A private bus so tests never see events from the app-wide one."""
    from kds.events import OrderEventBus

    return OrderEventBus()


@pytest.fixture
def recorded_events(event_bus):
    """Every event published on `event_bus`, in order."""
    from kds.events import OrderEventType

    events = []
    for event_type in OrderEventType:
        event_bus.subscribe(event_type, events.append)
    return events


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def declining_gateway():
    return FakeGateway(fail_with="Your card was declined.")


@pytest.fixture
def order_service(event_bus, fake_gateway):
    from orders.services import OrderService

    return OrderService(event_bus, payment_gateway=fake_gateway)


@pytest.fixture
def place_order(order_service, customer_user, burger):
    """
    Place an order for one plain burger.

    Usage:
        order = place_order()
        order = place_order(payment_method="CARD")
    """
    def _place_order(caller=None, items=None, payment_method="CASH", order_type="IN_STORE", **kwargs):
        return order_service.place_order(
            caller=caller or customer_user,
            items=items if items is not None else [{"menu_item_id": burger.id, "quantity": 1}],
            payment_method=payment_method,
            order_type=order_type,
            **kwargs,
        )

    return _place_order
