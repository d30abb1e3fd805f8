"""
Tap-to-pay terminal checkouts.

The cashier's device opens the terminal app through a deep link carrying the
amount and a client reference. The terminal flow confirms payment out of band;
until then the order stays PENDING and the cashier screen polls check_status.
"""
import json
import logging
import time
from urllib.parse import quote

from django.conf import settings
from django.db import transaction

from orders.exceptions import OrderValidationError
from orders.models import Order
from payments.money import to_minor
from .store_service import OrderStoreService

logger = logging.getLogger(__name__)

DEEP_LINK_BASE = "square-commerce-v1://payment/create"


class TerminalCheckoutService:
    class CheckoutStatus:
        PENDING = "PENDING"
        COMPLETED = "COMPLETED"
        NOT_FOUND = "NOT_FOUND"

    @staticmethod
    def build_deep_link(order: Order, checkout_reference: str) -> str:
        config = settings.TERMINAL_CHECKOUT
        currency = settings.ORDER_CURRENCY
        callback_url = config.get("CALLBACK_URL")

        payment_data = {
            "client_id": config.get("APPLICATION_ID"),
            "amount": to_minor(currency, order.total),
            "currency_code": currency,
            "note": f"Order {order.order_number}",
            "client_transaction_id": checkout_reference,
            "callback_url": callback_url,
            "ios_callback_url": callback_url,
        }
        encoded = quote(json.dumps(payment_data, separators=(",", ":")), safe="")
        return f"{DEEP_LINK_BASE}?data={encoded}"

    @staticmethod
    @transaction.atomic
    def create_checkout(order_id) -> dict:
        if not settings.TERMINAL_CHECKOUT.get("APPLICATION_ID"):
            raise OrderValidationError(
                "TERMINAL_APPLICATION_ID is not configured.",
            )

        order = OrderStoreService.lock(order_id)
        if order.status != Order.OrderStatus.PENDING or order.payment_reference:
            raise OrderValidationError(
                "Only unpaid pending orders can start a terminal checkout.",
                details={"status": order.status},
            )

        checkout_reference = f"checkout-{order.id}-{int(time.time() * 1000)}"
        order.terminal_checkout_reference = checkout_reference
        order.save(update_fields=["terminal_checkout_reference", "updated_at"])

        logger.info(f"Terminal checkout {checkout_reference} created for order #{order.order_number}")
        return {
            "checkout_id": checkout_reference,
            "deep_link": TerminalCheckoutService.build_deep_link(order, checkout_reference),
        }

    @staticmethod
    def check_status(order_id) -> dict:
        order = Order.objects.filter(pk=order_id).only(
            "terminal_checkout_reference", "status", "payment_reference"
        ).first()

        if order is None or not order.terminal_checkout_reference:
            return {"status": TerminalCheckoutService.CheckoutStatus.NOT_FOUND}

        if order.payment_reference or order.status != Order.OrderStatus.PENDING:
            return {
                "status": TerminalCheckoutService.CheckoutStatus.COMPLETED,
                "payment_reference": order.payment_reference,
            }

        return {"status": TerminalCheckoutService.CheckoutStatus.PENDING}
