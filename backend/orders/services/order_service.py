from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

from django.db import transaction

from menu.services import MenuService
from orders.calculators import OrderCalculator
from orders.exceptions import (
    InvalidStatusTransitionError,
    OrderValidationError,
    PaymentFailedError,
)
from orders.models import Order
from payments.gateways import PaymentGatewayError
from payments.money import to_minor
from kds.events import OrderEventPublisher
from .numbering_service import OrderNumberService
from .store_service import OrderDraft, OrderStoreService

logger = logging.getLogger(__name__)


@dataclass
class PaymentReceipt:
    payment_reference: str
    amount: Any
    currency: str
    already_captured: bool = False
    raw: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self):
        return {
            "payment_reference": self.payment_reference,
            "amount": str(self.amount),
            "currency": self.currency,
            "already_captured": self.already_captured,
        }


class OrderService:
    """
    Order lifecycle orchestration: place, edit, move through the kitchen,
    capture card payments and correct numbers. Every change is announced on
    the order event bus after it commits.
    """

    def __init__(self, event_bus, payment_gateway=None, calculator=None):
        self.events = OrderEventPublisher(event_bus)
        self.payment_gateway = payment_gateway
        self.calculator = calculator or OrderCalculator()

    @staticmethod
    def _validate_choice(value, choices, label):
        if value not in choices.values:
            raise OrderValidationError(
                f"'{value}' is not a valid {label}.",
                details={label: value, "allowed": list(choices.values)},
            )

    @transaction.atomic
    def place_order(
        self,
        caller,
        items: List[Dict[str, Any]],
        payment_method: str,
        order_type: str,
        customer_name: Optional[str] = None,
    ) -> Order:
        self._validate_choice(payment_method, Order.PaymentMethod, "payment_method")
        self._validate_choice(order_type, Order.OrderType, "order_type")

        lines = MenuService.resolve_lines(items)
        totals = self.calculator.compute_totals(lines, payment_method)

        if not customer_name and caller is not None:
            customer_name = caller.name or None

        order = OrderStoreService.create_order(
            OrderDraft(
                lines=lines,
                totals=totals,
                payment_method=payment_method,
                order_type=order_type,
                customer=caller,
                customer_name=customer_name,
            )
        )

        logger.info(
            f"Order #{order.order_number} placed by {getattr(caller, 'email', 'anonymous')}: "
            f"{len(lines)} line(s), {payment_method}, total={order.total}"
        )
        self.events.order_created(order)
        return order

    @transaction.atomic
    def edit_order(self, order_id, items: List[Dict[str, Any]], customer_name: Optional[str] = None) -> Order:
        """
        Replace an order's items, re-pricing them from the current menu.
        """
        lines = MenuService.resolve_lines(items)
        order = OrderStoreService.replace_items(
            order_id, lines, customer_name=customer_name, calculator=self.calculator
        )

        logger.info(f"Order #{order.order_number} edited: {len(lines)} line(s), total={order.total}")
        self.events.order_updated(order)
        return order

    @transaction.atomic
    def transition_status(self, order_id, new_status: str) -> Order:
        order = OrderStoreService.update_status(order_id, new_status)

        logger.info(f"Order #{order.order_number} moved to {order.status}")
        self.events.order_status_changed(order)
        self.events.order_updated(order)
        return order

    def cancel_order(self, order_id) -> Order:
        return self.transition_status(order_id, Order.OrderStatus.CANCELLED)

    @transaction.atomic
    def correct_order_number(self, order_id, new_number: int, adjust_subsequent: bool = True) -> Order:
        order = OrderNumberService.renumber(order_id, new_number, adjust_subsequent)
        self.events.order_updated(order)
        for shifted in Order.objects.filter(pk__in=order.shifted_order_ids).order_by("order_number"):
            self.events.order_updated(shifted)
        return order

    @transaction.atomic
    def capture_payment(self, order_id, payment_token: str):
        """
        Charge the order total through the payment gateway.

        The order id is the idempotency key, and an order that already holds a
        payment reference is never charged again. On failure the order is left
        untouched and PaymentFailedError is raised.

        Returns (order, receipt).
        """
        if self.payment_gateway is None:
            raise PaymentFailedError("No payment gateway is configured.")

        order = OrderStoreService.lock(order_id)
        currency = self.calculator.currency

        if order.payment_reference:
            logger.info(f"Order #{order.order_number} already captured ({order.payment_reference})")
            return order, PaymentReceipt(
                payment_reference=order.payment_reference,
                amount=order.total,
                currency=currency,
                already_captured=True,
            )

        if order.payment_method == Order.PaymentMethod.CASH:
            raise OrderValidationError(
                "Cash orders are not captured through the payment gateway.",
                details={"payment_method": order.payment_method},
            )
        if order.status != Order.OrderStatus.PENDING:
            raise InvalidStatusTransitionError(
                f"Only pending orders can be paid (order is {order.status}).",
                details={"from": order.status, "to": Order.OrderStatus.PREPARING},
            )

        try:
            result = self.payment_gateway.charge(
                amount_minor=to_minor(currency, order.total),
                currency=currency,
                idempotency_key=str(order.id),
                source_token=payment_token,
            )
        except PaymentGatewayError as e:
            logger.warning(f"Payment failed for order #{order.order_number}: {e.message}")
            raise PaymentFailedError(
                e.message,
                details={"decline_code": e.decline_code} if e.decline_code else None,
            ) from e

        order.payment_reference = result.external_payment_id
        order.status = Order.OrderStatus.PREPARING
        order.save(update_fields=["payment_reference", "status", "updated_at"])

        logger.info(
            f"Captured {order.total} {currency} for order #{order.order_number} "
            f"({result.external_payment_id})"
        )
        self.events.order_status_changed(order)
        return order, PaymentReceipt(
            payment_reference=result.external_payment_id,
            amount=order.total,
            currency=currency,
            raw=result.raw,
        )
