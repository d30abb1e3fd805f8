from dataclasses import dataclass
from typing import List, Optional
import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from orders.calculators import OrderCalculator, OrderTotals, PricedLine
from orders.exceptions import (
    InvalidStatusTransitionError,
    OrderNotFoundError,
    OrderNumberConflictError,
    OrderValidationError,
)
from orders.models import Order, OrderItem, OrderItemCustomization
from .numbering_service import OrderNumberService

logger = logging.getLogger(__name__)

# One retry after a unique violation on order_number, then a hard conflict
MAX_NUMBER_ATTEMPTS = 2


@dataclass
class OrderDraft:
    """Everything needed to persist a new order. Drafts never carry a number."""

    lines: List[PricedLine]
    totals: OrderTotals
    payment_method: str
    order_type: str
    customer: Optional[object] = None
    customer_name: Optional[str] = None


class OrderStoreService:
    """Persistence boundary for the Order / OrderItem / OrderItemCustomization aggregate."""

    # Forward moves may skip steps; CANCELLED only before the food is ready
    VALID_STATUS_TRANSITIONS = {
        Order.OrderStatus.PENDING: [
            Order.OrderStatus.PREPARING,
            Order.OrderStatus.READY,
            Order.OrderStatus.COMPLETED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.PREPARING: [
            Order.OrderStatus.READY,
            Order.OrderStatus.COMPLETED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.READY: [
            Order.OrderStatus.COMPLETED,
        ],
        Order.OrderStatus.COMPLETED: [],
        Order.OrderStatus.CANCELLED: [],
    }

    @staticmethod
    def can_transition(current_status: str, new_status: str) -> bool:
        return new_status in OrderStoreService.VALID_STATUS_TRANSITIONS.get(current_status, [])

    @staticmethod
    def base_queryset():
        return Order.objects.select_related("customer").prefetch_related(
            "items__menu_item", "items__customizations"
        )

    # --- Reads ---

    @staticmethod
    def find_by_id(order_id) -> Order:
        try:
            return OrderStoreService.base_queryset().get(pk=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise OrderNotFoundError(
                f"Order {order_id} not found.", details={"order_id": str(order_id)}
            )

    @staticmethod
    def lock(order_id) -> Order:
        """Fetch an order with a row lock. Call inside a transaction."""
        try:
            return Order.objects.select_for_update().get(pk=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise OrderNotFoundError(
                f"Order {order_id} not found.", details={"order_id": str(order_id)}
            )

    @staticmethod
    def find_many(status=None, created_after=None, created_before=None, limit=None, queryset=None):
        """
        Orders newest first, optionally filtered by status and creation range.
        """
        queryset = queryset if queryset is not None else OrderStoreService.base_queryset()
        if status:
            statuses = [status] if isinstance(status, str) else list(status)
            queryset = queryset.filter(status__in=statuses)
        if created_after:
            queryset = queryset.filter(created_at__gte=created_after)
        if created_before:
            queryset = queryset.filter(created_at__lte=created_before)

        queryset = queryset.order_by("-created_at", "-order_number")

        if limit is not None:
            max_limit = settings.ORDER_LIST_MAX_LIMIT
            queryset = queryset[: max(1, min(int(limit), max_limit))]
        return queryset

    @staticmethod
    def find_by_customer(customer):
        return OrderStoreService.base_queryset().filter(customer=customer).order_by(
            "-created_at", "-order_number"
        )

    @staticmethod
    def find_active(limit=None):
        """Kitchen work queue: PENDING, PREPARING and READY orders, oldest first."""
        limit = limit or settings.KITCHEN_ACTIVE_ORDER_LIMIT
        return list(
            OrderStoreService.base_queryset()
            .filter(status__in=Order.ACTIVE_STATUSES)
            .order_by("created_at", "order_number")[:limit]
        )

    # --- Writes ---

    @staticmethod
    def _write_items(order: Order, lines: List[PricedLine]):
        for line in lines:
            order_item = OrderItem.objects.create(
                order=order,
                menu_item_id=line.menu_item_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
            )
            OrderItemCustomization.objects.bulk_create(
                [
                    OrderItemCustomization(
                        order_item=order_item,
                        type=customization.type,
                        name=customization.name,
                        price_delta=customization.price_delta,
                    )
                    for customization in line.customizations
                ]
            )

    @staticmethod
    @transaction.atomic
    def create_order(draft: OrderDraft) -> Order:
        """
        Insert an order with its items and customizations in one transaction.

        The order number is allocated inside the same transaction. A clash with
        a concurrent checkout is retried once with a fresh number.
        """
        if not draft.lines:
            raise OrderValidationError("An order needs at least one item.")

        for attempt in range(1, MAX_NUMBER_ATTEMPTS + 1):
            order_number = OrderNumberService.next_order_number()
            try:
                with transaction.atomic():
                    order = Order.objects.create(
                        order_number=order_number,
                        customer=draft.customer,
                        customer_name=draft.customer_name,
                        payment_method=draft.payment_method,
                        order_type=draft.order_type,
                        subtotal=draft.totals.subtotal,
                        surcharge=draft.totals.surcharge,
                        total=draft.totals.total,
                    )
            except IntegrityError:
                if not Order.objects.filter(order_number=order_number).exists():
                    raise
                if attempt == MAX_NUMBER_ATTEMPTS:
                    logger.error(f"Order number #{order_number} still taken after {attempt} attempts")
                    raise OrderNumberConflictError(
                        "Could not allocate an order number. Please try again.",
                        details={"order_number": order_number},
                    )
                logger.warning(f"Order number #{order_number} was taken concurrently, retrying")
                continue

            OrderStoreService._write_items(order, draft.lines)
            return order

    @staticmethod
    @transaction.atomic
    def replace_items(order_id, lines: List[PricedLine], customer_name=None, calculator=None) -> Order:
        """
        Swap the order's items for a new set and refresh its cached totals.
        """
        if not lines:
            raise OrderValidationError("An order needs at least one item.")

        order = OrderStoreService.lock(order_id)
        if order.status in Order.TERMINAL_STATUSES:
            raise OrderValidationError(
                f"{order.get_status_display()} orders cannot be edited.",
                details={"status": order.status},
            )
        if order.payment_reference:
            raise OrderValidationError(
                "Paid orders cannot be edited.",
                details={"payment_reference": order.payment_reference},
            )

        totals = (calculator or OrderCalculator()).compute_totals(lines, order.payment_method)

        order.items.all().delete()
        OrderStoreService._write_items(order, lines)

        order.subtotal = totals.subtotal
        order.surcharge = totals.surcharge
        order.total = totals.total
        update_fields = ["subtotal", "surcharge", "total", "updated_at"]
        if customer_name is not None:
            order.customer_name = customer_name
            update_fields.append("customer_name")
        order.save(update_fields=update_fields)
        return order

    @staticmethod
    @transaction.atomic
    def update_status(order_id, new_status: str) -> Order:
        """
        Read-validate-write under a row lock, so concurrent changes cannot both pass.
        """
        if new_status not in Order.OrderStatus.values:
            raise OrderValidationError(
                f"'{new_status}' is not a valid order status.",
                details={"status": new_status},
            )

        order = OrderStoreService.lock(order_id)
        if not OrderStoreService.can_transition(order.status, new_status):
            raise InvalidStatusTransitionError(
                f"Cannot transition order from {order.status} to {new_status}.",
                details={"from": order.status, "to": new_status},
            )

        order.status = new_status
        update_fields = ["status", "updated_at"]
        if new_status == Order.OrderStatus.COMPLETED:
            order.completed_at = timezone.now()
            update_fields.append("completed_at")
        order.save(update_fields=update_fields)
        return order
