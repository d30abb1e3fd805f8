import logging

from django.db import IntegrityError, transaction
from django.db.models import F, Max
from django.utils import timezone

from orders.exceptions import OrderNumberConflictError, OrderValidationError
from orders.models import Order

logger = logging.getLogger(__name__)


class OrderNumberService:
    """Allocates and corrects sequential order numbers."""

    @staticmethod
    def next_order_number() -> int:
        """
        Highest existing number plus one, or 1 for the first order.

        Must run inside the transaction that inserts the order; the unique
        constraint on order_number catches concurrent allocations.
        """
        current_max = Order.objects.aggregate(max_number=Max("order_number"))["max_number"]
        return (current_max or 0) + 1

    @staticmethod
    def _shift(order_ids, delta, now):
        # One row per statement so each intermediate state is collision free
        for order_id in order_ids:
            Order.objects.filter(pk=order_id).update(
                order_number=F("order_number") + delta, updated_at=now
            )

    @staticmethod
    @transaction.atomic
    def renumber(order_id, new_number: int, adjust_subsequent: bool = True) -> Order:
        """
        Move an order to `new_number`.

        With adjust_subsequent, the orders between the old and new number shift
        by one to close the gap, so the set of numbers in use is unchanged:
        moving #2 to #4 in [1..5] gives 2->4, 3->2, 4->3 and leaves 5 alone.
        Without it, the number is set directly and an existing holder of
        `new_number` is a conflict.

        The returned order carries `shifted_order_ids`, the pks of the other
        orders whose numbers moved.
        """
        from .store_service import OrderStoreService

        if new_number is None or int(new_number) < 1:
            raise OrderValidationError(
                "Order numbers must be positive integers.",
                details={"order_number": new_number},
            )
        new_number = int(new_number)

        order = OrderStoreService.lock(order_id)
        old_number = order.order_number
        if old_number == new_number:
            order.shifted_order_ids = []
            return order

        holder_exists = (
            Order.objects.filter(order_number=new_number).exclude(pk=order.pk).exists()
        )
        now = timezone.now()
        shifted = []

        try:
            if not adjust_subsequent:
                if holder_exists:
                    raise OrderNumberConflictError(
                        f"Order number {new_number} is already in use.",
                        details={"order_number": new_number},
                    )
                Order.objects.filter(pk=order.pk).update(order_number=new_number, updated_at=now)
            else:
                # Park the target outside the positive range while the others move
                Order.objects.filter(pk=order.pk).update(order_number=-old_number)

                if new_number > old_number:
                    affected = (
                        Order.objects.select_for_update()
                        .filter(order_number__gt=old_number, order_number__lte=new_number)
                        .order_by("order_number")
                        .values_list("pk", flat=True)
                    )
                    shifted = list(affected)
                    OrderNumberService._shift(shifted, -1, now)
                else:
                    affected = (
                        Order.objects.select_for_update()
                        .filter(order_number__gte=new_number, order_number__lt=old_number)
                        .order_by("-order_number")
                        .values_list("pk", flat=True)
                    )
                    shifted = list(affected)
                    OrderNumberService._shift(shifted, 1, now)

                Order.objects.filter(pk=order.pk).update(order_number=new_number, updated_at=now)
        except IntegrityError as e:
            raise OrderNumberConflictError(
                f"Could not move order #{old_number} to #{new_number}.",
                details={"order_number": new_number},
            ) from e

        order.refresh_from_db()
        order.shifted_order_ids = shifted
        logger.info(
            f"Order {order.id} renumbered #{old_number} -> #{new_number} "
            f"(adjust_subsequent={adjust_subsequent})"
        )
        return order
