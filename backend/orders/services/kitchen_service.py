from dataclasses import dataclass, field
from typing import List, Optional
import logging

from orders.exceptions import OrderNotFoundError, OrderServiceError
from orders.models import Order
from .store_service import OrderStoreService

logger = logging.getLogger(__name__)


@dataclass
class BulkCompletionResult:
    completed: List[str] = field(default_factory=list)
    failed_order_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self):
        return {
            "completed": self.completed,
            "failed_order_id": self.failed_order_id,
            "error": self.error,
        }


class KitchenService:
    """Kitchen display operations on the active order queue."""

    @staticmethod
    def get_active_orders(limit=None):
        return OrderStoreService.find_active(limit)

    @staticmethod
    def mark_all_up_to(order_service, target_order_id) -> BulkCompletionResult:
        """
        Complete every PENDING or PREPARING order from the top of the active
        queue down to and including the target, in queue order.

        Each order is its own transition. Processing stops at the first
        failure and the orders completed so far stay completed.
        """
        active = KitchenService.get_active_orders()
        target_id = str(target_order_id)

        position = next(
            (index for index, order in enumerate(active) if str(order.id) == target_id),
            None,
        )
        if position is None:
            raise OrderNotFoundError(
                f"Order {target_id} is not in the active kitchen queue.",
                details={"order_id": target_id},
            )

        result = BulkCompletionResult()
        for order in active[: position + 1]:
            if order.status not in (Order.OrderStatus.PENDING, Order.OrderStatus.PREPARING):
                continue
            try:
                order_service.transition_status(order.id, Order.OrderStatus.COMPLETED)
            except OrderServiceError as e:
                logger.warning(
                    f"Bulk completion stopped at order #{order.order_number}: {e.message}"
                )
                result.failed_order_id = str(order.id)
                result.error = e.message
                break
            result.completed.append(str(order.id))

        logger.info(f"Bulk completion up to order {target_id}: {len(result.completed)} completed")
        return result
