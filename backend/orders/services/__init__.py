"""
Orders services package.

- OrderService: lifecycle orchestration (place, edit, status, payment, renumber)
- OrderStoreService: persistence of the order aggregate and the status state machine
- OrderNumberService: order number allocation and cascading renumbering
- KitchenService: active queue and "mark all up to here"
- TerminalCheckoutService: tap-to-pay checkout references and deep links
- RevenueService: daily revenue of completed orders
"""

# Core order operations
from .order_service import OrderService, PaymentReceipt

# Persistence
from .store_service import OrderDraft, OrderStoreService

# Numbering
from .numbering_service import OrderNumberService

# Kitchen operations
from .kitchen_service import BulkCompletionResult, KitchenService

# Tap-to-pay terminal
from .terminal_service import TerminalCheckoutService

# Reporting
from .revenue_service import RevenueService

__all__ = [
    'OrderService',
    'PaymentReceipt',
    'OrderDraft',
    'OrderStoreService',
    'OrderNumberService',
    'KitchenService',
    'BulkCompletionResult',
    'TerminalCheckoutService',
    'RevenueService',
]
