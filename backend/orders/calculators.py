"""
Order financial calculator.

Computes subtotal, payment surcharge and total from a list of priced lines.
Used both when an order is placed and when its items are replaced, so the
stored totals always come from one code path.

Usage:
    from orders.calculators import OrderCalculator, PricedLine

    calculator = OrderCalculator()
    totals = calculator.compute_totals(lines, Order.PaymentMethod.CARD)
    totals.subtotal, totals.surcharge, totals.total
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional

from django.conf import settings

from payments.money import quantize
from .exceptions import OrderValidationError

# Payment methods that carry the card processing fee
ELECTRONIC_PAYMENT_METHODS = ("CARD", "TERMINAL")


@dataclass
class PricedCustomization:
    """Snapshot of a customization as it will be stored on the order item."""

    type: str
    name: str
    price_delta: Decimal


@dataclass
class PricedLine:
    """A line item with the unit price captured at order time."""

    menu_item_id: int
    name: str
    quantity: int
    unit_price: Decimal
    customizations: List[PricedCustomization] = field(default_factory=list)

    @property
    def line_unit_price(self) -> Decimal:
        return self.unit_price + sum(
            (c.price_delta for c in self.customizations), Decimal("0")
        )

    @property
    def line_total(self) -> Decimal:
        return self.line_unit_price * self.quantity


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    surcharge: Decimal
    total: Decimal


class OrderCalculator:
    """
    Pure pricing: no database access, no side effects.

    Surcharge constants default to settings.ORDER_SURCHARGE and can be
    overridden per instance.
    """

    def __init__(
        self,
        rate: Optional[Decimal] = None,
        fixed_fee: Optional[Decimal] = None,
        currency: Optional[str] = None,
    ):
        config = getattr(settings, "ORDER_SURCHARGE", {})
        self.rate = Decimal(str(rate if rate is not None else config.get("RATE", "0.026")))
        self.fixed_fee = Decimal(
            str(fixed_fee if fixed_fee is not None else config.get("FIXED_FEE", "0.10"))
        )
        self.currency = currency or getattr(settings, "ORDER_CURRENCY", "USD")

    def validate_line(self, line) -> None:
        if line.quantity is None or line.quantity < 1:
            raise OrderValidationError(
                "Quantity must be at least 1.",
                details={"menu_item_id": line.menu_item_id, "quantity": line.quantity},
            )
        if line.unit_price < 0:
            raise OrderValidationError(
                "Unit price cannot be negative.",
                details={"menu_item_id": line.menu_item_id},
            )
        # Negative deltas are discounts, but a line can never cost less than zero
        if line.line_unit_price < 0:
            raise OrderValidationError(
                "Customizations cannot make an item's price negative.",
                details={"menu_item_id": line.menu_item_id},
            )

    def calculate_subtotal(self, lines: Iterable) -> Decimal:
        subtotal = Decimal("0.00")
        for line in lines:
            self.validate_line(line)
            subtotal += line.line_total
        return subtotal

    def calculate_surcharge(self, subtotal: Decimal, payment_method: str) -> Decimal:
        """
        Processing fee for electronic payments: subtotal * rate + fixed fee.

        Cash orders carry no surcharge.
        """
        if payment_method not in ELECTRONIC_PAYMENT_METHODS:
            return quantize(self.currency, Decimal("0"))
        return quantize(self.currency, subtotal * self.rate + self.fixed_fee)

    def compute_totals(self, lines: Iterable, payment_method: str) -> OrderTotals:
        lines = list(lines)
        subtotal = quantize(self.currency, self.calculate_subtotal(lines))
        surcharge = self.calculate_surcharge(subtotal, payment_method)
        return OrderTotals(
            subtotal=subtotal,
            surcharge=surcharge,
            total=subtotal + surcharge,
        )
