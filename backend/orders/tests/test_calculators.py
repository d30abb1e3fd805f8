"""
Order pricing tests.

OrderCalculator has no database access, so these run without django_db.
"""
import pytest
from decimal import Decimal

from orders.calculators import OrderCalculator, PricedCustomization, PricedLine
from orders.exceptions import OrderValidationError


def burger_line(quantity=1, extra_patty=False):
    customizations = []
    if extra_patty:
        customizations.append(PricedCustomization("extra_patty", "Extra Patty", Decimal("2.00")))
    return PricedLine(
        menu_item_id=1,
        name="Burger",
        quantity=quantity,
        unit_price=Decimal("7.00"),
        customizations=customizations,
    )


@pytest.fixture
def calculator():
    return OrderCalculator(rate=Decimal("0.026"), fixed_fee=Decimal("0.10"), currency="USD")


class TestSubtotal:
    def test_customizations_apply_per_unit(self, calculator):
        """Two burgers with an extra patty: (7.00 + 2.00) * 2."""
        totals = calculator.compute_totals([burger_line(quantity=2, extra_patty=True)], "CASH")

        assert totals.subtotal == Decimal("18.00")
        assert totals.surcharge == Decimal("0.00")
        assert totals.total == Decimal("18.00")

    def test_multiple_lines_are_summed(self, calculator):
        lines = [burger_line(), burger_line(quantity=3)]
        assert calculator.calculate_subtotal(lines) == Decimal("28.00")

    def test_negative_delta_discounts_the_line(self, calculator):
        line = burger_line()
        line.customizations.append(PricedCustomization("no_bun", "No Bun", Decimal("-0.50")))

        assert calculator.compute_totals([line], "CASH").subtotal == Decimal("6.50")


class TestSurcharge:
    def test_card_surcharge(self, calculator):
        """18.00 * 0.026 + 0.10 = 0.568, rounded to 0.57."""
        totals = calculator.compute_totals([burger_line(quantity=2, extra_patty=True)], "CARD")

        assert totals.subtotal == Decimal("18.00")
        assert totals.surcharge == Decimal("0.57")
        assert totals.total == Decimal("18.57")

    def test_terminal_payments_carry_the_surcharge(self, calculator):
        assert calculator.calculate_surcharge(Decimal("10.00"), "TERMINAL") == Decimal("0.36")

    def test_cash_has_no_surcharge(self, calculator):
        assert calculator.calculate_surcharge(Decimal("100.00"), "CASH") == Decimal("0.00")

    def test_total_is_subtotal_plus_surcharge(self, calculator):
        for method in ("CASH", "CARD", "TERMINAL"):
            totals = calculator.compute_totals([burger_line(quantity=5)], method)
            assert totals.total == totals.subtotal + totals.surcharge

    def test_defaults_come_from_settings(self, settings):
        settings.ORDER_SURCHARGE = {"RATE": "0.05", "FIXED_FEE": "0.00"}

        calculator = OrderCalculator()

        assert calculator.calculate_surcharge(Decimal("10.00"), "CARD") == Decimal("0.50")


class TestLineValidation:
    def test_zero_quantity_rejected(self, calculator):
        with pytest.raises(OrderValidationError):
            calculator.compute_totals([burger_line(quantity=0)], "CASH")

    def test_negative_unit_price_rejected(self, calculator):
        line = burger_line()
        line.unit_price = Decimal("-1.00")

        with pytest.raises(OrderValidationError):
            calculator.compute_totals([line], "CASH")

    def test_customizations_cannot_make_line_negative(self, calculator):
        line = burger_line()
        line.customizations.append(PricedCustomization("free", "Free", Decimal("-8.00")))

        with pytest.raises(OrderValidationError) as exc_info:
            calculator.compute_totals([line], "CASH")

        assert exc_info.value.details == {"menu_item_id": 1}
