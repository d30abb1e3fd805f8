"""
Money rounding for the payment boundary.

Order totals stay Decimals in major units. Only the gateway call needs
integer minor units, so conversion happens once, in to_minor.

Rules:
1. No floats for money
2. Quantize before converting to minor units
3. ROUND_HALF_EVEN everywhere
"""

from decimal import Decimal, ROUND_HALF_EVEN, getcontext
from typing import Union

getcontext().prec = 28

# Decimal places per ORDER_CURRENCY; anything unlisted is treated as 2
CURRENCY_EXPONENT = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "CAD": 2,
    "AUD": 2,
}


def currency_exponent(currency: str) -> int:
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    """Smallest unit of a currency as a Decimal (0.01 for USD)."""
    return Decimal(10) ** -currency_exponent(currency)


def quantize(currency: str, amount: Union[Decimal, str, int, float]) -> Decimal:
    """
    Round an amount to the currency's cents with banker's rounding.

        >>> quantize("USD", "10.125")
        Decimal('10.12')
    """
    if isinstance(amount, float):
        amount = str(amount)
    return Decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_EVEN)


def to_minor(currency: str, amount: Union[Decimal, str, int, float]) -> int:
    """
    Amount in the integer minor units a card gateway expects.

        >>> to_minor("USD", "7.28")
        728
    """
    quantized = quantize(currency, amount)
    return int((quantized * (10 ** currency_exponent(currency))).to_integral_value())
