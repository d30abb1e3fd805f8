"""
Payment gateway adapters.

The order lifecycle only depends on the PaymentGateway interface; the Stripe
implementation lives here so tests can swap in a fake gateway.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging

import stripe
from django.conf import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when a charge is declined, times out or otherwise fails."""

    def __init__(self, message, decline_code=None):
        super().__init__(message)
        self.message = message
        self.decline_code = decline_code


@dataclass
class ChargeResult:
    external_payment_id: str
    status: str
    raw: dict = field(default_factory=dict)


class PaymentGateway(ABC):
    """
    Interface for third-party card capture.
    """

    @abstractmethod
    def charge(self, amount_minor, currency, idempotency_key, source_token) -> ChargeResult:
        """
        Charge `amount_minor` (integer minor units) against `source_token`.

        The same idempotency key must never produce a second charge.
        Raises PaymentGatewayError on decline or timeout.
        """
        pass


class StripeGateway(PaymentGateway):
    """
    Card-not-present capture using a confirmed Stripe PaymentIntent.
    """

    def __init__(self, api_key=None, timeout=None):
        self.api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY
        self.timeout = timeout if timeout is not None else settings.PAYMENT_GATEWAY_TIMEOUT_SECONDS

    def _configure(self):
        stripe.api_key = self.api_key
        # Timeout is a failure; callers decide whether to try again
        stripe.max_network_retries = 0
        stripe.default_http_client = stripe.RequestsClient(timeout=self.timeout)

    def charge(self, amount_minor, currency, idempotency_key, source_token) -> ChargeResult:
        if not source_token:
            raise PaymentGatewayError("A payment method token is required for card payments.")

        self._configure()

        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_minor,
                currency=currency.lower(),
                payment_method=source_token,
                confirm=True,
                automatic_payment_methods={
                    "enabled": True,
                    "allow_redirects": "never",
                },
                metadata={"order_id": idempotency_key},
                idempotency_key=idempotency_key,
            )
        except stripe.CardError as e:
            logger.warning(f"Card declined for order {idempotency_key}: {e.user_message or e}")
            raise PaymentGatewayError(e.user_message or str(e), decline_code=e.code) from e
        except stripe.StripeError as e:
            logger.error(f"Stripe error charging order {idempotency_key}: {e}")
            raise PaymentGatewayError(str(e)) from e

        if intent.status != "succeeded":
            raise PaymentGatewayError(
                f"Payment was not completed (status: {intent.status})."
            )

        logger.info(f"Stripe PaymentIntent {intent.id} succeeded for order {idempotency_key}")
        return ChargeResult(
            external_payment_id=intent.id,
            status=intent.status,
            raw=intent.to_dict(),
        )
