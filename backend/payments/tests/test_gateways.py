"""
Tests for the Stripe payment gateway adapter.

Stripe is never called; stripe.PaymentIntent.create is patched.
"""
from unittest.mock import MagicMock, patch

import pytest
import stripe

from payments.gateways import ChargeResult, PaymentGatewayError, StripeGateway


def make_intent(status="succeeded", intent_id="pi_test_123"):
    intent = MagicMock()
    intent.id = intent_id
    intent.status = status
    intent.to_dict.return_value = {"id": intent_id, "status": status}
    return intent


@pytest.fixture
def gateway():
    return StripeGateway(api_key="sk_test_dummy", timeout=5)


class TestStripeGateway:
    @patch("payments.gateways.stripe.PaymentIntent.create")
    def test_successful_charge(self, mock_create, gateway):
        mock_create.return_value = make_intent()

        result = gateway.charge(1857, "USD", "order-1", "pm_card_visa")

        assert isinstance(result, ChargeResult)
        assert result.external_payment_id == "pi_test_123"
        assert result.status == "succeeded"

        kwargs = mock_create.call_args.kwargs
        assert kwargs["amount"] == 1857
        assert kwargs["currency"] == "usd"
        assert kwargs["payment_method"] == "pm_card_visa"
        assert kwargs["confirm"] is True
        assert kwargs["idempotency_key"] == "order-1"

    @patch("payments.gateways.stripe.PaymentIntent.create")
    def test_missing_token_is_rejected_without_calling_stripe(self, mock_create, gateway):
        with pytest.raises(PaymentGatewayError):
            gateway.charge(1000, "USD", "order-1", "")

        mock_create.assert_not_called()

    @patch("payments.gateways.stripe.PaymentIntent.create")
    def test_card_decline(self, mock_create, gateway):
        mock_create.side_effect = stripe.CardError(
            "Your card was declined.", param=None, code="card_declined"
        )

        with pytest.raises(PaymentGatewayError) as exc_info:
            gateway.charge(1000, "USD", "order-1", "pm_card_chargeDeclined")

        assert exc_info.value.decline_code == "card_declined"

    @patch("payments.gateways.stripe.PaymentIntent.create")
    def test_network_error(self, mock_create, gateway):
        mock_create.side_effect = stripe.APIConnectionError("Request timed out")

        with pytest.raises(PaymentGatewayError):
            gateway.charge(1000, "USD", "order-1", "pm_card_visa")

    @patch("payments.gateways.stripe.PaymentIntent.create")
    def test_unfinished_intent_is_a_failure(self, mock_create, gateway):
        mock_create.return_value = make_intent(status="requires_action")

        with pytest.raises(PaymentGatewayError) as exc_info:
            gateway.charge(1000, "USD", "order-1", "pm_card_visa")

        assert "requires_action" in exc_info.value.message
