"""Stripe Payment Gateway: creates PaymentIntents through the official stripe SDK.

Invariants:
    - Amounts arrive in major units and are sent in minor units (x100, half-up)
    - Automatic payment methods are always enabled
    - Every SDK failure is mapped to PaymentProviderError with the provider message
    - No retries: a failed call fails the request

Design Decisions:
    - The SDK's blocking call runs in a worker thread (asyncio.to_thread) so the
      event loop keeps serving other requests
"""

import asyncio
import logging
from decimal import Decimal, ROUND_HALF_UP

import stripe

from investestate.core.errors import PaymentProviderError

logger = logging.getLogger(__name__)


def to_minor_units(amount: float) -> int:
    return int(
        (Decimal(str(amount)) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP),
    )


class StripePaymentGateway:
    """PaymentGateway backed by Stripe PaymentIntents."""

    def __init__(self, secret_key: str, currency: str = "inr"):
        self.secret_key = secret_key
        self.currency = currency

    async def create_payment_intent(self, amount: float) -> str:
        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                api_key=self.secret_key,
                amount=to_minor_units(amount),
                currency=self.currency,
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as e:
            logger.error(f"Error creating payment intent: {e}")
            raise PaymentProviderError(
                "Failed to create payment intent",
                provider_message=e.user_message or str(e),
            )
        return intent.client_secret
