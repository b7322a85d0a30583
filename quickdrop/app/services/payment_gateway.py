"""
Payment processor gateway.

Creates Stripe PaymentIntents for the checkout page. Capturing and
recording the payment happens client-side and through the
PaymentReconciler respectively.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import stripe

from quickdrop.app.core.config import settings
from quickdrop.app.core.exceptions import InternalServiceError, InvalidArgumentError
from quickdrop.app.core.reliability import CircuitBreaker, CircuitOpenError

logger = logging.getLogger(__name__)


@dataclass
class PaymentIntent:
    id: str
    client_secret: str
    amount: float
    currency: str


def to_minor_units(amount: float) -> int:
    """Stripe expects the smallest currency unit (poisha for BDT)."""
    return int(round(amount * 100))


class StripePaymentGateway:

    def __init__(
        self,
        secret_key: Optional[str] = None,
        currency: Optional[str] = None,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.secret_key = secret_key
        self.currency = (currency or settings.payment_currency).lower()
        self.breaker = breaker or CircuitBreaker(name="stripe", failure_threshold=3, reset_timeout=30)

        if not secret_key:
            logger.warning("No Stripe API key configured - payment intents are disabled")
        elif secret_key.startswith("sk_test_"):
            logger.info("Stripe TEST MODE active - using sandbox environment")

    async def create_payment_intent(self, amount: float) -> PaymentIntent:
        """
        Raises:
            InvalidArgumentError: non-positive amount
            InternalServiceError: processor not configured, failing, or
                short-circuited by the breaker
        """
        if amount is None or amount <= 0:
            raise InvalidArgumentError("Amount must be greater than zero", details={"amount": amount})
        if not self.secret_key:
            raise InternalServiceError("Payment processor is not configured")

        try:
            intent = await self.breaker.call(
                asyncio.to_thread,
                stripe.PaymentIntent.create,
                amount=to_minor_units(amount),
                currency=self.currency,
                payment_method_types=["card"],
                api_key=self.secret_key,
            )
        except CircuitOpenError as exc:
            raise InternalServiceError("Payment processor temporarily unavailable") from exc
        except stripe.StripeError as exc:
            logger.error("Failed to create Stripe payment intent: %s", exc)
            raise InternalServiceError(
                "Failed to create payment intent",
                details={"processor_message": getattr(exc, "user_message", None) or str(exc)}
            ) from exc

        return PaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret,
            amount=amount,
            currency=self.currency,
        )


payment_gateway = StripePaymentGateway(secret_key=settings.stripe_secret_key)


def get_payment_gateway() -> StripePaymentGateway:
    """FastAPI dependency; overridden in tests."""
    return payment_gateway
