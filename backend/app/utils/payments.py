from __future__ import annotations

import asyncio
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Tuple, Type

import stripe
from loguru import logger

from ..core.errors import ApiError, UpstreamError, ValidationFailed, VerificationFailed
from ..database import get_settings
from .logging import log_payment_error

CHECKOUT_SESSION_PREFIX = "cs_"


@dataclass(frozen=True)
class VerifiedPayment:
    transaction_id: str
    completed: bool
    amount_minor: int
    currency: str


class StripePaymentGateway:
    def __init__(self, secret_key: str | None, currency: str, timeout_seconds: float) -> None:
        if not secret_key:
            logger.warning("Stripe secret key missing; payment endpoints will be unavailable.")
        self.secret_key = secret_key
        self.currency = currency.lower()
        self.timeout_seconds = timeout_seconds
        stripe.max_network_retries = 0

    async def _call(self, context: str, fn: Callable[[], Any], on_invalid: Type[ApiError]) -> Any:
        if not self.secret_key:
            raise UpstreamError("Payment provider is not configured")
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(loop.run_in_executor(None, fn), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            log_payment_error(context, exc)
            raise UpstreamError("Payment provider timed out", retriable=True) from exc
        except (stripe.APIConnectionError, stripe.RateLimitError) as exc:
            log_payment_error(context, exc)
            raise UpstreamError("Payment provider unavailable", retriable=True) from exc
        except stripe.InvalidRequestError as exc:
            logger.warning("Payment provider rejected {}: {}", context, exc.user_message or exc)
            raise on_invalid(exc.user_message or on_invalid.default_message) from exc
        except stripe.StripeError as exc:
            log_payment_error(context, exc)
            raise UpstreamError("Payment provider error") from exc

    async def create_payment_intent(self, amount_minor: int) -> Tuple[str, str]:
        intent = await self._call(
            "create_payment_intent",
            lambda: stripe.PaymentIntent.create(
                amount=amount_minor,
                currency=self.currency,
                payment_method_types=["card"],
                api_key=self.secret_key,
            ),
            ValidationFailed,
        )
        return intent.client_secret, intent.id

    async def create_checkout_session(
        self, amount_minor: int, success_url: str, cancel_url: str, customer_email: str
    ) -> Tuple[str, str | None]:
        session = await self._call(
            "create_checkout_session",
            lambda: stripe.checkout.Session.create(
                mode="payment",
                line_items=[
                    {
                        "price_data": {
                            "currency": self.currency,
                            "product_data": {"name": "Blood donation fund"},
                            "unit_amount": amount_minor,
                        },
                        "quantity": 1,
                    }
                ],
                customer_email=customer_email,
                success_url=success_url,
                cancel_url=cancel_url,
                api_key=self.secret_key,
            ),
            ValidationFailed,
        )
        return session.id, session.url

    async def verify(self, transaction_id: str) -> VerifiedPayment:
        if transaction_id.startswith(CHECKOUT_SESSION_PREFIX):
            session = await self._call(
                "verify_checkout_session",
                lambda: stripe.checkout.Session.retrieve(transaction_id, api_key=self.secret_key),
                VerificationFailed,
            )
            return VerifiedPayment(
                transaction_id=transaction_id,
                completed=session.payment_status == "paid",
                amount_minor=int(session.amount_total or 0),
                currency=(session.currency or "").lower(),
            )
        intent = await self._call(
            "verify_payment_intent",
            lambda: stripe.PaymentIntent.retrieve(transaction_id, api_key=self.secret_key),
            VerificationFailed,
        )
        return VerifiedPayment(
            transaction_id=transaction_id,
            completed=intent.status == "succeeded",
            amount_minor=int(intent.amount_received or 0),
            currency=(intent.currency or "").lower(),
        )


@lru_cache
def get_payment_gateway() -> StripePaymentGateway:
    settings = get_settings()
    return StripePaymentGateway(
        settings.stripe_secret_key,
        currency=settings.payment_currency,
        timeout_seconds=settings.payment_timeout_seconds,
    )
