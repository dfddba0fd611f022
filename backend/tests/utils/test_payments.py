"""Stripe gateway: verification mapping and error classification."""

from types import SimpleNamespace

import pytest
import stripe

from app.core.errors import UpstreamError, VerificationFailed
from app.utils.payments import StripePaymentGateway


@pytest.fixture
def gateway():
    return StripePaymentGateway("sk_test_123", currency="BDT", timeout_seconds=2)


async def test_succeeded_payment_intent(gateway, monkeypatch):
    monkeypatch.setattr(
        stripe.PaymentIntent,
        "retrieve",
        lambda *args, **kwargs: SimpleNamespace(status="succeeded", amount_received=50000, currency="bdt"),
    )

    payment = await gateway.verify("pi_1")

    assert payment.completed
    assert payment.amount_minor == 50000
    assert payment.currency == "bdt"


async def test_unfinished_payment_intent_is_not_completed(gateway, monkeypatch):
    monkeypatch.setattr(
        stripe.PaymentIntent,
        "retrieve",
        lambda *args, **kwargs: SimpleNamespace(status="requires_payment_method", amount_received=0, currency="bdt"),
    )
    assert not (await gateway.verify("pi_1")).completed


async def test_checkout_session_ids_use_session_lookup(gateway, monkeypatch):
    monkeypatch.setattr(
        stripe.checkout.Session,
        "retrieve",
        lambda *args, **kwargs: SimpleNamespace(payment_status="paid", amount_total=12550, currency="bdt"),
    )

    payment = await gateway.verify("cs_test_1")

    assert payment.completed
    assert payment.amount_minor == 12550


async def test_unknown_transaction_is_verification_failure(gateway, monkeypatch):
    def missing(*args, **kwargs):
        raise stripe.InvalidRequestError("No such payment_intent", "id")

    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", missing)

    with pytest.raises(VerificationFailed):
        await gateway.verify("pi_missing")


async def test_connection_errors_are_retriable(gateway, monkeypatch):
    def offline(*args, **kwargs):
        raise stripe.APIConnectionError("network down")

    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", offline)

    with pytest.raises(UpstreamError) as info:
        await gateway.verify("pi_1")
    assert info.value.retriable


async def test_unconfigured_gateway_refuses_calls():
    gateway = StripePaymentGateway(None, currency="bdt", timeout_seconds=2)
    with pytest.raises(UpstreamError) as info:
        await gateway.verify("pi_1")
    assert not info.value.retriable
