"""Shared fixtures: in-memory MongoDB, fake payment provider and identity verifier, HTTP client.

Invariants:
    - Every test gets a fresh mongomock database with the production indexes
    - get_database, get_settings, get_payment_gateway and get_identity_verifier are overridden
    - No test reaches Stripe, Firebase or a real MongoDB
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Dict

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ALLOW_INSECURE_EMAIL_LOGIN", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from app.core.errors import Unauthenticated, VerificationFailed
from app.database import Settings, ensure_indexes, get_database, get_settings
from app.main import app
from app.utils.identity import get_identity_verifier
from app.utils.payments import VerifiedPayment, get_payment_gateway
from app.utils.security import create_access_token


class FakeGateway:
    """Stands in for Stripe: payments are registered with complete() before verification."""

    def __init__(self, currency: str = "bdt") -> None:
        self.currency = currency
        self.payments: Dict[str, VerifiedPayment] = {}
        self.verify_calls: list[str] = []
        self.intents: list[int] = []
        self.sessions: list[dict] = []

    def complete(self, transaction_id: str, amount_minor: int, currency: str = "bdt", completed: bool = True) -> None:
        self.payments[transaction_id] = VerifiedPayment(transaction_id, completed, amount_minor, currency)

    async def verify(self, transaction_id: str) -> VerifiedPayment:
        self.verify_calls.append(transaction_id)
        if transaction_id not in self.payments:
            raise VerificationFailed("No such payment")
        return self.payments[transaction_id]

    async def create_payment_intent(self, amount_minor: int):
        self.intents.append(amount_minor)
        intent_id = f"pi_test_{len(self.intents)}"
        return f"{intent_id}_secret_abc", intent_id

    async def create_checkout_session(self, amount_minor, success_url, cancel_url, customer_email):
        self.sessions.append(
            {"amount": amount_minor, "success_url": success_url, "cancel_url": cancel_url, "email": customer_email}
        )
        session_id = f"cs_test_{len(self.sessions)}"
        return session_id, f"https://checkout.stripe.com/c/pay/{session_id}"


class FakeVerifier:
    def __init__(self) -> None:
        self.tokens: Dict[str, str] = {}
        self.available = True

    async def verify(self, id_token: str) -> str:
        if id_token not in self.tokens:
            raise Unauthenticated("Invalid identity token")
        return self.tokens[id_token]


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret="test-secret", payment_currency="bdt", allow_insecure_email_login=False, _env_file=None)


@pytest.fixture
async def db():
    database = AsyncMongoMockClient()["blood_donation_test"]
    await ensure_indexes(database)
    return database


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier()


@pytest.fixture
async def client(db, gateway, verifier, settings):
    app.dependency_overrides[get_database] = lambda: db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_identity_verifier] = lambda: verifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    async def _make(email: str, role: str = "donor", status: str = "active", **fields):
        document = {
            "email": email,
            "name": email.split("@")[0].title(),
            "role": role,
            "status": status,
            "bloodGroup": "A+",
            "district": "Dhaka",
            "upazila": "Savar",
            "createdAt": datetime.now(timezone.utc),
            **fields,
        }
        result = await db["users"].insert_one(document)
        document["_id"] = result.inserted_id
        return document

    return _make


@pytest.fixture
def auth_headers(settings):
    def _headers(user: dict) -> Dict[str, str]:
        token = create_access_token(user["email"], user["role"], user["name"], settings=settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers
