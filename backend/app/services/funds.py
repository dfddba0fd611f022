from __future__ import annotations

from typing import Any, Dict, Protocol, Tuple

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from ..core.errors import AmountMismatch, DuplicateTransaction, VerificationFailed
from ..core.money import to_minor_units
from ..core.pagination import Page, PageRequest
from ..core.policy import Identity
from ..database import FUNDS
from ..models.base import serialize_id, utcnow
from ..utils.payments import VerifiedPayment
from .documents import paginate


class PaymentGateway(Protocol):
    currency: str

    async def verify(self, transaction_id: str) -> VerifiedPayment: ...

    async def create_payment_intent(self, amount_minor: int) -> Tuple[str, str]: ...

    async def create_checkout_session(
        self, amount_minor: int, success_url: str, cancel_url: str, customer_email: str
    ) -> Tuple[str, str | None]: ...


class FundService:
    def __init__(self, db: AsyncIOMotorDatabase, gateway: PaymentGateway) -> None:
        self.collection = db[FUNDS]
        self.gateway = gateway

    async def record(self, identity: Identity, transaction_id: str, amount: float) -> Dict[str, Any]:
        if await self.collection.find_one({"transactionId": transaction_id}, {"_id": 1}):
            logger.warning("Duplicate fund submission for transaction {} by {}", transaction_id, identity.email)
            raise DuplicateTransaction()

        payment = await self.gateway.verify(transaction_id)
        if not payment.completed:
            logger.warning("Transaction {} is not completed at the provider", transaction_id)
            raise VerificationFailed("Payment has not been completed")

        claimed_minor = to_minor_units(amount)
        if claimed_minor != payment.amount_minor or payment.currency != self.gateway.currency:
            logger.warning(
                "Amount mismatch for {}: claimed {} {}, provider {} {}",
                transaction_id,
                claimed_minor,
                self.gateway.currency,
                payment.amount_minor,
                payment.currency,
            )
            raise AmountMismatch()

        document = {
            "email": identity.email,
            "userName": identity.name,
            "amount": amount,
            "currency": payment.currency,
            "transactionId": transaction_id,
            "createdAt": utcnow(),
        }
        # unique index on transactionId catches a submission that raced past the lookup
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError as exc:
            raise DuplicateTransaction() from exc
        document["_id"] = result.inserted_id
        logger.info("Recorded fund {} of {} from {}", transaction_id, amount, identity.email)
        return serialize_id(document)

    async def list(self, page: PageRequest) -> Page:
        return await paginate(self.collection, {}, page)

    async def total(self) -> Tuple[float, int]:
        cursor = self.collection.aggregate(
            [{"$group": {"_id": None, "total": {"$sum": "$amount"}, "count": {"$sum": 1}}}]
        )
        rows = await cursor.to_list(length=1)
        if not rows:
            return 0.0, 0
        return float(rows[0]["total"]), int(rows[0]["count"])
