from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import MongoBaseModel


class FundCreate(MongoBaseModel):
    transaction_id: str = Field(min_length=1)
    amount: float = Field(gt=0, allow_inf_nan=False)


class Fund(MongoBaseModel):
    id: str = Field(alias="_id")
    email: str
    user_name: Optional[str] = None
    amount: float
    currency: Optional[str] = None
    transaction_id: str
    created_at: Optional[datetime] = None


class FundPage(MongoBaseModel):
    funds: List[Fund]
    total: int


class FundTotal(MongoBaseModel):
    total: float
    count: int


class PaymentIntentCreate(MongoBaseModel):
    amount: float = Field(gt=0, allow_inf_nan=False)


class PaymentIntentResponse(MongoBaseModel):
    client_secret: str
    payment_intent_id: str


class CheckoutSessionCreate(MongoBaseModel):
    amount: float = Field(gt=0, allow_inf_nan=False)
    success_url: str
    cancel_url: str


class CheckoutSessionResponse(MongoBaseModel):
    id: str
    url: Optional[str] = None
