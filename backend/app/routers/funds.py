from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.money import to_minor_units
from ..core.pagination import PageRequest
from ..core.policy import Action, Identity
from ..database import get_database
from ..models.fund import (
    CheckoutSessionCreate,
    CheckoutSessionResponse,
    Fund,
    FundCreate,
    FundPage,
    FundTotal,
    PaymentIntentCreate,
    PaymentIntentResponse,
)
from ..services.funds import FundService, PaymentGateway
from ..utils.payments import get_payment_gateway
from .auth import require
from .params import page_request

router = APIRouter(tags=["funds"])


def get_fund_service(
    db: AsyncIOMotorDatabase = Depends(get_database),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> FundService:
    return FundService(db, gateway)


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    payload: PaymentIntentCreate,
    _: Annotated[Identity, Depends(require(Action.PAYMENT_START))],
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PaymentIntentResponse:
    client_secret, intent_id = await gateway.create_payment_intent(to_minor_units(payload.amount))
    return PaymentIntentResponse(client_secret=client_secret, payment_intent_id=intent_id)


@router.post("/create-checkout-session", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    payload: CheckoutSessionCreate,
    identity: Annotated[Identity, Depends(require(Action.PAYMENT_START))],
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> CheckoutSessionResponse:
    session_id, url = await gateway.create_checkout_session(
        to_minor_units(payload.amount), payload.success_url, payload.cancel_url, identity.email
    )
    return CheckoutSessionResponse(id=session_id, url=url)


@router.post("/funds", response_model=Fund, status_code=status.HTTP_201_CREATED)
async def record_fund(
    payload: FundCreate,
    identity: Annotated[Identity, Depends(require(Action.FUND_CREATE))],
    funds: FundService = Depends(get_fund_service),
) -> Fund:
    return Fund(**await funds.record(identity, payload.transaction_id, payload.amount))


@router.get("/funds/total", response_model=FundTotal)
async def funds_total(
    _: Annotated[Identity, Depends(require(Action.FUND_TOTAL))],
    funds: FundService = Depends(get_fund_service),
) -> FundTotal:
    total, count = await funds.total()
    return FundTotal(total=total, count=count)


@router.get("/funds", response_model=FundPage)
async def list_funds(
    _: Annotated[Identity, Depends(require(Action.FUND_LIST))],
    page: PageRequest = Depends(page_request),
    funds: FundService = Depends(get_fund_service),
) -> FundPage:
    result = await funds.list(page)
    return FundPage(funds=[Fund(**doc) for doc in result.items], total=result.total)
