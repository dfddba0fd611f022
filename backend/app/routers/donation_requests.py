from __future__ import annotations

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.pagination import PageRequest
from ..core.policy import Action, Identity
from ..database import get_database
from ..models.base import Deleted
from ..models.donation_request import (
    DonationRequest,
    DonationRequestCreate,
    DonationRequestPage,
    DonationRequestUpdate,
    RequestStatus,
    StatusChange,
)
from ..services.donation_requests import DonationRequestService
from .auth import get_current_user, require
from .params import page_request

router = APIRouter(prefix="/donation-requests", tags=["donation-requests"])
CurrentUser = Annotated[Identity, Depends(get_current_user)]


def get_request_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> DonationRequestService:
    return DonationRequestService(db)


# Fixed paths are declared before "/{request_id}" so they are not captured by it.


@router.post("", response_model=DonationRequest, status_code=status.HTTP_201_CREATED)
async def create_request(
    identity: Annotated[Identity, Depends(require(Action.REQUEST_CREATE))],
    payload: DonationRequestCreate,
    requests: DonationRequestService = Depends(get_request_service),
) -> DonationRequest:
    return DonationRequest(**await requests.create(identity, payload))


@router.get("/public", response_model=List[DonationRequest])
async def list_public_requests(
    requests: DonationRequestService = Depends(get_request_service),
) -> List[DonationRequest]:
    return [DonationRequest(**doc) for doc in await requests.list_public()]


@router.get("/search", response_model=List[DonationRequest])
async def search_requests(
    q: str = Query(default=""),
    requests: DonationRequestService = Depends(get_request_service),
) -> List[DonationRequest]:
    return [DonationRequest(**doc) for doc in await requests.search(q)]


@router.get("/my", response_model=DonationRequestPage)
async def list_my_requests(
    identity: Annotated[Identity, Depends(require(Action.REQUEST_LIST_OWN))],
    request_status: Optional[RequestStatus] = Query(default=None, alias="status"),
    page: PageRequest = Depends(page_request),
    requests: DonationRequestService = Depends(get_request_service),
) -> DonationRequestPage:
    result = await requests.list_own(identity, request_status, page)
    return DonationRequestPage(requests=[DonationRequest(**doc) for doc in result.items], total=result.total)


@router.get("", response_model=DonationRequestPage)
async def list_all_requests(
    _: Annotated[Identity, Depends(require(Action.REQUEST_LIST_ALL))],
    request_status: Optional[RequestStatus] = Query(default=None, alias="status"),
    page: PageRequest = Depends(page_request),
    requests: DonationRequestService = Depends(get_request_service),
) -> DonationRequestPage:
    result = await requests.list_all(request_status, page)
    return DonationRequestPage(requests=[DonationRequest(**doc) for doc in result.items], total=result.total)


@router.patch("/donate/{request_id}", response_model=DonationRequest)
async def donate(
    request_id: str,
    identity: Annotated[Identity, Depends(require(Action.REQUEST_CLAIM))],
    requests: DonationRequestService = Depends(get_request_service),
) -> DonationRequest:
    return DonationRequest(**await requests.claim(identity, request_id))


@router.patch("/status/{request_id}", response_model=DonationRequest)
async def change_request_status(
    request_id: str,
    payload: StatusChange,
    identity: CurrentUser,
    requests: DonationRequestService = Depends(get_request_service),
) -> DonationRequest:
    return DonationRequest(**await requests.change_status(identity, request_id, payload.status))


@router.get("/{request_id}", response_model=DonationRequest)
async def get_request(
    request_id: str,
    _: Annotated[Identity, Depends(require(Action.REQUEST_READ))],
    requests: DonationRequestService = Depends(get_request_service),
) -> DonationRequest:
    return DonationRequest(**await requests.get(request_id))


@router.put("/{request_id}", response_model=DonationRequest)
async def update_request(
    request_id: str,
    payload: DonationRequestUpdate,
    identity: CurrentUser,
    requests: DonationRequestService = Depends(get_request_service),
) -> DonationRequest:
    return DonationRequest(**await requests.update(identity, request_id, payload))


@router.delete("/{request_id}", response_model=Deleted)
async def delete_request(
    request_id: str,
    identity: CurrentUser,
    requests: DonationRequestService = Depends(get_request_service),
) -> Deleted:
    return Deleted(id=await requests.delete(identity, request_id))
