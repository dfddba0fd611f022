from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from ..core.errors import NotFound
from ..core.pagination import PageRequest
from ..core.policy import Action, Identity, UserStatus
from ..models.base import Message
from ..models.user import RoleUpdate, StatusUpdate, UserCreate, UserPage, UserProfileUpdate, UserPublic
from ..services.users import UserService
from .auth import get_user_service, require
from .params import page_request

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"model": Message, "description": "User already exists"}},
)
async def register_user(payload: UserCreate, users: UserService = Depends(get_user_service)):
    user, created = await users.register(payload)
    if not created:
        return JSONResponse({"message": "User already exists"}, status_code=status.HTTP_200_OK)
    return UserPublic(**user)


@router.get("", response_model=UserPage)
async def list_users(
    _: Annotated[Identity, Depends(require(Action.USER_LIST))],
    user_status: Optional[UserStatus] = Query(default=None, alias="status"),
    page: PageRequest = Depends(page_request),
    users: UserService = Depends(get_user_service),
) -> UserPage:
    result = await users.list(user_status, page)
    return UserPage(users=[UserPublic(**user) for user in result.items], total=result.total)


@router.get("/profile", response_model=UserPublic)
async def get_profile(
    identity: Annotated[Identity, Depends(require(Action.PROFILE_READ))],
    users: UserService = Depends(get_user_service),
) -> UserPublic:
    user = await users.get_by_email(identity.email)
    if not user:
        raise NotFound("User not found")
    return UserPublic(**user)


@router.put("/profile", response_model=UserPublic)
async def update_profile(
    identity: Annotated[Identity, Depends(require(Action.PROFILE_UPDATE))],
    payload: UserProfileUpdate,
    users: UserService = Depends(get_user_service),
) -> UserPublic:
    return UserPublic(**await users.update_profile(identity, payload))


@router.patch("/role/{user_id}", response_model=UserPublic)
async def change_role(
    user_id: str,
    payload: RoleUpdate,
    actor: Annotated[Identity, Depends(require(Action.USER_CHANGE_ROLE))],
    users: UserService = Depends(get_user_service),
) -> UserPublic:
    return UserPublic(**await users.change_role(user_id, payload.role, actor))


@router.patch("/status/{user_id}", response_model=UserPublic)
async def change_status(
    user_id: str,
    payload: StatusUpdate,
    actor: Annotated[Identity, Depends(require(Action.USER_CHANGE_STATUS))],
    users: UserService = Depends(get_user_service),
) -> UserPublic:
    return UserPublic(**await users.change_status(user_id, payload.status, actor))
