from __future__ import annotations

from fastapi import APIRouter, Depends, Header
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.errors import Unauthenticated, UpstreamError
from ..core.policy import Action, Identity, enforce
from ..database import Settings, get_database, get_settings
from ..models.user import Token, TokenRequest
from ..services.users import UserService
from ..utils.identity import FirebaseIdentityVerifier, get_identity_verifier
from ..utils.security import bearer_token, create_access_token, decode_token

router = APIRouter(tags=["auth"])


def get_user_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> UserService:
    return UserService(db)


@router.post("/jwt", response_model=Token)
async def issue_token(
    payload: TokenRequest,
    users: UserService = Depends(get_user_service),
    verifier: FirebaseIdentityVerifier = Depends(get_identity_verifier),
    settings: Settings = Depends(get_settings),
) -> Token:
    if payload.id_token:
        email = await verifier.verify(payload.id_token)
    elif settings.allow_insecure_email_login:
        logger.warning("Issuing token for {} without identity proof (insecure email login enabled)", payload.email)
        email = payload.email
    elif not verifier.available:
        raise UpstreamError("Identity provider is not configured")
    else:
        raise Unauthenticated("Identity token required")

    identity = await users.identity_for(email)
    if identity is None:
        raise Unauthenticated("Unauthorized")
    token = create_access_token(identity.email, identity.role, identity.name, settings=settings)
    return Token(token=token)


async def get_current_user(
    authorization: str | None = Header(default=None),
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> Identity:
    claims = decode_token(bearer_token(authorization), settings=settings)
    identity = await users.identity_for(claims["email"])
    if identity is None:
        raise Unauthenticated("User not found")
    return identity


def require(action: Action):
    """Guard for actions decided by role alone; ownership checks happen in the services."""

    def dependency(identity: Identity = Depends(get_current_user)) -> Identity:
        enforce(identity, action)
        return identity

    return dependency
