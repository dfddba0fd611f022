from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import ExpiredSignatureError, JWTError, jwt

from ..core.errors import Unauthenticated
from ..database import Settings, get_settings


def create_access_token(
    email: str,
    role: str,
    name: str = "",
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    settings = settings or get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expires_min)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode: Dict[str, Any] = {"sub": email, "email": email, "role": role, "name": name, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings | None = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise Unauthenticated("Token expired") from exc
    except JWTError as exc:
        raise Unauthenticated("Invalid token") from exc
    if not payload.get("email"):
        raise Unauthenticated("Invalid token payload")
    return payload


def bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise Unauthenticated("Missing authorization token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated("Malformed authorization header")
    return token.strip()
