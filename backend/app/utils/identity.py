from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import auth, credentials
from loguru import logger

from ..core.errors import Unauthenticated, UpstreamError
from ..database import get_settings

FIREBASE_APP_NAME = "blood-donation-identity"
VERIFY_TIMEOUT_SECONDS = 5.0


class FirebaseIdentityVerifier:
    """Verifies Firebase ID tokens issued to the web client and returns the email they assert."""

    def __init__(self, credentials_path: str | None) -> None:
        self.app: Optional[firebase_admin.App] = None
        if not credentials_path:
            logger.warning("Firebase credentials missing; federated token exchange is disabled.")
            return
        try:
            self.app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            cred = credentials.Certificate(credentials_path)
            self.app = firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)

    @property
    def available(self) -> bool:
        return self.app is not None

    async def verify(self, id_token: str) -> str:
        if self.app is None:
            raise UpstreamError("Identity provider is not configured")
        loop = asyncio.get_running_loop()
        try:
            decoded = await asyncio.wait_for(
                loop.run_in_executor(None, lambda: auth.verify_id_token(id_token, app=self.app)),
                timeout=VERIFY_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError as exc:
            logger.error("Identity token verification timed out")
            raise UpstreamError("Identity provider timed out", retriable=True) from exc
        except auth.CertificateFetchError as exc:
            logger.error("Unable to fetch identity provider certificates: {}", exc)
            raise UpstreamError("Identity provider unavailable", retriable=True) from exc
        except (auth.InvalidIdTokenError, ValueError) as exc:
            raise Unauthenticated("Invalid identity token") from exc
        email = decoded.get("email")
        if not email:
            raise Unauthenticated("Identity token carries no email")
        return email


@lru_cache
def get_identity_verifier() -> FirebaseIdentityVerifier:
    return FirebaseIdentityVerifier(get_settings().firebase_credentials_path)
