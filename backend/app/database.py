from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

import motor.motor_asyncio
from fastapi import Request
from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict
from pymongo import ASCENDING
from pymongo.errors import ConfigurationError


BASE_DIR = Path(__file__).resolve().parents[1]
ENV_FILES = [BASE_DIR / ".env.local", BASE_DIR / ".env"]

USERS = "users"
DONATION_REQUESTS = "donationRequests"
FUNDS = "funds"
BLOGS = "blogs"


class Settings(BaseSettings):
    mongodb_url: str = "mongodb://localhost:27017/bloodDonationDB"
    mongodb_database: str = "bloodDonationDB"
    jwt_secret: str = "supersecret"
    jwt_algorithm: str = "HS256"
    jwt_expires_min: int = 60 * 24 * 7
    mongo_server_timeout_ms: int = 2000
    mongo_connect_timeout_ms: int = 2000
    mongo_socket_timeout_ms: int = 2000
    stripe_secret_key: str | None = None
    payment_currency: str = "bdt"
    payment_timeout_seconds: float = 10.0
    firebase_credentials_path: str | None = None
    allow_insecure_email_login: bool = False
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=[str(path) for path in ENV_FILES],
        case_sensitive=False,
        env_prefix="",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


FALLBACK_MONGO_URL = "mongodb://localhost:27017/bloodDonationDB"


def create_client(settings: Settings) -> motor.motor_asyncio.AsyncIOMotorClient:
    connect_kwargs = {
        "serverSelectionTimeoutMS": settings.mongo_server_timeout_ms,
        "connectTimeoutMS": settings.mongo_connect_timeout_ms,
        "socketTimeoutMS": settings.mongo_socket_timeout_ms,
    }
    uri = settings.mongodb_url
    try:
        return motor.motor_asyncio.AsyncIOMotorClient(uri, **connect_kwargs)
    except ConfigurationError as exc:
        if uri == FALLBACK_MONGO_URL:
            raise
        logger.warning(
            "MongoDB DNS resolution failed for {} ({}). Falling back to local Mongo at {}.",
            uri,
            exc,
            FALLBACK_MONGO_URL,
        )
        return motor.motor_asyncio.AsyncIOMotorClient(FALLBACK_MONGO_URL, **connect_kwargs)


def resolve_database(
    client: motor.motor_asyncio.AsyncIOMotorClient, settings: Settings
) -> motor.motor_asyncio.AsyncIOMotorDatabase:
    try:
        return client.get_default_database(settings.mongodb_database)
    except ConfigurationError as exc:  # pragma: no cover - malformed uri
        logger.warning("Unable to read database from Mongo URI ({}). Using {}.", exc, settings.mongodb_database)
        return client.get_database(settings.mongodb_database)


async def ensure_indexes(db: motor.motor_asyncio.AsyncIOMotorDatabase) -> None:
    await db[USERS].create_index([("email", ASCENDING)], unique=True)
    await db[FUNDS].create_index([("transactionId", ASCENDING)], unique=True)
    await db[DONATION_REQUESTS].create_index([("requesterEmail", ASCENDING)])
    await db[DONATION_REQUESTS].create_index([("status", ASCENDING)])


def get_database(request: Request) -> motor.motor_asyncio.AsyncIOMotorDatabase:
    return request.app.state.db
