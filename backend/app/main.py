from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pymongo.errors import PyMongoError

from .database import create_client, ensure_indexes, get_settings, resolve_database
from .error_handlers import register_error_handlers
from .routers import auth, blogs, donation_requests, funds, search, users
from .utils.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    client = create_client(settings)
    app.state.db = resolve_database(client, settings)
    try:
        await ensure_indexes(app.state.db)
    except PyMongoError as exc:  # pragma: no cover - external service
        logger.warning("MongoDB unavailable; skipping index creation: {}", exc)
    logger.info("Connected to MongoDB database {}", app.state.db.name)
    try:
        yield
    finally:
        client.close()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Blood Donation API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(donation_requests.router)
    app.include_router(search.router)
    app.include_router(blogs.router)
    app.include_router(funds.router)

    @app.get("/", include_in_schema=False)
    async def root() -> Dict[str, str]:
        return {"status": "ok", "message": "Blood Donation API running"}

    @app.get("/health")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
