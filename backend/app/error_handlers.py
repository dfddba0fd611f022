from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pymongo.errors import AutoReconnect, ExecutionTimeout, NetworkTimeout, PyMongoError

from .core.errors import ApiError, ErrorCategory, UpstreamError
from .utils.logging import log_db_error

RETRIABLE_DB_ERRORS = (AutoReconnect, NetworkTimeout, ExecutionTimeout)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(PyMongoError, database_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("{} on {}: {}", exc.code, request.url.path, exc.message)
    else:
        logger.info("{} on {}: {}", exc.code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Validation error on {}: {}", request.url.path, exc.errors())
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_validation_response(exc))


async def database_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    log_db_error(request.url.path, exc)
    error = UpstreamError("Database unavailable. Try again shortly.", retriable=isinstance(exc, RETRIABLE_DB_ERRORS))
    return JSONResponse(status_code=error.http_status, content=error.to_response())


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error("Unhandled exception on {}", request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=ApiError().to_response())


def _validation_response(exc: RequestValidationError) -> Dict[str, Any]:
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": ErrorCategory.VALIDATION.value,
            "retriable": False,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
                for error in exc.errors()
            ],
        }
    }
