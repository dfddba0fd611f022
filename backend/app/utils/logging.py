from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        backtrace=False,
        diagnose=False,
    )


def log_db_error(context: str, exc: Exception) -> None:
    logger.error("Database error in {}: {}", context, exc)


def log_payment_error(context: str, exc: Exception) -> None:
    logger.error("Payment provider error in {}: {}", context, exc)
