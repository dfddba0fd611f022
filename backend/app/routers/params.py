from __future__ import annotations

from fastapi import Query

from ..core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, PageRequest


def page_request(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
) -> PageRequest:
    return PageRequest(page=page, limit=limit)
