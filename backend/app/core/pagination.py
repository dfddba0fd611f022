from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def status_filter(status: str | None, **base: Any) -> Dict[str, Any]:
    query: Dict[str, Any] = dict(base)
    if status:
        query["status"] = status
    return query


def substring_query(text: str, fields: Iterable[str]) -> Dict[str, Any]:
    """Case-insensitive substring match of ``text`` against any of ``fields``."""
    pattern = re.escape(text.strip())
    return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in fields]}


def exact_ci(value: str) -> Dict[str, Any]:
    return {"$regex": f"^{re.escape(value.strip())}$", "$options": "i"}


@dataclass
class Page:
    items: List[Dict[str, Any]]
    total: int
