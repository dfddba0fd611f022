from __future__ import annotations

from typing import Any, Dict, List

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING

from ..core.errors import NotFound
from ..core.pagination import Page, PageRequest
from ..models.base import serialize_id


def parse_object_id(value: str, label: str = "Resource") -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise NotFound(f"{label} not found") from exc


async def paginate(collection: AsyncIOMotorCollection, query: Dict[str, Any], page: PageRequest) -> Page:
    total = await collection.count_documents(query)
    cursor = collection.find(query).sort("_id", ASCENDING).skip(page.skip).limit(page.limit)
    items = [serialize_id(doc) async for doc in cursor]
    return Page(items=items, total=total)


async def find_all(collection: AsyncIOMotorCollection, query: Dict[str, Any], **sort: int) -> List[Dict[str, Any]]:
    cursor = collection.find(query)
    if sort:
        cursor = cursor.sort(list(sort.items()))
    return [serialize_id(doc) async for doc in cursor]
