from __future__ import annotations

from typing import Any, Dict, List

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.policy import Identity
from ..database import BLOGS
from ..models.base import serialize_id, utcnow
from ..models.blog import BlogCreate
from .documents import find_all


class BlogService:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db[BLOGS]

    async def create(self, identity: Identity, payload: BlogCreate) -> Dict[str, Any]:
        document = {
            **payload.to_document(),
            "author": identity.email,
            "status": "published",
            "createdAt": utcnow(),
        }
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info("Blog {} published by {}", result.inserted_id, identity.email)
        return serialize_id(document)

    async def list_published(self) -> List[Dict[str, Any]]:
        return await find_all(self.collection, {"status": "published"}, createdAt=-1, _id=-1)
