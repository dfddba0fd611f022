from __future__ import annotations

from typing import Any, Dict, List, Tuple

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..core.errors import NotFound, ValidationFailed
from ..core.pagination import Page, PageRequest, exact_ci, status_filter
from ..core.policy import Identity
from ..database import USERS
from ..models.base import serialize_id, utcnow
from ..models.user import UserCreate, UserProfileUpdate
from .documents import find_all, paginate, parse_object_id


class UserService:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db[USERS]

    async def register(self, payload: UserCreate) -> Tuple[Dict[str, Any], bool]:
        """Create a donor account; returns the stored user and whether it was created."""
        existing = await self.collection.find_one({"email": payload.email})
        if existing:
            return serialize_id(existing), False
        document = {
            **payload.to_document(),
            "role": "donor",
            "status": "active",
            "createdAt": utcnow(),
        }
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError:
            existing = await self.collection.find_one({"email": payload.email})
            return serialize_id(existing), False
        document["_id"] = result.inserted_id
        logger.info("Registered user {}", payload.email)
        return serialize_id(document), True

    async def get_by_email(self, email: str) -> Dict[str, Any] | None:
        user = await self.collection.find_one({"email": email})
        return serialize_id(user) if user else None

    async def identity_for(self, email: str) -> Identity | None:
        user = await self.collection.find_one({"email": email})
        if not user:
            return None
        return Identity(
            email=user["email"],
            role=user.get("role", "donor"),
            name=user.get("name", ""),
            status=user.get("status", "active"),
        )

    async def list(self, status: str | None, page: PageRequest) -> Page:
        return await paginate(self.collection, status_filter(status), page)

    async def update_profile(self, identity: Identity, payload: UserProfileUpdate) -> Dict[str, Any]:
        changes = payload.to_document()
        if not changes:
            raise ValidationFailed("No profile fields to update")
        updated = await self.collection.find_one_and_update(
            {"email": identity.email},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFound("User not found")
        return serialize_id(updated)

    async def _set_field(self, user_id: str, field: str, value: str, actor: Identity) -> Dict[str, Any]:
        updated = await self.collection.find_one_and_update(
            {"_id": parse_object_id(user_id, "User")},
            {"$set": {field: value}},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFound("User not found")
        logger.info("{} set {}={} on user {}", actor.email, field, value, updated["email"])
        return serialize_id(updated)

    async def change_role(self, user_id: str, role: str, actor: Identity) -> Dict[str, Any]:
        return await self._set_field(user_id, "role", role, actor)

    async def change_status(self, user_id: str, status: str, actor: Identity) -> Dict[str, Any]:
        return await self._set_field(user_id, "status", status, actor)

    async def search_donors(
        self,
        blood_group: str | None = None,
        district: str | None = None,
        upazila: str | None = None,
    ) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {"role": "donor", "status": "active"}
        if blood_group:
            # an unencoded "+" in the query string arrives as a space
            query["bloodGroup"] = blood_group.lstrip().replace(" ", "+")
        if district:
            query["district"] = exact_ci(district)
        if upazila:
            query["upazila"] = exact_ci(upazila)
        return await find_all(self.collection, query)
