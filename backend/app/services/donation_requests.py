from __future__ import annotations

from typing import Any, Dict, List

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from ..core.errors import NotFound, RequestNotPending, ValidationFailed
from ..core.pagination import Page, PageRequest, status_filter, substring_query
from ..core.policy import Action, Identity, enforce, ensure_active
from ..database import DONATION_REQUESTS
from ..models.base import serialize_id, utcnow
from ..models.donation_request import DonationRequestCreate, DonationRequestUpdate
from .documents import paginate, parse_object_id

SEARCH_FIELDS = ("bloodGroup", "district", "upazila")
DONOR_FIELDS = ("donorName", "donorEmail")


class DonationRequestService:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db[DONATION_REQUESTS]

    async def create(self, identity: Identity, payload: DonationRequestCreate) -> Dict[str, Any]:
        ensure_active(identity)
        document = {
            **payload.to_document(),
            "requesterEmail": identity.email,
            "requesterName": identity.name,
            "status": "pending",
            "createdAt": utcnow(),
        }
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info("Donation request {} created by {}", result.inserted_id, identity.email)
        return serialize_id(document)

    async def list_public(self) -> List[Dict[str, Any]]:
        cursor = self.collection.find({"status": "pending"}).sort("_id", 1)
        return [serialize_id(doc) async for doc in cursor]

    async def search(self, text: str) -> List[Dict[str, Any]]:
        if not text.strip():
            return await self.list_public()
        query = {"status": "pending", **substring_query(text, SEARCH_FIELDS)}
        cursor = self.collection.find(query).sort("_id", 1)
        return [serialize_id(doc) async for doc in cursor]

    async def list_all(self, status: str | None, page: PageRequest) -> Page:
        return await paginate(self.collection, status_filter(status), page)

    async def list_own(self, identity: Identity, status: str | None, page: PageRequest) -> Page:
        return await paginate(self.collection, status_filter(status, requesterEmail=identity.email), page)

    async def _load(self, request_id: str) -> Dict[str, Any]:
        document = await self.collection.find_one({"_id": parse_object_id(request_id, "Donation request")})
        if not document:
            raise NotFound("Donation request not found")
        return document

    async def get(self, request_id: str) -> Dict[str, Any]:
        return serialize_id(await self._load(request_id))

    async def update(self, identity: Identity, request_id: str, payload: DonationRequestUpdate) -> Dict[str, Any]:
        document = await self._load(request_id)
        enforce(identity, Action.REQUEST_UPDATE, owner_email=document.get("requesterEmail"))
        changes = payload.to_document()
        if not changes:
            raise ValidationFailed("No fields to update")
        updated = await self.collection.find_one_and_update(
            {"_id": document["_id"]},
            {"$set": {**changes, "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFound("Donation request not found")
        return serialize_id(updated)

    async def claim(self, identity: Identity, request_id: str) -> Dict[str, Any]:
        document = await self._load(request_id)
        # matching on status=pending lets only one concurrent claim win
        updated = await self.collection.find_one_and_update(
            {"_id": document["_id"], "status": "pending"},
            {
                "$set": {
                    "status": "inprogress",
                    "donorName": identity.name,
                    "donorEmail": identity.email,
                    "updatedAt": utcnow(),
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise RequestNotPending()
        logger.info("Donation request {} claimed by {}", request_id, identity.email)
        return serialize_id(updated)

    async def change_status(self, identity: Identity, request_id: str, status: str) -> Dict[str, Any]:
        document = await self._load(request_id)
        enforce(identity, Action.REQUEST_CHANGE_STATUS, owner_email=document.get("requesterEmail"))
        update: Dict[str, Any] = {"$set": {"status": status, "updatedAt": utcnow()}}
        if status == "pending":
            update["$unset"] = {field: "" for field in DONOR_FIELDS}
        updated = await self.collection.find_one_and_update(
            {"_id": document["_id"]},
            update,
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFound("Donation request not found")
        logger.info("Donation request {} moved to {} by {}", request_id, status, identity.email)
        return serialize_id(updated)

    async def delete(self, identity: Identity, request_id: str) -> str:
        document = await self._load(request_id)
        enforce(identity, Action.REQUEST_DELETE, owner_email=document.get("requesterEmail"))
        result = await self.collection.delete_one({"_id": document["_id"]})
        if result.deleted_count == 0:
            raise NotFound("Donation request not found")
        logger.info("Donation request {} deleted by {}", request_id, identity.email)
        return str(document["_id"])
