from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

BloodGroup = Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]


class MongoBaseModel(BaseModel):
    """Snake-case attributes in Python, camelCase keys on the wire and in Mongo."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


def serialize_id(document: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize MongoDB document for JSON compatibility."""
    if "_id" in document:
        document["_id"] = str(document["_id"])
    return document


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    message: str


class Deleted(MongoBaseModel):
    deleted: bool = True
    id: str = Field(alias="_id")
