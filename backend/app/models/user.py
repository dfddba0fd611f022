from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from ..core.policy import UserRole, UserStatus
from .base import BloodGroup, MongoBaseModel


class UserCreate(MongoBaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=120)
    avatar: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    district: Optional[str] = None
    upazila: Optional[str] = None


class UserProfileUpdate(MongoBaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    avatar: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    district: Optional[str] = None
    upazila: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class UserPublic(MongoBaseModel):
    id: str = Field(alias="_id")
    email: str
    name: str
    avatar: Optional[str] = None
    blood_group: Optional[str] = None
    district: Optional[str] = None
    upazila: Optional[str] = None
    role: UserRole = "donor"
    status: UserStatus = "active"
    created_at: Optional[datetime] = None


class UserPage(MongoBaseModel):
    users: List[UserPublic]
    total: int


class RoleUpdate(MongoBaseModel):
    role: UserRole


class StatusUpdate(MongoBaseModel):
    status: UserStatus


class TokenRequest(MongoBaseModel):
    email: Optional[EmailStr] = None
    id_token: Optional[str] = None

    @model_validator(mode="after")
    def _require_credential(self) -> "TokenRequest":
        if not self.email and not self.id_token:
            raise ValueError("email or idToken required")
        return self


class Token(MongoBaseModel):
    token: str
    token_type: str = "bearer"


class DonorPublic(MongoBaseModel):
    id: str = Field(alias="_id")
    name: str
    email: str
    avatar: Optional[str] = None
    blood_group: Optional[str] = None
    district: Optional[str] = None
    upazila: Optional[str] = None
