from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from .base import BloodGroup, MongoBaseModel

RequestStatus = Literal["pending", "inprogress", "done", "canceled"]
# inprogress is only reachable through the donate (claim) action
SettableStatus = Literal["pending", "done", "canceled"]


class DonationRequestCreate(MongoBaseModel):
    recipient_name: Optional[str] = None
    hospital_name: Optional[str] = None
    full_address: Optional[str] = None
    blood_group: BloodGroup
    district: str = Field(min_length=1)
    upazila: str = Field(min_length=1)
    donation_date: Optional[str] = None
    donation_time: Optional[str] = None
    request_message: Optional[str] = None


class DonationRequestUpdate(MongoBaseModel):
    recipient_name: Optional[str] = None
    hospital_name: Optional[str] = None
    full_address: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    district: Optional[str] = Field(default=None, min_length=1)
    upazila: Optional[str] = Field(default=None, min_length=1)
    donation_date: Optional[str] = None
    donation_time: Optional[str] = None
    request_message: Optional[str] = None

    @field_validator("blood_group", "district", "upazila")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class DonationRequest(MongoBaseModel):
    id: str = Field(alias="_id")
    requester_email: str
    requester_name: Optional[str] = None
    recipient_name: Optional[str] = None
    hospital_name: Optional[str] = None
    full_address: Optional[str] = None
    blood_group: str
    district: str
    upazila: str
    donation_date: Optional[str] = None
    donation_time: Optional[str] = None
    request_message: Optional[str] = None
    status: RequestStatus
    donor_name: Optional[str] = None
    donor_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DonationRequestPage(MongoBaseModel):
    requests: List[DonationRequest]
    total: int


class StatusChange(MongoBaseModel):
    status: SettableStatus
