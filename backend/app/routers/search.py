from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..models.user import DonorPublic
from ..services.users import UserService
from .auth import get_user_service

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/donors", response_model=List[DonorPublic])
async def search_donors(
    blood_group: Optional[str] = Query(default=None, alias="bloodGroup"),
    district: Optional[str] = Query(default=None),
    upazila: Optional[str] = Query(default=None),
    users: UserService = Depends(get_user_service),
) -> List[DonorPublic]:
    donors = await users.search_donors(blood_group, district, upazila)
    return [DonorPublic(**donor) for donor in donors]
