from __future__ import annotations

from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.policy import Action, Identity
from ..database import get_database
from ..models.blog import Blog, BlogCreate
from ..services.blogs import BlogService
from .auth import require

router = APIRouter(prefix="/blogs", tags=["blogs"])


def get_blog_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> BlogService:
    return BlogService(db)


@router.post("", response_model=Blog, status_code=status.HTTP_201_CREATED)
async def create_blog(
    identity: Annotated[Identity, Depends(require(Action.BLOG_CREATE))],
    payload: BlogCreate,
    blogs: BlogService = Depends(get_blog_service),
) -> Blog:
    return Blog(**await blogs.create(identity, payload))


@router.get("", response_model=List[Blog])
async def list_blogs(blogs: BlogService = Depends(get_blog_service)) -> List[Blog]:
    return [Blog(**doc) for doc in await blogs.list_published()]
