from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from .base import MongoBaseModel

BlogStatus = Literal["published"]


class BlogCreate(MongoBaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    thumbnail: Optional[str] = None


class Blog(MongoBaseModel):
    id: str = Field(alias="_id")
    author: str
    title: str
    content: str
    thumbnail: Optional[str] = None
    status: BlogStatus = "published"
    created_at: Optional[datetime] = None
