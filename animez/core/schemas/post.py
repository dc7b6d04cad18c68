from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Literal
from datetime import datetime

from animez.core.models import PostType, PostStatus


class PostBase(BaseModel):
    content: str = ""


class PostCreate(PostBase):
    media_url: Optional[str] = None
    link_url: Optional[str] = None
    link_title: Optional[str] = None
    anime_id: Optional[str] = None
    anime_title: Optional[str] = None
    anime_image: Optional[str] = None

    @field_validator("content", mode="before")
    @classmethod
    def _strip_content(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("media_url", "link_url", "link_title", "anime_id", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PostRead(PostBase):
    id: str
    user_id: str
    username: str
    user_avatar: Optional[str] = None
    post_type: PostType
    status: PostStatus
    media_url: Optional[str] = None
    link_url: Optional[str] = None
    link_title: Optional[str] = None
    anime_id: Optional[str] = None
    anime_title: Optional[str] = None
    anime_image: Optional[str] = None
    like_count: int = 0
    retweet_count: int = 0
    comment_count: int = 0
    created_at: datetime
    trending_score: Optional[int] = None
    is_liked: bool = False
    is_retweeted: bool = False
    model_config = ConfigDict(from_attributes=True)


class LikeResponse(BaseModel):
    liked: bool
    like_count: int


class RetweetResponse(BaseModel):
    retweeted: bool
    retweet_count: int


class MediaUploadResponse(BaseModel):
    media_url: str
    post_type: PostType


class PostStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]


class ReportCreate(BaseModel):
    reason: str = Field(min_length=1)

    @field_validator("reason", mode="before")
    @classmethod
    def _strip_reason(cls, v):
        return v.strip() if isinstance(v, str) else v


class ReportRead(BaseModel):
    id: str
    reporter_user_id: str
    post_id: str
    reason: str
    status: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
