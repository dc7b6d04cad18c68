from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime


class CommentBase(BaseModel):
    content: str = Field(min_length=1)

    @field_validator("content", mode="before")
    @classmethod
    def _strip_content(cls, v):
        return v.strip() if isinstance(v, str) else v


class CommentCreate(CommentBase):
    post_id: str
    parent_comment_id: Optional[str] = None

    @field_validator("parent_comment_id", mode="before")
    @classmethod
    def _normalize_parent_id(cls, v):
        if v in (0, "0", "", None):
            return None
        return v


class CommentUpdate(CommentBase):
    pass


class CommentRead(BaseModel):
    id: str
    post_id: str
    user_id: str
    username: str
    user_avatar: Optional[str] = None
    content: str
    like_count: int = 0
    parent_comment_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class CommentReply(CommentRead):
    """A reply. Replies never carry replies of their own."""


class CommentThread(CommentRead):
    """A root comment together with its direct replies."""
    replies: List[CommentReply] = []
