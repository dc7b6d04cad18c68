from pydantic import BaseModel, EmailStr, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    email: EmailStr
    username: str = Field(min_length=2, max_length=50)


class UserCreate(UserBase):
    # bcrypt only looks at the first 72 bytes
    password: str = Field(min_length=6, max_length=72)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=2, max_length=50)
    bio: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("username", "bio", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserProfile(BaseModel):
    id: str
    username: str
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    is_admin: bool = False
    follower_count: int = 0
    following_count: int = 0
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class UserRead(UserProfile):
    email: EmailStr


class FollowStatus(BaseModel):
    following: bool
