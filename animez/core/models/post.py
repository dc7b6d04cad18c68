import enum

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, String, Enum, UniqueConstraint
from sqlalchemy.sql import func
from .base import Base, generate_id, utcnow


class PostType(str, enum.Enum):
    text = "text"
    image = "image"
    gif = "gif"
    link = "link"
    retweet = "retweet"


class PostStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, index=True, default=generate_id)
    content = Column(Text, nullable=False, default="")
    post_type = Column(Enum(PostType, name="post_type"), nullable=False, default=PostType.text)
    status = Column(Enum(PostStatus, name="post_status"), nullable=False, default=PostStatus.pending, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Author, with display fields copied at write time
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    username = Column(String(50), nullable=False)
    user_avatar = Column(String(255), nullable=True)

    media_url = Column(String(255), nullable=True)
    link_url = Column(String(500), nullable=True)
    link_title = Column(String(255), nullable=True)

    # Anime tag
    anime_id = Column(String(20), nullable=True)
    anime_title = Column(String(255), nullable=True)
    anime_image = Column(String(500), nullable=True)

    like_count = Column(Integer, nullable=False, default=0)
    retweet_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)


class Retweet(Base):
    __tablename__ = "retweets"
    __table_args__ = (UniqueConstraint("user_id", "post_id"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
