from sqlalchemy import Column, String, DateTime, Text, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from .base import Base, generate_id, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True, default=generate_id)
    email = Column(String(200), nullable=False, unique=True)
    username = Column(String(50), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    avatar_url = Column(String(255), nullable=True, default="")
    bio = Column(Text, nullable=True, default="")
    is_admin = Column(Boolean(), nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class UserFollow(Base):
    __tablename__ = "user_follows"
    __table_args__ = (UniqueConstraint("follower_id", "following_id"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    follower_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    following_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())


class AdminKey(Base):
    __tablename__ = "admin_keys"

    id = Column(String(36), primary_key=True, default=generate_id)
    key_code = Column(String(100), nullable=False, unique=True)
    is_used = Column(Boolean(), nullable=False, default=False)
    used_at = Column(DateTime(timezone=True), nullable=True)
    used_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
