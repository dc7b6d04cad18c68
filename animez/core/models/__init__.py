from .base import Base
from .user import User, UserFollow, AdminKey
from .post import Post, PostType, PostStatus, Retweet
from .comment import Comment
from .like import Like
from .notification import Notification, NotificationType
from .report import Report

__all__ = [
    "Base",
    "User",
    "UserFollow",
    "AdminKey",
    "Post",
    "PostType",
    "PostStatus",
    "Retweet",
    "Comment",
    "Like",
    "Notification",
    "NotificationType",
    "Report",
]
