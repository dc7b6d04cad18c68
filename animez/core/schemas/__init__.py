from .auth import Token, TokenData, UserLogin, AdminKeyRedeem
from .user import UserBase, UserCreate, UserUpdate, UserRead, UserProfile, FollowStatus
from .post import (
    PostBase, PostCreate, PostRead, LikeResponse, RetweetResponse, MediaUploadResponse,
    PostStatusUpdate, ReportCreate, ReportRead,
)
from .comment import CommentBase, CommentCreate, CommentUpdate, CommentRead, CommentReply, CommentThread
from .notification import NotificationRead, NotificationList
from .anime import Anime

__all__ = [
    "Token", "TokenData", "UserLogin", "AdminKeyRedeem",
    "UserBase", "UserCreate", "UserUpdate", "UserRead", "UserProfile", "FollowStatus",
    "PostBase", "PostCreate", "PostRead", "LikeResponse", "RetweetResponse", "MediaUploadResponse",
    "PostStatusUpdate", "ReportCreate", "ReportRead",
    "CommentBase", "CommentCreate", "CommentUpdate", "CommentRead", "CommentReply", "CommentThread",
    "NotificationRead", "NotificationList",
    "Anime",
]
