from .user import router as user_router
from .post import router as post_router
from .comment import router as comment_router
from .notification import router as notification_router
from .admin import router as admin_router
from .anime import router as anime_router

__all__ = [
    "user_router", "post_router", "comment_router", "notification_router",
    "admin_router", "anime_router",
]
