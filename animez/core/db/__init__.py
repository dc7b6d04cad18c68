from .user_crud import *
from .follow_crud import *
from .post_crud import *
from .comment_crud import *
from .notification_crud import *

__all__ = [
    # user_crud
    "get_user_by_id", "get_user_by_email", "get_user_by_username", "get_user_profile",
    "create_user", "update_current_user", "update_user_avatar", "authenticate_user",
    "search_users", "populate_follow_counts", "redeem_admin_key", "create_admin_key",

    # follow_crud
    "is_following", "follow_user", "unfollow_user", "get_followers", "get_following",
    "get_suggested_users",

    # post_crud
    "get_post_by_id", "can_view_post", "get_visible_post", "create_post", "delete_post", "get_recent_posts", "get_trending_posts",
    "get_following_posts", "search_posts", "annotate_engagement", "toggle_like",
    "toggle_retweet", "report_post", "get_all_posts", "update_post_status",
    "admin_delete_post", "get_reports", "detect_post_type",

    # comment_crud
    "get_comment_by_id", "get_post_comments", "create_comment", "update_comment",
    "delete_comment",

    # notification_crud
    "add_notification", "get_notifications", "mark_all_read",
]
