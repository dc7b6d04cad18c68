import logging
from datetime import timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, update, delete
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple

from animez.core.models import (
    Post, PostType, PostStatus, Like, Retweet, Comment, Report, Notification,
    NotificationType, User, UserFollow,
)
from animez.core.models.base import utcnow
from animez.core.schemas import PostCreate
from animez.core.db.notification_crud import add_notification
from animez.core import settings

logger = logging.getLogger(__name__)


def detect_post_type(post_in: PostCreate) -> PostType:
    if post_in.media_url:
        if post_in.media_url.lower().split("?")[0].endswith(".gif"):
            return PostType.gif
        return PostType.image
    if post_in.link_url:
        return PostType.link
    return PostType.text


async def get_post_by_id(session: AsyncSession, post_id: str) -> Optional[Post]:
    result = await session.execute(select(Post).where(Post.id == post_id))
    return result.scalar_one_or_none()


def can_view_post(post: Post, user: User) -> bool:
    return post.status == PostStatus.approved or post.user_id == user.id or bool(user.is_admin)


async def get_visible_post(session: AsyncSession, post_id: str, user: User) -> Optional[Post]:
    """A post the user may see: approved, their own, or any post for admins."""
    post = await get_post_by_id(session, post_id)
    if post is None or not can_view_post(post, user):
        return None
    return post


async def create_post(session: AsyncSession, post_in: PostCreate, author: User) -> Post:
    """Create a new post. It waits in the moderation queue unless auto-approval is on."""
    if not (post_in.content or post_in.media_url or post_in.link_url):
        raise ValueError("Please add some content to your post")

    db_post = Post(
        **post_in.model_dump(),
        post_type=detect_post_type(post_in),
        status=PostStatus.approved if settings.AUTO_APPROVE_POSTS else PostStatus.pending,
        user_id=author.id,
        username=author.username,
        user_avatar=author.avatar_url or "",
    )

    session.add(db_post)
    await session.commit()
    await session.refresh(db_post)
    return db_post


async def _delete_post_rows(session: AsyncSession, post_id: str):
    for model in (Like, Retweet, Report, Notification):
        await session.execute(delete(model).where(model.post_id == post_id))
    # Replies first, they reference their root comment
    await session.execute(
        delete(Comment).where(Comment.post_id == post_id, Comment.parent_comment_id.is_not(None))
    )
    await session.execute(delete(Comment).where(Comment.post_id == post_id))
    await session.execute(delete(Post).where(Post.id == post_id))


async def delete_post(session: AsyncSession, post_id: str, user_id: str) -> bool:
    """Delete a post owned by the user."""
    db_post = await get_post_by_id(session, post_id)
    if not db_post or db_post.user_id != user_id:
        return False

    await _delete_post_rows(session, post_id)
    await session.commit()
    return True


# --- Feeds ---
async def get_recent_posts(session: AsyncSession, limit: int = 50) -> List[Post]:
    result = await session.execute(
        select(Post)
        .where(Post.status == PostStatus.approved)
        .order_by(Post.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_trending_posts(session: AsyncSession, limit: int = 50) -> List[Post]:
    """Approved posts inside the trending window, ranked by engagement."""
    since = utcnow() - timedelta(days=settings.TRENDING_WINDOW_DAYS)
    score = (Post.like_count + 2 * Post.retweet_count + Post.comment_count).label("trending_score")
    result = await session.execute(
        select(Post, score)
        .where(and_(Post.status == PostStatus.approved, Post.created_at >= since))
        .order_by(score.desc(), Post.created_at.desc())
        .limit(limit)
    )
    posts = []
    for post, trending_score in result.all():
        post.trending_score = trending_score
        posts.append(post)
    return posts


async def get_following_posts(session: AsyncSession, user_id: str, limit: int = 50) -> List[Post]:
    followed = select(UserFollow.following_id).where(UserFollow.follower_id == user_id)
    result = await session.execute(
        select(Post)
        .where(and_(Post.status == PostStatus.approved, Post.user_id.in_(followed)))
        .order_by(Post.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def search_posts(session: AsyncSession, query: str, limit: int = 50) -> List[Post]:
    pattern = f"%{query}%"
    result = await session.execute(
        select(Post)
        .where(
            and_(
                Post.status == PostStatus.approved,
                or_(
                    Post.content.ilike(pattern),
                    Post.anime_title.ilike(pattern),
                    Post.username.ilike(pattern),
                )
            )
        )
        .order_by(Post.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def annotate_engagement(session: AsyncSession, posts: List[Post], user_id: str) -> List[Post]:
    """Mark which posts the user has liked or retweeted."""
    if not posts:
        return posts
    post_ids = [p.id for p in posts]

    liked = await session.execute(
        select(Like.post_id).where(and_(Like.user_id == user_id, Like.post_id.in_(post_ids)))
    )
    retweeted = await session.execute(
        select(Retweet.post_id).where(and_(Retweet.user_id == user_id, Retweet.post_id.in_(post_ids)))
    )
    liked_ids = set(liked.scalars().all())
    retweeted_ids = set(retweeted.scalars().all())

    for post in posts:
        post.is_liked = post.id in liked_ids
        post.is_retweeted = post.id in retweeted_ids
    return posts


# --- Engagement ---
async def _get_engagement(session: AsyncSession, model, post_id: str, user_id: str):
    result = await session.execute(
        select(model).where(and_(model.post_id == post_id, model.user_id == user_id))
    )
    return result.scalar_one_or_none()


async def _toggle(session: AsyncSession, model, counter: str, post_id: str, user: User) -> Tuple[bool, int]:
    user_id = user.id
    post = await get_visible_post(session, post_id, user)
    if not post:
        raise ValueError("Post not found")

    existing = await _get_engagement(session, model, post_id, user.id)
    column = getattr(Post, counter)

    try:
        if existing:
            removed = await session.execute(
                delete(model).where(and_(model.post_id == post_id, model.user_id == user.id))
            )
            if removed.rowcount:
                await session.execute(
                    update(Post).where(Post.id == post_id).values({counter: column - 1})
                )
            active = False
        else:
            session.add(model(post_id=post_id, user_id=user.id))
            await session.execute(
                update(Post).where(Post.id == post_id).values({counter: column + 1})
            )
            active = True
            if model is Like:
                kind, title, verb = NotificationType.like, "New like", "liked"
            else:
                kind, title, verb = NotificationType.retweet, "New retweet", "retweeted"
            add_notification(
                session,
                user_id=post.user_id,
                type=kind,
                title=title,
                message=f"{user.username} {verb} your post",
                post_id=post_id,
                actor_id=user.id,
            )
        await session.commit()
    except IntegrityError:
        # A concurrent identical request stored the row first
        await session.rollback()
        logger.info("Duplicate %s by %s on post %s", model.__tablename__, user_id, post_id)
        active = await _get_engagement(session, model, post_id, user_id) is not None

    await session.refresh(post)
    return active, getattr(post, counter)


async def toggle_like(session: AsyncSession, post_id: str, user: User) -> Tuple[bool, int]:
    """Like or unlike a post. Returns (liked, like_count)."""
    return await _toggle(session, Like, "like_count", post_id, user)


async def toggle_retweet(session: AsyncSession, post_id: str, user: User) -> Tuple[bool, int]:
    """Retweet or un-retweet a post. Returns (retweeted, retweet_count)."""
    return await _toggle(session, Retweet, "retweet_count", post_id, user)


async def report_post(session: AsyncSession, post_id: str, reporter: User, reason: str) -> Report:
    post = await get_visible_post(session, post_id, reporter)
    if not post:
        raise ValueError("Post not found")

    report = Report(post_id=post_id, reporter_user_id=reporter.id, reason=reason)
    session.add(report)
    await session.commit()
    await session.refresh(report)
    return report


# --- Moderation ---
async def get_all_posts(session: AsyncSession, status: Optional[PostStatus] = None) -> List[Post]:
    query = select(Post).order_by(Post.created_at.desc())
    if status is not None:
        query = query.where(Post.status == status)
    result = await session.execute(query)
    return list(result.scalars().all())


async def update_post_status(session: AsyncSession, post_id: str, status: PostStatus) -> Optional[Post]:
    """Approve or reject a post and tell its author."""
    post = await get_post_by_id(session, post_id)
    if not post:
        return None

    post.status = status
    if status == PostStatus.approved:
        kind, title = NotificationType.post_approved, "Post approved"
    else:
        kind, title = NotificationType.post_rejected, "Post rejected"
    add_notification(
        session,
        user_id=post.user_id,
        type=kind,
        title=title,
        message=f"Your post was {status.value}",
        post_id=post_id,
    )

    await session.commit()
    await session.refresh(post)
    return post


async def admin_delete_post(session: AsyncSession, post_id: str) -> bool:
    post = await get_post_by_id(session, post_id)
    if not post:
        return False

    await _delete_post_rows(session, post_id)
    await session.commit()
    return True


async def get_reports(session: AsyncSession) -> List[Report]:
    result = await session.execute(select(Report).order_by(Report.created_at.desc()))
    return list(result.scalars().all())
