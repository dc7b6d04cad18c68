from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func
from typing import List

from animez.core.models import User, UserFollow, NotificationType
from animez.core.db.user_crud import get_user_by_id, populate_follow_counts
from animez.core.db.notification_crud import add_notification


async def is_following(session: AsyncSession, follower_id: str, following_id: str) -> bool:
    result = await session.execute(
        select(UserFollow.id).where(
            and_(
                UserFollow.follower_id == follower_id,
                UserFollow.following_id == following_id
            )
        )
    )
    return result.scalar_one_or_none() is not None


async def follow_user(session: AsyncSession, follower_id: str, following_id: str) -> bool:
    """Follow a user. Returns False if the target does not exist."""
    if follower_id == following_id:
        raise ValueError("You cannot follow yourself")

    target = await get_user_by_id(session, following_id)
    if not target:
        return False

    if await is_following(session, follower_id, following_id):
        return True  # Already following

    follower = await get_user_by_id(session, follower_id)
    session.add(UserFollow(follower_id=follower_id, following_id=following_id))
    add_notification(
        session,
        user_id=following_id,
        type=NotificationType.follow,
        title="New follower",
        message=f"{follower.username} started following you",
        actor_id=follower_id,
    )
    await session.commit()
    return True


async def unfollow_user(session: AsyncSession, follower_id: str, following_id: str) -> bool:
    result = await session.execute(
        select(UserFollow).where(
            and_(
                UserFollow.follower_id == follower_id,
                UserFollow.following_id == following_id
            )
        )
    )
    follow = result.scalar_one_or_none()
    if not follow:
        return False

    await session.delete(follow)
    await session.commit()
    return True


async def get_followers(session: AsyncSession, user_id: str, limit: int = 50) -> List[User]:
    result = await session.execute(
        select(User)
        .join(UserFollow, UserFollow.follower_id == User.id)
        .where(UserFollow.following_id == user_id)
        .order_by(UserFollow.created_at.desc())
        .limit(limit)
    )
    return await populate_follow_counts(session, list(result.scalars().all()))


async def get_following(session: AsyncSession, user_id: str, limit: int = 50) -> List[User]:
    result = await session.execute(
        select(User)
        .join(UserFollow, UserFollow.following_id == User.id)
        .where(UserFollow.follower_id == user_id)
        .order_by(UserFollow.created_at.desc())
        .limit(limit)
    )
    return await populate_follow_counts(session, list(result.scalars().all()))


async def get_suggested_users(session: AsyncSession, user_id: str, limit: int = 10) -> List[User]:
    """Users the given user does not follow yet, most followed first."""
    already_following = select(UserFollow.following_id).where(UserFollow.follower_id == user_id)
    follower_count = (
        select(func.count())
        .where(UserFollow.following_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    result = await session.execute(
        select(User)
        .where(User.id != user_id, User.id.not_in(already_following))
        .order_by(follower_count.desc(), User.username)
        .limit(limit)
    )
    return await populate_follow_counts(session, list(result.scalars().all()))
