from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from typing import List, Optional, Tuple

from animez.core.models import Notification, NotificationType


def add_notification(
    session: AsyncSession,
    user_id: str,
    type: NotificationType,
    title: str,
    message: str,
    post_id: Optional[str] = None,
    actor_id: Optional[str] = None,
) -> Optional[Notification]:
    """Stage a notification in the session; the caller commits.

    Nothing is created when the actor is the recipient.
    """
    if actor_id is not None and actor_id == user_id:
        return None
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        post_id=post_id,
    )
    session.add(notification)
    return notification


async def get_notifications(session: AsyncSession, user_id: str, limit: int = 10) -> Tuple[List[Notification], int]:
    """Newest notifications for a user, plus the total unread count."""
    result = await session.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
    )
    unread = await session.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
    )
    return list(result.scalars().all()), unread.scalar_one()


async def mark_all_read(session: AsyncSession, user_id: str) -> int:
    result = await session.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
        .values(is_read=True)
    )
    await session.commit()
    return result.rowcount
