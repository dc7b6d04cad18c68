from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from animez.core.db.notification_crud import get_notifications, mark_all_read
from animez.core.schemas import NotificationList, NotificationRead
from animez.core.database import get_async_session
from animez.core.dependencies import get_current_user
from animez.core.models import User
from animez.core import settings

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationList)
async def read_notifications(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Latest notifications and the unread count."""
    items, unread_count = await get_notifications(
        session, current_user.id, limit=settings.NOTIFICATIONS_LIMIT
    )
    return NotificationList(
        items=[NotificationRead.model_validate(n) for n in items],
        unread_count=unread_count,
    )


@router.post("/read")
async def mark_notifications_read(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Mark every notification as read."""
    updated = await mark_all_read(session, current_user.id)
    return {"message": "Notifications marked as read", "updated": updated}
