from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime

from animez.core.models import NotificationType


class NotificationRead(BaseModel):
    id: str
    type: NotificationType
    title: str
    message: str
    post_id: Optional[str] = None
    is_read: bool = False
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class NotificationList(BaseModel):
    items: List[NotificationRead] = []
    unread_count: int = 0
