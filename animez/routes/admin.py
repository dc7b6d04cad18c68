from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from animez.core.db.post_crud import get_all_posts, update_post_status, admin_delete_post, get_reports
from animez.core.schemas import PostRead, PostStatusUpdate, ReportRead
from animez.core.database import get_async_session
from animez.core.dependencies import get_current_admin_user
from animez.core.models import User, PostStatus

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/posts", response_model=List[PostRead])
async def read_all_posts(
    status_filter: Optional[PostStatus] = Query(None, alias="status"),
    admin: User = Depends(get_current_admin_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Every post regardless of status, optionally filtered."""
    posts = await get_all_posts(session, status=status_filter)
    return [PostRead.model_validate(p) for p in posts]


@router.put("/posts/{post_id}/status", response_model=PostRead)
async def set_post_status(
    post_id: str,
    status_in: PostStatusUpdate,
    admin: User = Depends(get_current_admin_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Approve or reject a post."""
    post = await update_post_status(session, post_id, PostStatus(status_in.status))
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return PostRead.model_validate(post)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_any_post(
    post_id: str,
    admin: User = Depends(get_current_admin_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Delete any post."""
    success = await admin_delete_post(session, post_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return None


@router.get("/reports", response_model=List[ReportRead])
async def read_reports(
    admin: User = Depends(get_current_admin_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Moderation reports, newest first."""
    reports = await get_reports(session)
    return [ReportRead.model_validate(r) for r in reports]
