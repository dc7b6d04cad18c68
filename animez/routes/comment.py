from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from animez.core.db.comment_crud import (
    create_comment, get_post_comments, update_comment, delete_comment
)
from animez.core.db.post_crud import get_visible_post
from animez.core.comment_tree import build_comment_tree
from animez.core.schemas import CommentCreate, CommentUpdate, CommentRead, CommentThread
from animez.core.database import get_async_session
from animez.core.dependencies import get_current_user
from animez.core.models import User

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("/", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
async def create_new_comment(
    comment_in: CommentCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Create a comment, or a reply when parent_comment_id is set."""
    try:
        comment = await create_comment(session, comment_in, current_user)
    except ValueError as e:
        msg = str(e)
        if "Post not found" in msg:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=msg)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=msg)
    return CommentRead.model_validate(comment)


@router.get("/post/{post_id}", response_model=List[CommentThread])
async def read_post_comments(
    post_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Get a post's comments as threads, newest first."""
    post = await get_visible_post(session, post_id, current_user)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    comments = await get_post_comments(session, post_id)
    return build_comment_tree(comments)


@router.put("/{comment_id}", response_model=CommentRead)
async def update_existing_comment(
    comment_id: str,
    comment_in: CommentUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Edit a comment."""
    comment = await update_comment(session, comment_id, comment_in, current_user.id)
    if not comment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found or you don't have permission to edit"
        )
    return CommentRead.model_validate(comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_existing_comment(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Delete a comment and its replies."""
    success = await delete_comment(session, comment_id, current_user.id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found or you don't have permission to delete"
        )
    return None
