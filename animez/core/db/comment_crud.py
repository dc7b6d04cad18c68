from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, update, delete, func, case
from typing import List, Optional

from animez.core.models import Comment, Post, User, NotificationType
from animez.core.schemas import CommentCreate, CommentUpdate
from animez.core.db.notification_crud import add_notification
from animez.core.db.post_crud import get_visible_post


async def get_comment_by_id(session: AsyncSession, comment_id: str) -> Optional[Comment]:
    result = await session.execute(select(Comment).where(Comment.id == comment_id))
    return result.scalar_one_or_none()


async def get_post_comments(session: AsyncSession, post_id: str) -> List[Comment]:
    """All comments of a post, roots and replies alike, newest first."""
    result = await session.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc())
    )
    return list(result.scalars().all())


async def create_comment(session: AsyncSession, comment_in: CommentCreate, author: User) -> Comment:
    """Create a new comment or a reply to a root comment."""
    # Unmoderated posts only take comments from their author and admins
    post = await get_visible_post(session, comment_in.post_id, author)
    if not post:
        raise ValueError("Post not found")

    # A reply must target a root comment of the same post
    if comment_in.parent_comment_id is not None:
        result = await session.execute(
            select(Comment).where(
                and_(
                    Comment.id == comment_in.parent_comment_id,
                    Comment.post_id == comment_in.post_id
                )
            )
        )
        parent_comment = result.scalar_one_or_none()
        if not parent_comment:
            raise ValueError("Parent comment not found or doesn't belong to this post")
        if parent_comment.parent_comment_id is not None:
            raise ValueError("Replies can only be made to top-level comments")

    db_comment = Comment(
        **comment_in.model_dump(),
        user_id=author.id,
        username=author.username,
        user_avatar=author.avatar_url or "",
    )
    session.add(db_comment)

    await session.execute(
        update(Post).where(Post.id == post.id).values(comment_count=Post.comment_count + 1)
    )
    add_notification(
        session,
        user_id=post.user_id,
        type=NotificationType.comment,
        title="New comment",
        message=f"{author.username} commented on your post",
        post_id=post.id,
        actor_id=author.id,
    )

    await session.commit()
    await session.refresh(db_comment)
    return db_comment


async def update_comment(session: AsyncSession, comment_id: str, comment_in: CommentUpdate, user_id: str) -> Optional[Comment]:
    """Update comment text."""
    db_comment = await get_comment_by_id(session, comment_id)
    if not db_comment or db_comment.user_id != user_id:
        return None

    db_comment.content = comment_in.content

    await session.commit()
    await session.refresh(db_comment)
    return db_comment


async def delete_comment(session: AsyncSession, comment_id: str, user_id: str) -> bool:
    """Delete a comment together with its replies."""
    db_comment = await get_comment_by_id(session, comment_id)
    if not db_comment or db_comment.user_id != user_id:
        return False

    result = await session.execute(
        select(func.count()).select_from(Comment).where(Comment.parent_comment_id == comment_id)
    )
    removed = result.scalar_one() + 1

    await session.execute(delete(Comment).where(Comment.parent_comment_id == comment_id))
    await session.execute(delete(Comment).where(Comment.id == comment_id))
    await session.execute(
        update(Post)
        .where(Post.id == db_comment.post_id)
        .values(comment_count=case((Post.comment_count > removed, Post.comment_count - removed), else_=0))
    )
    await session.commit()
    return True
