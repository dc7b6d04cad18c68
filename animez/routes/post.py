from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Literal

from animez.core.db.post_crud import (
    create_post, get_visible_post, delete_post, get_recent_posts, get_trending_posts,
    get_following_posts, search_posts, annotate_engagement, toggle_like, toggle_retweet,
    report_post,
)
from animez.core.schemas import (
    PostCreate, PostRead, LikeResponse, RetweetResponse, MediaUploadResponse, ReportCreate, ReportRead
)
from animez.core.database import get_async_session
from animez.core.dependencies import get_current_user
from animez.core.models import User, PostType
from animez.core.file_upload import file_upload_service
from animez.core import settings

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_new_post(
    post_in: PostCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Create a new post."""
    try:
        post = await create_post(session, post_in, current_user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return PostRead.model_validate(post)


@router.post("/media", response_model=MediaUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_post_media(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user)
):
    """Upload an image to attach to a post."""
    media_url = await file_upload_service.upload_post_media(file, current_user.id)
    post_type = PostType.gif if file.content_type == "image/gif" else PostType.image
    return MediaUploadResponse(media_url=media_url, post_type=post_type)


@router.get("/feed", response_model=List[PostRead])
async def read_feed(
    tab: Literal["recent", "trending", "following"] = "recent",
    limit: int = Query(settings.FEED_LIMIT, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Get the approved-post feed for a tab."""
    if tab == "trending":
        posts = await get_trending_posts(session, limit=limit)
    elif tab == "following":
        posts = await get_following_posts(session, current_user.id, limit=limit)
    else:
        posts = await get_recent_posts(session, limit=limit)

    posts = await annotate_engagement(session, posts, current_user.id)
    return [PostRead.model_validate(p) for p in posts]


@router.get("/search", response_model=List[PostRead])
async def search(
    q: str = Query(..., min_length=1),
    limit: int = Query(settings.FEED_LIMIT, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Search approved posts by content, anime title or username."""
    posts = await search_posts(session, q.strip(), limit=limit)
    posts = await annotate_engagement(session, posts, current_user.id)
    return [PostRead.model_validate(p) for p in posts]


@router.get("/{post_id}", response_model=PostRead)
async def read_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Get post by ID."""
    post = await get_visible_post(session, post_id, current_user)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    await annotate_engagement(session, [post], current_user.id)
    return PostRead.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_existing_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Delete a post."""
    success = await delete_post(session, post_id, current_user.id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found or you don't have permission to delete"
        )
    return None


@router.post("/{post_id}/like", response_model=LikeResponse)
async def like_post_endpoint(
    post_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Like a post, or remove the like if already liked."""
    try:
        liked, like_count = await toggle_like(session, post_id, current_user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return LikeResponse(liked=liked, like_count=like_count)


@router.post("/{post_id}/retweet", response_model=RetweetResponse)
async def retweet_post_endpoint(
    post_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Retweet a post, or undo the retweet."""
    try:
        retweeted, retweet_count = await toggle_retweet(session, post_id, current_user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return RetweetResponse(retweeted=retweeted, retweet_count=retweet_count)


@router.post("/{post_id}/report", response_model=ReportRead, status_code=status.HTTP_201_CREATED)
async def report_post_endpoint(
    post_id: str,
    report_in: ReportCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Report a post to the moderators."""
    try:
        report = await report_post(session, post_id, current_user, report_in.reason)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ReportRead.model_validate(report)
