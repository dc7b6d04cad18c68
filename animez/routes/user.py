from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from animez.core.db.user_crud import (
    create_user, authenticate_user, get_user_profile, populate_follow_counts,
    update_current_user as update_current_user_crud, update_user_avatar,
    search_users, redeem_admin_key,
)
from animez.core.db.follow_crud import (
    follow_user, unfollow_user, is_following, get_followers, get_following, get_suggested_users
)
from animez.core.schemas import (
    UserCreate, UserRead, UserProfile, UserLogin, Token, UserUpdate, AdminKeyRedeem, FollowStatus
)
from animez.core.database import get_async_session
from animez.core.security import create_access_token
from animez.core.dependencies import get_current_user
from animez.core.models import User
from animez.core.file_upload import file_upload_service

router = APIRouter(prefix="/users", tags=["users"])


# --- Authentication Endpoints ---
@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(user_in: UserCreate, session: AsyncSession = Depends(get_async_session)):
    """Create a new user."""
    try:
        user = await create_user(session, user_in)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await populate_follow_counts(session, [user])
    return user


@router.post("/login", response_model=Token)
async def login_user(user_in: UserLogin, session: AsyncSession = Depends(get_async_session)):
    """Login user and return access token."""
    user = await authenticate_user(session, user_in.email, user_in.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    access_token = create_access_token(data={"user_id": user.id, "email": user.email})
    return {"access_token": access_token, "token_type": "bearer"}


# --- Current User Endpoints ---
@router.get("/me", response_model=UserRead)
async def read_current_user(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Get current user information."""
    await populate_follow_counts(session, [current_user])
    return current_user


@router.put("/me", response_model=UserRead)
async def update_current_user(
    user_in: UserUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Update username, bio or avatar URL."""
    try:
        updated_user = await update_current_user_crud(session, current_user.id, user_in)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not updated_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Error updating user"
        )
    await populate_follow_counts(session, [updated_user])
    return updated_user


@router.put("/me/avatar", response_model=UserRead)
async def upload_avatar(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Upload or replace the current user's avatar."""
    previous = current_user.avatar_url
    avatar_url = await file_upload_service.upload_avatar(file, current_user.id)

    user = await update_user_avatar(session, current_user.id, avatar_url)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Error updating avatar"
        )
    await file_upload_service.delete_avatar(previous, current_user.id)
    await populate_follow_counts(session, [user])
    return user


@router.post("/me/admin-key", response_model=UserRead)
async def redeem_admin_code(
    key_in: AdminKeyRedeem,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Grant admin access using a one-time admin code."""
    try:
        user = await redeem_admin_key(session, current_user.id, key_in.key_code.strip())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await populate_follow_counts(session, [user])
    return user


# --- Discovery Endpoints ---
@router.get("/search", response_model=List[UserProfile])
async def search_user_profiles(
    q: str = Query(..., min_length=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Search users by username."""
    return await search_users(session, q.strip(), limit=limit)


@router.get("/suggested", response_model=List[UserProfile])
async def read_suggested_users(
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Users the current user might want to follow."""
    return await get_suggested_users(session, current_user.id, limit=limit)


@router.get("/{user_id}", response_model=UserProfile)
async def read_user(
    user_id: str,
    session: AsyncSession = Depends(get_async_session)
):
    """Get user by ID."""
    user = await get_user_profile(session, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


# --- Follow Endpoints ---
@router.get("/{user_id}/follow", response_model=FollowStatus)
async def read_follow_status(
    user_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Whether the current user follows this user."""
    return FollowStatus(following=await is_following(session, current_user.id, user_id))


@router.post("/{user_id}/follow", response_model=FollowStatus)
async def follow(
    user_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Follow a user."""
    try:
        success = await follow_user(session, current_user.id, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return FollowStatus(following=True)


@router.delete("/{user_id}/follow", response_model=FollowStatus)
async def unfollow(
    user_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session)
):
    """Stop following a user."""
    success = await unfollow_user(session, current_user.id, user_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="You are not following this user"
        )
    return FollowStatus(following=False)


@router.get("/{user_id}/followers", response_model=List[UserProfile])
async def read_followers(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    session: AsyncSession = Depends(get_async_session)
):
    """Users following this user."""
    return await get_followers(session, user_id, limit=limit)


@router.get("/{user_id}/following", response_model=List[UserProfile])
async def read_following(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    session: AsyncSession = Depends(get_async_session)
):
    """Users this user follows."""
    return await get_following(session, user_id, limit=limit)
