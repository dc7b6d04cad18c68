from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List, Optional

from animez.core.models import User, UserFollow, AdminKey
from animez.core.models.base import utcnow
from animez.core.schemas import UserCreate, UserUpdate
from animez.core.security import get_password_hash, verify_password


async def populate_follow_counts(session: AsyncSession, users: List[User]) -> List[User]:
    """Attach follower_count / following_count to each user for serialization."""
    if not users:
        return users
    user_ids = [u.id for u in users]

    followers = await session.execute(
        select(UserFollow.following_id, func.count())
        .where(UserFollow.following_id.in_(user_ids))
        .group_by(UserFollow.following_id)
    )
    following = await session.execute(
        select(UserFollow.follower_id, func.count())
        .where(UserFollow.follower_id.in_(user_ids))
        .group_by(UserFollow.follower_id)
    )
    follower_counts = dict(followers.all())
    following_counts = dict(following.all())

    for u in users:
        u.follower_count = follower_counts.get(u.id, 0)
        u.following_count = following_counts.get(u.id, 0)
    return users


async def get_user_by_id(session: AsyncSession, user_id: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user_profile(session: AsyncSession, user_id: str) -> Optional[User]:
    """Get a user with follow counts populated."""
    user = await get_user_by_id(session, user_id)
    if user:
        await populate_follow_counts(session, [user])
    return user


async def create_user(session: AsyncSession, user_in: UserCreate) -> User:
    if await get_user_by_email(session, user_in.email):
        raise ValueError("User with this email already exists")
    if await get_user_by_username(session, user_in.username):
        raise ValueError("Username is already taken")

    db_user = User(
        **user_in.model_dump(exclude={"password"}),
        password=get_password_hash(user_in.password),
        avatar_url="",
        bio="",
        is_admin=False,
    )

    session.add(db_user)
    await session.commit()
    await session.refresh(db_user)
    return db_user


async def update_current_user(session: AsyncSession, user_id: str, user_in: UserUpdate) -> Optional[User]:
    """Update current user with profile data."""
    db_user = await get_user_by_id(session, user_id)
    if not db_user:
        return None

    update_data = user_in.model_dump(exclude_unset=True)
    new_username = update_data.get("username")
    if new_username and new_username != db_user.username:
        if await get_user_by_username(session, new_username):
            raise ValueError("Username is already taken")

    for field, value in update_data.items():
        if value is not None:
            setattr(db_user, field, value)

    await session.commit()
    await session.refresh(db_user)
    return db_user


async def update_user_avatar(session: AsyncSession, user_id: str, avatar_url: str) -> Optional[User]:
    db_user = await get_user_by_id(session, user_id)
    if not db_user:
        return None

    db_user.avatar_url = avatar_url
    await session.commit()
    await session.refresh(db_user)
    return db_user


async def authenticate_user(session: AsyncSession, email: str, password: str) -> Optional[User]:
    """Authenticate user by email and password."""
    user = await get_user_by_email(session, email)
    if not user:
        return None
    if not verify_password(password, user.password):
        return None
    return user


async def search_users(session: AsyncSession, query: str, limit: int = 20) -> List[User]:
    """Case-insensitive username search, most followed first."""
    follower_count = (
        select(func.count())
        .where(UserFollow.following_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    result = await session.execute(
        select(User)
        .where(User.username.ilike(f"%{query}%"))
        .order_by(follower_count.desc(), User.username)
        .limit(limit)
    )
    users = list(result.scalars().all())
    return await populate_follow_counts(session, users)


# --- Admin keys ---
async def redeem_admin_key(session: AsyncSession, user_id: str, key_code: str) -> Optional[User]:
    """Consume an unused admin key and grant admin to the user."""
    user = await get_user_by_id(session, user_id)
    if not user:
        return None

    result = await session.execute(
        select(AdminKey).where(AdminKey.key_code == key_code, AdminKey.is_used == False)  # noqa: E712
    )
    admin_key = result.scalar_one_or_none()
    if not admin_key:
        raise ValueError("Invalid or already used admin code")

    admin_key.is_used = True
    admin_key.used_at = utcnow()
    admin_key.used_by = user.id
    user.is_admin = True

    await session.commit()
    await session.refresh(user)
    return user


async def create_admin_key(session: AsyncSession, key_code: str) -> AdminKey:
    admin_key = AdminKey(key_code=key_code)
    session.add(admin_key)
    await session.commit()
    await session.refresh(admin_key)
    return admin_key
