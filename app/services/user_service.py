"""
User lookup: the identity store as seen by this API.

Users are registered by the identity service; here they are only looked up
by id (to resolve comment authors) and created by the seed script and tests.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User


async def get_user_by_id(db: AsyncSession, user_id: str | None) -> User | None:
    """Return the user with *user_id*, or None when there is none."""
    if user_id is None:
        return None
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    user_name: str,
    email: str,
    avatar: str | None = None,
    role: str = "user",
) -> User:
    user = User(user_name=user_name, email=email, avatar=avatar, role=role)
    db.add(user)
    await db.flush()
    return user
