"""
Like service: a user's endorsement of a post.

A like belongs to the user who created it; only that user can remove it.
Duplicate likes and likes of unknown posts are rejected by the storage
constraints and surface as ``IntegrityError`` for the router to translate.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError
from app.models import Like
from app.serializers import like_to_dict

logger = logging.getLogger(__name__)


async def list_post_likes(db: AsyncSession, post_id: str) -> list[dict]:
    result = await db.execute(select(Like).where(Like.post_id == post_id))
    return [like_to_dict(like) for like in result.scalars().all()]


async def add_like(db: AsyncSession, post_id: str, acting_user_id: str) -> dict:
    like = Like(post_id=post_id, user_id=acting_user_id)
    db.add(like)
    await db.flush()
    logger.info("User %s liked post %s", acting_user_id, post_id)
    return like_to_dict(like)


async def remove_like(db: AsyncSession, post_id: str, acting_user_id: str | None) -> None:
    """Remove the acting user's like of *post_id*; NotFoundError if none."""
    result = await db.execute(
        select(Like).where(Like.post_id == post_id, Like.user_id == acting_user_id)
    )
    like = result.scalar_one_or_none()
    if like is None:
        raise NotFoundError(f"Post {post_id} is not liked by this user")

    await db.delete(like)
    await db.flush()
    logger.info("User %s unliked post %s", acting_user_id, post_id)
