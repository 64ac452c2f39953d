"""
Comment service: CRUD for comments on posts.

Design notes
------------
- Reads go through the cache-aside layer (Redis → fallback to DB); every
  write invalidates the global list, the post's list and the detail entry.
- Post and author are joined explicitly with ``joinedload``; the ORM
  relationships are ``noload`` so nothing is fetched implicitly.
- Single-row lookups use ``scalar_one_or_none()``: absence is a value the
  caller checks, never an exception from the ORM.
- The acting user id is an explicit argument of every write.  Only the
  author of a comment may change or remove it.
- Service functions flush but do not commit; ``get_db`` owns the
  transaction.  A ``StaleDataError`` from the row-version check on update
  is left to propagate.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.cache import COMMENTS_ALL_KEY, cache, comment_detail_key, post_comments_key
from app.config import settings
from app.exceptions import AuthenticationError, BadRequestError, ForbiddenError, NotFoundError
from app.models import Comment
from app.schemas import CommentCreate, CommentUpdate
from app.security import is_owner
from app.serializers import comment_to_dict
from app.services import user_service

logger = logging.getLogger(__name__)


def _with_post_and_author():
    return select(Comment).options(joinedload(Comment.post), joinedload(Comment.author))


async def _find_comment(db: AsyncSession, comment_id: str, *, with_post: bool = True) -> Comment | None:
    if with_post:
        q = _with_post_and_author()
    else:
        q = select(Comment)
    result = await db.execute(q.where(Comment.id == comment_id))
    return result.unique().scalar_one_or_none()


async def comment_exists(db: AsyncSession, comment_id: str) -> bool:
    result = await db.execute(select(Comment.id).where(Comment.id == comment_id))
    return result.first() is not None


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def list_comments(db: AsyncSession) -> list[dict]:
    """Return every comment with its post and author."""
    cached = await cache.get(COMMENTS_ALL_KEY)
    if cached is not None:
        return cached

    result = await db.execute(_with_post_and_author())
    data = [comment_to_dict(c) for c in result.unique().scalars().all()]
    await cache.set(COMMENTS_ALL_KEY, data, ttl=settings.CACHE_TTL_LIST)
    return data


async def list_post_comments(db: AsyncSession, post_id: str) -> list[dict]:
    """
    Return the comments of *post_id*.  The post itself is not checked; an
    unknown id simply has no comments.
    """
    cache_key = post_comments_key(post_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    result = await db.execute(_with_post_and_author().where(Comment.post_id == post_id))
    data = [comment_to_dict(c) for c in result.unique().scalars().all()]
    await cache.set(cache_key, data, ttl=settings.CACHE_TTL_LIST)
    return data


async def get_comment(db: AsyncSession, comment_id: str) -> dict:
    """Return one comment.  Raises NotFoundError when it does not exist."""
    cache_key = comment_detail_key(comment_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    comment = await _find_comment(db, comment_id)
    if comment is None:
        raise NotFoundError(f"Comment {comment_id} not found")

    data = comment_to_dict(comment)
    await cache.set(cache_key, data, ttl=settings.CACHE_TTL_DETAIL)
    return data


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def update_comment(
    db: AsyncSession,
    comment_id: str,
    data: CommentUpdate,
    acting_user_id: str | None,
) -> None:
    """
    Replace the content and spoiler flag of a comment.

    - unknown *comment_id* → BadRequestError
    - acting user is not the author → ForbiddenError
    """
    if not await comment_exists(db, comment_id):
        raise BadRequestError(f"Comment {comment_id} does not exist")

    comment = await _find_comment(db, comment_id, with_post=False)
    if comment is None:
        # Removed between the existence check and the load.
        raise BadRequestError(f"Comment {comment_id} does not exist")
    if not is_owner(acting_user_id, comment.author_id):
        logger.warning("User %s may not edit comment %s", acting_user_id, comment_id)
        raise ForbiddenError("Only the author may edit this comment")

    comment.content = data.content
    comment.is_spoiler = data.is_spoiler
    await db.flush()

    await cache.invalidate_comment(comment.post_id, comment_id)


async def create_comment(
    db: AsyncSession,
    data: CommentCreate,
    acting_user_id: str | None,
) -> dict:
    """
    Create a comment authored by the acting user and return it.

    The author and the date are always set here.  The post id is not looked
    up first; the foreign key rejects an unknown post at flush time.
    """
    author = await user_service.get_user_by_id(db, acting_user_id)
    if author is None:
        raise AuthenticationError("Unknown user")

    comment = Comment(
        post_id=data.post_id,
        author_id=author.id,
        content=data.content,
        is_spoiler=data.is_spoiler,
        date=datetime.now(timezone.utc),
    )
    db.add(comment)
    await db.flush()
    logger.info("User %s commented %s on post %s", author.id, comment.id, comment.post_id)

    await cache.invalidate_comment(comment.post_id)

    # The new instance is already in the identity map; reload it so the
    # post and author joins are populated.
    result = await db.execute(
        _with_post_and_author()
        .where(Comment.id == comment.id)
        .execution_options(populate_existing=True)
    )
    return comment_to_dict(result.unique().scalar_one())


async def delete_comment(
    db: AsyncSession,
    comment_id: str,
    acting_user_id: str | None,
) -> None:
    """
    Remove a comment owned by the acting user.

    Ownership is compared before existence: a missing comment has no author
    the caller can match, so it is refused with ForbiddenError as well.
    """
    comment = await _find_comment(db, comment_id, with_post=False)
    author_id = comment.author_id if comment is not None else None
    if not is_owner(acting_user_id, author_id):
        logger.warning("User %s may not delete comment %s", acting_user_id, comment_id)
        raise ForbiddenError("Only the author may delete this comment")

    post_id = comment.post_id
    await db.delete(comment)
    await db.flush()
    logger.info("User %s deleted comment %s", acting_user_id, comment_id)

    await cache.invalidate_comment(post_id, comment_id)
