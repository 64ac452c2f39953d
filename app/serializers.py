"""
Entity → plain dict projections.

The dicts are cache-friendly (dates as ISO strings) and validate against the
response models in ``app.schemas``.  Missing relations project to a nested
object whose fields are all None; internal keys (foreign keys, row version,
email, role) never leave this module.
"""
from app.models import Comment, Like, Post, User


def _isoformat(value) -> str | None:
    return value.isoformat() if value else None


def post_to_dict(post: Post | None) -> dict:
    return {
        "id": getattr(post, "id", None),
        "title": getattr(post, "title", None),
        "date": _isoformat(getattr(post, "date", None)),
        "content": getattr(post, "content", None),
        "file_path": getattr(post, "file_path", None),
        "file_type": getattr(post, "file_type", None),
        "is_spoiler": getattr(post, "is_spoiler", None),
    }


def user_to_dict(user: User | None) -> dict:
    return {
        "user_name": getattr(user, "user_name", None),
        "avatar": getattr(user, "avatar", None),
    }


def comment_to_dict(comment: Comment) -> dict:
    """Serialise a Comment loaded with its post and author."""
    return {
        "id": comment.id,
        "date": _isoformat(comment.date),
        "content": comment.content,
        "is_spoiler": comment.is_spoiler,
        "post": post_to_dict(comment.post),
        "author": user_to_dict(comment.author),
    }


def like_to_dict(like: Like) -> dict:
    return {"post_id": like.post_id}
