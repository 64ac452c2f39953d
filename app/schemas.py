from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime


class CamelModel(BaseModel):
    """JSON keys are camelCase on the wire; snake_case is accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- User ---

class UserDto(CamelModel):
    user_name: str | None = None
    avatar: str | None = None


# --- Post ---

class PostDto(CamelModel):
    id: str | None = None
    title: str | None = None
    date: datetime | None = None
    content: str | None = None
    file_path: str | None = None
    file_type: str | None = None
    is_spoiler: bool | None = None


# --- Comment ---

class CommentCreate(CamelModel):
    # Any date or author sent by the client is dropped; both are server-owned.
    post_id: str
    content: str
    is_spoiler: bool = False


class CommentUpdate(CamelModel):
    content: str
    is_spoiler: bool = False


class CommentDto(CamelModel):
    id: str
    date: datetime | None = None
    content: str
    is_spoiler: bool
    post: PostDto
    author: UserDto


# --- Like ---

class LikeCreate(CamelModel):
    post_id: str


class LikeDto(CamelModel):
    post_id: str


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_posts: int
    total_comments: int
    total_likes: int
    total_users: int
    avg_comments_per_post: float
    cache_info: dict = {}
