from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.models import Comment, Like, Post, User
from app.schemas import MetricsResponse
from app.cache import cache

router = APIRouter(prefix="/api/metrics", tags=["metrics"])

async def _count(db: AsyncSession, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()

@router.get("", response_model=MetricsResponse)
async def get_metrics(db: AsyncSession = Depends(get_db)):
    total_posts = await _count(db, Post)
    total_comments = await _count(db, Comment)

    return MetricsResponse(
        total_posts=total_posts,
        total_comments=total_comments,
        total_likes=await _count(db, Like),
        total_users=await _count(db, User),
        avg_comments_per_post=round(total_comments / total_posts, 2) if total_posts > 0 else 0.0,
        cache_info=cache.stats,
    )
