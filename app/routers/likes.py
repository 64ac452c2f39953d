from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.exceptions import AuthenticationError
from app.schemas import LikeCreate, LikeDto
from app.security import current_user_id, require_claims, require_member
from app.services import like_service, user_service

router = APIRouter(prefix="/api/likes", tags=["likes"])

@router.get("/post/{post_id}", response_model=list[LikeDto])
async def list_post_likes(post_id: str, db: AsyncSession = Depends(get_db)):
    return await like_service.list_post_likes(db, post_id)

@router.post("", status_code=201, response_model=LikeDto)
async def add_like(
    data: LikeCreate,
    claims: dict = Depends(require_member),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.get_user_by_id(db, current_user_id(claims))
    if user is None:
        raise AuthenticationError("Unknown user")
    try:
        return await like_service.add_like(db, data.post_id, user.id)
    except (IntegrityError, DataError):
        raise HTTPException(
            status_code=409,
            detail="Post is already liked or does not exist",
        )

@router.delete("/post/{post_id}", status_code=204)
async def remove_like(
    post_id: str,
    claims: dict = Depends(require_claims),
    db: AsyncSession = Depends(get_db),
):
    await like_service.remove_like(db, post_id, current_user_id(claims))
