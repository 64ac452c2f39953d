from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.schemas import CommentCreate, CommentDto, CommentUpdate
from app.security import current_user_id, require_claims, require_member
from app.services import comment_service

router = APIRouter(prefix="/api/comments", tags=["comments"])

@router.get("", response_model=list[CommentDto])
async def list_comments(db: AsyncSession = Depends(get_db)):
    return await comment_service.list_comments(db)

@router.get("/post/{post_id}", response_model=list[CommentDto])
async def list_post_comments(post_id: str, db: AsyncSession = Depends(get_db)):
    return await comment_service.list_post_comments(db, post_id)

@router.get("/{comment_id}", response_model=CommentDto)
async def get_comment(comment_id: str, db: AsyncSession = Depends(get_db)):
    return await comment_service.get_comment(db, comment_id)

@router.put("/{comment_id}", status_code=204)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    claims: dict = Depends(require_member),
    db: AsyncSession = Depends(get_db),
):
    await comment_service.update_comment(db, comment_id, data, current_user_id(claims))

@router.post("", status_code=201, response_model=CommentDto)
async def create_comment(
    data: CommentCreate,
    response: Response,
    claims: dict = Depends(require_member),
    db: AsyncSession = Depends(get_db),
):
    try:
        comment = await comment_service.create_comment(db, data, current_user_id(claims))
    except (IntegrityError, DataError):
        raise HTTPException(status_code=400, detail=f"Post {data.post_id} does not exist")
    response.headers["Location"] = str(router.url_path_for("get_comment", comment_id=comment["id"]))
    return comment

@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: str,
    claims: dict = Depends(require_claims),
    db: AsyncSession = Depends(get_db),
):
    await comment_service.delete_comment(db, comment_id, current_user_id(claims))
