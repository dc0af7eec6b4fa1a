from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database.crud import CommentCRUD
from database.db import get_db
from database.models import User
from src.schemas.comment import CommentResponse, CommentUpdate
from src.schemas.common import MessageResponse
from src.utils.auth import get_current_user

router = APIRouter(prefix="/comments", tags=["comments"])

@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    comment_data: CommentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Обновление комментария (только автором)"""
    crud = CommentCRUD(db)
    await crud.edit_comment(comment_id, current_user.id, comment_data.content)
    comment = await crud.get_comment(comment_id)
    comment.is_mine = True
    return comment

@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Удаление комментария (только автором)"""
    await CommentCRUD(db).delete_comment(comment_id, current_user.id)
    return {"message": "Comment deleted successfully"}
