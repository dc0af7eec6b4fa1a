from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from database.crud import CommentCRUD, PostCRUD
from database.db import get_db
from database.models import User
from src.schemas.comment import CommentCreate, CommentCreatedResponse, CommentResponse
from src.schemas.common import MessageResponse, PageResponse
from src.schemas.post import PostCreate, PostResponse, PostSummaryResponse, PostUpdate
from src.utils.auth import get_current_user, get_optional_user

router = APIRouter(prefix="/posts", tags=["posts"])

@router.get("", response_model=PageResponse[PostSummaryResponse])
async def get_posts(
    page: int = Query(0, ge=0, description="Номер страницы (с 0)"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    category: Optional[str] = Query(None, description="Название категории"),
    db: AsyncSession = Depends(get_db)
):
    """Лента постов для бесконечной прокрутки"""
    return await PostCRUD(db).get_home_posts_by_category(category, page, size)

@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await PostCRUD(db).create(
        current_user.id,
        post_data.category_id,
        post_data.title,
        post_data.description,
        image_urls=post_data.image_urls
    )

@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)):
    return await PostCRUD(db).get(post_id)

@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Обновление поста (только автором)"""
    crud = PostCRUD(db)
    await crud.update(
        post_id,
        current_user.id,
        post_data.category_id,
        post_data.title,
        post_data.description
    )
    return await crud.get(post_id)

@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Удаление поста вместе с изображениями и комментариями (только автором)"""
    await PostCRUD(db).delete(post_id, current_user.id)
    return {"message": "Post deleted successfully"}

@router.get("/{post_id}/comments", response_model=PageResponse[CommentResponse])
async def get_post_comments(
    post_id: int,
    page: int = Query(0, ge=0),
    size: int = Query(settings.COMMENTS_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    requester_id = current_user.id if current_user else None
    return await CommentCRUD(db).get_comments_page(post_id, page, size, requester_id)

@router.post(
    "/{post_id}/comments",
    response_model=CommentCreatedResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    comment_id = await CommentCRUD(db).create_comment(post_id, current_user.id, comment_data.content)
    return {"id": comment_id}
