from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from database.crud import PostCRUD
from database.db import get_db
from database.models import User
from src.schemas.post import HomePageResponse, PostSummaryResponse
from src.utils.auth import get_optional_user

router = APIRouter(tags=["home"])

@router.get("/", response_model=HomePageResponse)
async def index(
    page: int = Query(0, ge=0, description="Номер страницы (с 0)"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    category: Optional[str] = Query(None, description="Название категории"),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Главная страница: первые size постов, остальные подгружаются через /api/posts"""
    posts_page = await PostCRUD(db).get_home_posts_by_category(category, page, size)

    return HomePageResponse(
        username=current_user.nickname if current_user else settings.GUEST_NICKNAME,
        category=category if category and category.strip() else settings.ALL_CATEGORIES_LABEL,
        posts=[PostSummaryResponse.model_validate(post) for post in posts_page.content],
        has_next=posts_page.has_next,
        next_page=posts_page.page + 1,
        size=size
    )
