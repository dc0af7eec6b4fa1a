from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

class PostCreate(BaseModel):
    """Схема для создания поста"""
    category_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    image_urls: Optional[List[str]] = None

class PostUpdate(BaseModel):
    """Схема для обновления поста, все поля обязательны"""
    category_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)

class PostImageResponse(BaseModel):
    id: int
    image_url: str
    sort_order: int

    class Config:
        from_attributes = True

class PostSummaryResponse(BaseModel):
    """Краткая карточка поста для ленты"""
    id: int
    title: str
    category_name: str
    author_nickname: str
    thumbnail_url: Optional[str] = None
    comments_count: int = 0
    created_at: datetime

    class Config:
        from_attributes = True

class PostResponse(BaseModel):
    id: int
    user_id: int
    category_id: int
    title: str
    description: str
    created_at: datetime
    updated_at: datetime
    author_nickname: str
    category_name: str
    images: List[PostImageResponse] = []

    class Config:
        from_attributes = True

class HomePageResponse(BaseModel):
    """Данные главной страницы: первые посты и параметры для подгрузки"""
    username: str
    category: str
    posts: List[PostSummaryResponse]
    has_next: bool
    next_page: int
    size: int
