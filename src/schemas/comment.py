from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

class CommentCreate(BaseModel):
    """Схема для создания комментария"""
    content: str = Field(..., min_length=1, max_length=1000)

class CommentUpdate(BaseModel):
    """Схема для обновления комментария"""
    content: str = Field(..., min_length=1, max_length=1000)

class CommentResponse(BaseModel):
    """Схема для ответа с данными комментария"""
    id: int
    post_id: int
    user_id: int
    content: str
    created_at: datetime
    updated_at: datetime
    author_nickname: Optional[str] = None
    is_mine: bool = False

    class Config:
        from_attributes = True

class CommentCreatedResponse(BaseModel):
    id: int
