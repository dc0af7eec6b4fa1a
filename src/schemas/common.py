from typing import Generic, List, TypeVar
from pydantic import BaseModel

T = TypeVar('T')

class PageResponse(BaseModel, Generic[T]):
    """Страница результатов, номер страницы начинается с 0"""
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    number_of_elements: int
    has_next: bool

    class Config:
        from_attributes = True

class HealthResponse(BaseModel):
    """Ответ для проверки работоспособности сервиса"""
    status: str = "ok"
    service: str
    version: str

class MessageResponse(BaseModel):
    """Ответ с простым сообщением"""
    message: str
