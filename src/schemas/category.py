from pydantic import BaseModel

class CategoryResponse(BaseModel):
    """Схема для ответа с данными категории"""
    id: int
    name: str
    is_active: bool

    class Config:
        from_attributes = True
