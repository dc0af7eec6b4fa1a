from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from database.crud import CategoryCRUD
from database.db import get_db
from database.models import User, UserRole
from src.schemas.category import CategoryResponse
from src.schemas.common import MessageResponse
from src.utils.auth import get_current_user

router = APIRouter(prefix="/categories", tags=["categories"])

@router.get("", response_model=List[CategoryResponse])
async def get_categories(
    active_only: bool = Query(True, description="Только активные категории"),
    db: AsyncSession = Depends(get_db)
):
    return await CategoryCRUD(db).list_categories(active_only=active_only)

@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Удаление категории (только администратором и только пустой)"""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator rights required"
        )
    await CategoryCRUD(db).delete_category(category_id)
    return {"message": "Category deleted successfully"}
