from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from database.crud import UserCRUD
from database.db import get_db
from database.models import User, UserStatus

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

async def _resolve_user(token: str, db: AsyncSession) -> User:
    """
    Проверка токена выполняется в API Gateway, в сервис приходит
    только ID пользователя в заголовке Authorization: Bearer <id>
    """
    if token.startswith("Bearer "):
        token = token[7:]
    if not token.isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID"
        )

    user = await UserCRUD(db).get_user_or_none(int(token))
    if not user or user.status != UserStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )
    return user

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Текущий пользователь, обязательная авторизация"""
    return await _resolve_user(credentials.credentials, db)

async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Текущий пользователь или None для гостя"""
    if credentials is None:
        return None
    return await _resolve_user(credentials.credentials, db)
