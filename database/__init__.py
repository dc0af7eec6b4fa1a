from .db import get_db, engine, async_session_factory
from .models import Base, User, Category, Post, PostImage, Comment, UserRole, UserStatus
from .crud import UserCRUD, CategoryCRUD, PostCRUD, CommentCRUD
from .exceptions import ContentError, NotFoundError, ForbiddenError, CategoryInUseError
from .pagination import Page, paginate
from .migrations import create_tables, recreate_tables, init_db

__all__ = [
    "get_db", "engine", "async_session_factory",
    "Base", "User", "Category", "Post", "PostImage", "Comment", "UserRole", "UserStatus",
    "UserCRUD", "CategoryCRUD", "PostCRUD", "CommentCRUD",
    "ContentError", "NotFoundError", "ForbiddenError", "CategoryInUseError",
    "Page", "paginate",
    "create_tables", "recreate_tables", "init_db",
]
