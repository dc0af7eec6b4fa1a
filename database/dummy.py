"""
Генерация и очистка тестовых (dummy) данных.

Все тестовые записи помечаются префиксом settings.DUMMY_PREFIX в заголовке,
тексте или названии. Очистка удаляет их от листьев к корню: изображения,
комментарии, посты, затем категории и пользователей. Порядок сохраняется
даже там, где база умеет каскадное удаление.
"""
import logging
import random
import uuid
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from .crud import CategoryCRUD, CommentCRUD, PostCRUD, UserCRUD
from .deletion import DeletionStep, run_deletion_plan
from .models import Category, Comment, Post, PostImage, User

logger = logging.getLogger(__name__)

DUMMY_CATEGORY_NAMES = ["design", "vintage", "kitsch"]


async def create_dummy_user(db: AsyncSession) -> User:
    suffix = uuid.uuid4().hex[:12]
    return await UserCRUD(db).create_user(
        login_id=f"{settings.DUMMY_USER_LOGIN_PREFIX}{suffix}",
        password="1234",
        email=f"{settings.DUMMY_EMAIL_PREFIX}{suffix}{settings.DUMMY_EMAIL_DOMAIN}",
        nickname=f"{settings.DUMMY_USER_NICK_PREFIX}{suffix}"
    )


async def generate_dummy_data(
    db: AsyncSession,
    posts: int = 100,
    max_comments: int = 3,
    rng: Optional[random.Random] = None
) -> Dict[str, int]:
    """Создает пользователя, три категории и posts постов с 0..max_comments комментариями"""
    rng = rng or random.Random()
    prefix = settings.DUMMY_PREFIX
    suffix = uuid.uuid4().hex[:6]

    user = await create_dummy_user(db)
    category_crud = CategoryCRUD(db)
    categories = [
        await category_crud.create_category(f"{prefix} {name} {suffix}")
        for name in DUMMY_CATEGORY_NAMES
    ]

    post_crud = PostCRUD(db)
    comment_crud = CommentCRUD(db)
    total_comments = 0
    for i in range(1, posts + 1):
        picked = categories[i % len(categories)]
        post = await post_crud.create(
            user.id,
            picked.id,
            f"{prefix} post {i}",
            f"{prefix} body {i}\n{datetime.utcnow().isoformat()}"
        )
        for c in range(1, rng.randint(0, max_comments) + 1):
            await comment_crud.create_comment(post.id, user.id, f"{prefix} comment {c}")
            total_comments += 1

    logger.info(f"Dummy данные созданы: posts={posts}, comments={total_comments}")
    return {
        "users": 1,
        "categories": len(categories),
        "posts": posts,
        "comments": total_comments,
    }


async def cleanup_dummy_data(db: AsyncSession) -> Dict[str, int]:
    """
    Удаляет все помеченные данные в одной транзакции.
    Повторный запуск ничего не удаляет.
    """
    prefix = settings.DUMMY_PREFIX
    logger.info("Начало очистки dummy данных")

    # Дочерние таблицы удаляются по подзапросу, а не по списку id
    marked_posts = select(Post.id).where(Post.title.startswith(prefix, autoescape=True))
    posts_count = await db.scalar(select(func.count()).select_from(marked_posts.subquery()))
    logger.info(f"Найдено dummy постов: {posts_count}")

    steps = [
        DeletionStep(
            "post_images",
            delete(PostImage).where(PostImage.post_id.in_(marked_posts.scalar_subquery()))
        ),
        DeletionStep(
            "comments_by_post",
            delete(Comment).where(Comment.post_id.in_(marked_posts.scalar_subquery()))
        ),
        DeletionStep("posts", delete(Post).where(Post.title.startswith(prefix, autoescape=True))),
        # Подстраховка: комментарии, оставшиеся после частичной очистки
        DeletionStep(
            "comments_by_content",
            delete(Comment).where(Comment.content.startswith(prefix, autoescape=True))
        ),
        DeletionStep(
            "categories",
            delete(Category).where(Category.name.startswith(prefix, autoescape=True))
        ),
        DeletionStep(
            "users",
            delete(User).where(or_(
                User.login_id.startswith(settings.DUMMY_USER_LOGIN_PREFIX, autoescape=True),
                User.nickname.startswith(settings.DUMMY_USER_NICK_PREFIX, autoescape=True),
                and_(
                    User.email.startswith(settings.DUMMY_EMAIL_PREFIX, autoescape=True),
                    User.email.endswith(settings.DUMMY_EMAIL_DOMAIN, autoescape=True)
                )
            ))
        ),
    ]

    try:
        counts = await run_deletion_plan(db, steps)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    # Массовое удаление не синхронизирует identity map
    db.expunge_all()

    logger.info(f"Очистка dummy данных завершена: {counts}")
    return counts
