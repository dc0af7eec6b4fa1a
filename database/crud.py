import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.utils.password import get_password_hash
from .deletion import DeletionStep, run_deletion_plan
from .exceptions import CategoryInUseError, ForbiddenError, NotFoundError
from .models import Category, Comment, Post, PostImage, User, UserRole, UserStatus
from .pagination import Page, paginate

logger = logging.getLogger(__name__)


class UserCRUD:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_user(
        self,
        login_id: str,
        password: str,
        email: str,
        nickname: str,
        role: UserRole = UserRole.USER,
        status: UserStatus = UserStatus.ACTIVE
    ) -> User:
        user = User(
            login_id=login_id,
            password=get_password_hash(password),
            email=email.lower(),
            nickname=nickname,
            role=role,
            status=status
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(user)
        logger.info(f"Создан пользователь {user.id}")
        return user

    async def get_user_or_none(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user(self, user_id: int) -> User:
        user = await self.get_user_or_none(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user


class CategoryCRUD:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_category(self, name: str, is_active: bool = True) -> Category:
        category = Category(name=name, is_active=is_active)
        self.session.add(category)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(category)
        logger.info(f"Создана категория {category.id}")
        return category

    async def get_category(self, category_id: int) -> Category:
        result = await self.session.execute(select(Category).where(Category.id == category_id))
        category = result.scalar_one_or_none()
        if not category:
            raise NotFoundError("Category", category_id)
        return category

    async def list_categories(self, active_only: bool = True) -> List[Category]:
        query = select(Category).order_by(Category.name)
        if active_only:
            query = query.where(Category.is_active == True)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def delete_category(self, category_id: int) -> None:
        """Удаление категории запрещено, пока на нее ссылается хотя бы один пост"""
        await self.get_category(category_id)

        posts_count = await self.session.scalar(
            select(func.count(Post.id)).where(Post.category_id == category_id)
        )
        if posts_count:
            raise CategoryInUseError(category_id, posts_count)

        try:
            await self.session.execute(delete(Category).where(Category.id == category_id))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(f"Удалена категория {category_id}")


class PostCRUD:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_owned_post(self, post_id: int, requester_id: int) -> Post:
        result = await self.session.execute(select(Post).where(Post.id == post_id))
        post = result.scalar_one_or_none()
        if not post:
            raise NotFoundError("Post", post_id)
        if post.user_id != requester_id:
            logger.warning(f"Пользователь {requester_id} пытается изменить чужой пост {post_id}")
            raise ForbiddenError("Post", post_id, requester_id)
        return post

    async def _missing_reference(self, user_id: int, category_id: int) -> Optional[NotFoundError]:
        """Определяет, на какую несуществующую запись сослался пост"""
        if await self.session.scalar(select(User.id).where(User.id == user_id)) is None:
            return NotFoundError("User", user_id)
        if await self.session.scalar(select(Category.id).where(Category.id == category_id)) is None:
            return NotFoundError("Category", category_id)
        return None

    async def create(
        self,
        user_id: int,
        category_id: int,
        title: str,
        description: str,
        image_urls: Optional[List[str]] = None
    ) -> Post:
        post = Post(
            user_id=user_id,
            category_id=category_id,
            title=title,
            description=description
        )
        for index, image_url in enumerate(image_urls or []):
            post.images.append(PostImage(image_url=image_url, sort_order=index))

        self.session.add(post)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            # Ссылки проверяет внешний ключ, здесь только уточняем причину
            missing = await self._missing_reference(user_id, category_id)
            if missing:
                raise missing from e
            raise

        logger.info(f"Создан пост {post.id} пользователем {user_id}")
        return await self.get(post.id)

    async def get(self, post_id: int) -> Post:
        result = await self.session.execute(
            select(Post)
            .options(
                selectinload(Post.user),
                selectinload(Post.category),
                selectinload(Post.images)
            )
            .where(Post.id == post_id)
            .execution_options(populate_existing=True)
        )
        post = result.scalar_one_or_none()
        if not post:
            raise NotFoundError("Post", post_id)
        return post

    async def exists(self, post_id: int) -> bool:
        return await self.session.scalar(select(Post.id).where(Post.id == post_id)) is not None

    async def update(
        self,
        post_id: int,
        requester_id: int,
        category_id: int,
        title: str,
        description: str
    ) -> None:
        post = await self._get_owned_post(post_id, requester_id)
        category = await CategoryCRUD(self.session).get_category(category_id)

        post.category = category
        post.title = title
        post.description = description
        post.updated_at = datetime.utcnow()

        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(f"Пост {post_id} обновлен пользователем {requester_id}")

    async def delete(self, post_id: int, requester_id: int) -> None:
        await self._get_owned_post(post_id, requester_id)

        steps = [
            DeletionStep("post_images", delete(PostImage).where(PostImage.post_id == post_id)),
            DeletionStep("comments", delete(Comment).where(Comment.post_id == post_id)),
            DeletionStep("posts", delete(Post).where(Post.id == post_id)),
        ]
        try:
            await run_deletion_plan(self.session, steps)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        # Массовое удаление не синхронизирует identity map:
        # вместе с постом устаревают его изображения и комментарии
        self.session.expunge_all()
        logger.info(f"Пост {post_id} удален пользователем {requester_id}")

    def _summary_query(self):
        return (
            select(Post)
            .join(Post.category)
            .options(
                selectinload(Post.user),
                selectinload(Post.category),
                selectinload(Post.images)
            )
            .order_by(desc(Post.created_at), desc(Post.id))
        )

    async def _attach_comments_count(self, posts: List[Post]) -> None:
        if not posts:
            return
        result = await self.session.execute(
            select(Comment.post_id, func.count(Comment.id))
            .where(Comment.post_id.in_([post.id for post in posts]))
            .group_by(Comment.post_id)
        )
        counts = dict(result.all())
        for post in posts:
            post.comments_count = counts.get(post.id, 0)

    async def get_home_posts_by_category(
        self,
        category: Optional[str],
        page: int,
        size: int
    ) -> Page[Post]:
        """Посты для главной страницы, новые первыми; без категории выводятся все"""
        query = self._summary_query()
        if category and category.strip():
            query = query.where(Category.name == category.strip())

        posts_page = await paginate(self.session, query, page, size)
        await self._attach_comments_count(posts_page.content)
        return posts_page

    async def get_user_posts(self, user_id: int, page: int, size: int) -> Page[Post]:
        query = self._summary_query().where(Post.user_id == user_id)
        posts_page = await paginate(self.session, query, page, size)
        await self._attach_comments_count(posts_page.content)
        return posts_page


class CommentCRUD:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_owned_comment(self, comment_id: int, requester_id: int) -> Comment:
        comment = await self.get_comment(comment_id)
        if comment.user_id != requester_id:
            logger.warning(
                f"Пользователь {requester_id} пытается изменить чужой комментарий {comment_id}"
            )
            raise ForbiddenError("Comment", comment_id, requester_id)
        return comment

    async def create_comment(self, post_id: int, user_id: int, content: str) -> int:
        if not await PostCRUD(self.session).exists(post_id):
            raise NotFoundError("Post", post_id)

        comment = Comment(post_id=post_id, user_id=user_id, content=content)
        self.session.add(comment)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if await UserCRUD(self.session).get_user_or_none(user_id) is None:
                raise NotFoundError("User", user_id) from e
            raise

        logger.info(f"Создан комментарий {comment.id} к посту {post_id}")
        return comment.id

    async def get_comment(self, comment_id: int) -> Comment:
        result = await self.session.execute(
            select(Comment)
            .options(selectinload(Comment.user))
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        comment = result.scalar_one_or_none()
        if not comment:
            raise NotFoundError("Comment", comment_id)
        return comment

    async def exists(self, comment_id: int) -> bool:
        return await self.session.scalar(
            select(Comment.id).where(Comment.id == comment_id)
        ) is not None

    async def edit_comment(self, comment_id: int, requester_id: int, new_content: str) -> None:
        comment = await self._get_owned_comment(comment_id, requester_id)

        comment.content = new_content
        comment.updated_at = datetime.utcnow()
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(f"Комментарий {comment_id} изменен пользователем {requester_id}")

    async def delete_comment(self, comment_id: int, requester_id: int) -> None:
        comment = await self._get_owned_comment(comment_id, requester_id)

        try:
            await self.session.delete(comment)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(f"Комментарий {comment_id} удален пользователем {requester_id}")

    async def get_comments_page(
        self,
        post_id: int,
        page: int,
        size: int,
        requester_id: Optional[int] = None
    ) -> Page[Comment]:
        """
        Комментарии к посту в порядке написания (старые первыми).
        requester_id не ограничивает выборку, а только помечает свои комментарии.
        """
        if not await PostCRUD(self.session).exists(post_id):
            raise NotFoundError("Post", post_id)

        query = (
            select(Comment)
            .options(selectinload(Comment.user))
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at, Comment.id)
        )
        comments_page = await paginate(self.session, query, page, size)
        for comment in comments_page.content:
            comment.is_mine = requester_id is not None and comment.user_id == requester_id
        return comments_page
