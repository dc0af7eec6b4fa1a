import math
from typing import Generic, List, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")

class Page(Generic[T]):
    """Срез упорядоченной выборки: номер страницы считается с нуля"""

    def __init__(self, content: List[T], page: int, size: int, total_elements: int):
        self.content = content
        self.page = page
        self.size = size
        self.total_elements = total_elements

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.total_elements > 0 else 1

    @property
    def has_next(self) -> bool:
        return (self.page + 1) * self.size < self.total_elements

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    def __iter__(self):
        return iter(self.content)

    def __len__(self):
        return len(self.content)

    def __repr__(self):
        return f"<Page {self.page} size={self.size} total={self.total_elements}>"

async def paginate(db: AsyncSession, query: Select, page: int, size: int) -> Page:
    """
    Пагинация результатов запроса

    Args:
        db: Сессия базы данных
        query: SQLAlchemy запрос, уже с полной сортировкой
        page: Номер страницы (начиная с 0)
        size: Размер страницы

    Returns:
        Page с элементами страницы и общим количеством записей
    """
    if page < 0:
        raise ValueError(f"Page index must not be negative, got {page}")
    if size < 1:
        raise ValueError(f"Page size must be positive, got {size}")

    # Общее количество записей, сортировка для подсчета не нужна
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = await db.scalar(count_query) or 0

    result = await db.execute(query.limit(size).offset(page * size))
    items = list(result.scalars().all())

    return Page(items, page, size, total)
