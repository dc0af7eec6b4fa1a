class ContentError(Exception):
    """Базовая ошибка хранилища контента"""


class NotFoundError(ContentError):
    """Запись, на которую ссылается операция, не существует"""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ForbiddenError(ContentError):
    """Изменять и удалять запись может только её автор"""

    def __init__(self, entity: str, entity_id, requester_id):
        self.entity = entity
        self.entity_id = entity_id
        self.requester_id = requester_id
        super().__init__(
            f"User {requester_id} is not allowed to modify {entity.lower()} {entity_id}"
        )


class CategoryInUseError(ContentError):
    def __init__(self, category_id: int, posts_count: int):
        self.category_id = category_id
        self.posts_count = posts_count
        super().__init__(
            f"Category {category_id} is still used by {posts_count} post(s)"
        )
