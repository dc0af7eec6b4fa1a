"""Tests for CommentCRUD: comment lifecycle, ownership checks and paging."""

import pytest

from database.crud import CommentCRUD, PostCRUD
from database.exceptions import ForbiddenError, NotFoundError


@pytest.fixture
async def post(session, make_user, make_category):
    user = await make_user()
    category = await make_category("hobby")
    return await PostCRUD(session).create(user.id, category.id, "Paging post", "body")


class TestCreate:
    async def test_create_comment(self, session, post):
        crud = CommentCRUD(session)

        comment_id = await crud.create_comment(post.id, post.user_id, "comment text")

        saved = await crud.get_comment(comment_id)
        assert saved.content == "comment text"
        assert saved.user_id == post.user_id
        assert saved.post_id == post.id

    async def test_create_on_missing_post(self, session, make_user):
        user = await make_user()

        with pytest.raises(NotFoundError) as exc_info:
            await CommentCRUD(session).create_comment(4242, user.id, "orphan")
        assert exc_info.value.entity == "Post"

    async def test_create_by_unknown_user(self, session, post):
        with pytest.raises(NotFoundError) as exc_info:
            await CommentCRUD(session).create_comment(post.id, 9999, "ghost")
        assert exc_info.value.entity == "User"


class TestEdit:
    async def test_author_edits(self, session, post):
        crud = CommentCRUD(session)
        comment_id = await crud.create_comment(post.id, post.user_id, "before")

        await crud.edit_comment(comment_id, post.user_id, "after")

        edited = await crud.get_comment(comment_id)
        assert edited.content == "after"

    async def test_non_author_is_forbidden(self, session, post, make_user):
        stranger = await make_user()
        crud = CommentCRUD(session)
        comment_id = await crud.create_comment(post.id, post.user_id, "before")

        with pytest.raises(ForbiddenError):
            await crud.edit_comment(comment_id, stranger.id, "after")

        unchanged = await crud.get_comment(comment_id)
        assert unchanged.content == "before"

    async def test_edit_missing_comment(self, session, post):
        with pytest.raises(NotFoundError):
            await CommentCRUD(session).edit_comment(999, post.user_id, "x")


class TestDelete:
    async def test_author_deletes(self, session, post):
        crud = CommentCRUD(session)
        comment_id = await crud.create_comment(post.id, post.user_id, "to delete")

        await crud.delete_comment(comment_id, post.user_id)

        assert not await crud.exists(comment_id)
        with pytest.raises(NotFoundError):
            await crud.get_comment(comment_id)

    async def test_non_author_cannot_delete(self, session, post, make_user):
        stranger = await make_user()
        crud = CommentCRUD(session)
        comment_id = await crud.create_comment(post.id, post.user_id, "keep me")

        with pytest.raises(ForbiddenError):
            await crud.delete_comment(comment_id, stranger.id)

        assert await crud.exists(comment_id)


class TestCommentsPage:
    async def test_pages_of_ten(self, session, post):
        crud = CommentCRUD(session)
        for i in range(1, 26):
            await crud.create_comment(post.id, post.user_id, f"comment {i}")

        pages = [await crud.get_comments_page(post.id, n, 10, post.user_id) for n in range(3)]

        assert [len(page.content) for page in pages] == [10, 10, 5]
        assert pages[0].total_elements == 25
        assert pages[0].has_next and pages[1].has_next
        assert not pages[2].has_next

        contents = [c.content for page in pages for c in page.content]
        assert contents == [f"comment {i}" for i in range(1, 26)]

    async def test_is_mine_flag_does_not_filter(self, session, post, make_user):
        other = await make_user()
        crud = CommentCRUD(session)
        await crud.create_comment(post.id, post.user_id, "from author")
        await crud.create_comment(post.id, other.id, "from other")

        page = await crud.get_comments_page(post.id, 0, 10, other.id)

        assert [(c.content, c.is_mine) for c in page.content] == [
            ("from author", False),
            ("from other", True),
        ]
        assert page.content[1].author_nickname == other.nickname

    async def test_anonymous_requester(self, session, post):
        crud = CommentCRUD(session)
        await crud.create_comment(post.id, post.user_id, "hello")

        page = await crud.get_comments_page(post.id, 0, 10)

        assert not page.content[0].is_mine

    async def test_missing_post(self, session):
        with pytest.raises(NotFoundError):
            await CommentCRUD(session).get_comments_page(31337, 0, 10)
