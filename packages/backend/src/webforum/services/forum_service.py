"""Forum service — threads, comments, categories, and tags.

Learn: Same shape as AccountService but without a separate store
abstraction: these are plain CRUD operations on one AsyncSession.
Owner checks take the caller's account id from verified token claims.
"""

from typing import Iterable, Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from webforum.db.models import Account, Category, Comment, Tag, Thread, ThreadTag
from webforum.errors import (
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = structlog.get_logger()

# Column widths of threads.title, categories.name and tags.name.
MAX_TITLE_LENGTH = 200
MAX_CATEGORY_LENGTH = 100
MAX_TAG_LENGTH = 50


class ForumService:
    """Business logic for forum content."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, failure_message: str, conflict_message: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(conflict_message) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(failure_message) from e

    async def _require_author(self, user_id: int) -> None:
        """Tokens outlive deleted accounts; refuse writes on their behalf."""
        if await self.db.get(Account, user_id) is None:
            raise AuthError("Account no longer exists")

    async def _write_authored(self, user_id: int, failure_message: str, write) -> None:
        """Flush or commit a row owned by user_id.

        Learn: The pre-check in _require_author races with a concurrent
        account delete. The author foreign key is what finally refuses the
        row, and that violation means the same thing as the pre-check.
        """
        try:
            await write()
        except IntegrityError as e:
            await self.db.rollback()
            if await self.db.get(Account, user_id) is None:
                raise AuthError("Account no longer exists") from e
            raise ConflictError(failure_message) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(failure_message) from e

    async def _all(self, query) -> list:
        try:
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError("Could not read from the database") from e

    # ─── Threads ────────────────────────────────────────

    async def create_thread(
        self,
        user_id: int,
        title: str,
        content: str = "",
        category_id: Optional[int] = None,
        tag_ids: Iterable[int] = (),
    ) -> Thread:
        if not title.strip():
            raise ValidationError("Title is required")
        if len(title.strip()) > MAX_TITLE_LENGTH:
            raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters long")
        await self._require_author(user_id)
        if category_id is not None and await self.db.get(Category, category_id) is None:
            raise NotFoundError("Category not found")

        tag_ids = sorted(set(tag_ids))
        if tag_ids:
            found = await self._all(select(Tag.id).where(Tag.id.in_(tag_ids)))
            if len(found) != len(tag_ids):
                raise NotFoundError("Tag not found")

        thread = Thread(
            title=title.strip(),
            content=content,
            user_id=user_id,
            category_id=category_id,
        )
        self.db.add(thread)
        await self._write_authored(user_id, "Could not create thread", self.db.flush)
        for tag_id in tag_ids:
            self.db.add(ThreadTag(thread_id=thread.id, tag_id=tag_id))

        await self._write_authored(user_id, "Could not create thread", self.db.commit)
        await self.db.refresh(thread)
        logger.info("thread.created", thread_id=thread.id, user_id=user_id)
        return thread

    async def list_threads(self) -> list[Thread]:
        return await self._all(select(Thread).order_by(Thread.created_at.desc(), Thread.id.desc()))

    async def get_thread(self, thread_id: int) -> Thread:
        thread = await self.db.get(Thread, thread_id)
        if thread is None:
            raise NotFoundError("Thread not found")
        return thread

    async def thread_tag_ids(self, thread_id: int) -> list[int]:
        return await self._all(
            select(ThreadTag.tag_id)
            .where(ThreadTag.thread_id == thread_id)
            .order_by(ThreadTag.tag_id)
        )

    async def delete_thread(self, thread_id: int, user_id: int) -> None:
        """Delete a thread with its comments and tag links. Owner only."""
        thread = await self.get_thread(thread_id)
        if thread.user_id != user_id:
            raise ForbiddenError("Only the author can delete this thread")

        try:
            await self.db.execute(delete(Comment).where(Comment.thread_id == thread_id))
            await self.db.execute(delete(ThreadTag).where(ThreadTag.thread_id == thread_id))
            await self.db.delete(thread)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError("Could not delete thread") from e
        await self._commit("Could not delete thread", "Could not delete thread")
        logger.info("thread.deleted", thread_id=thread_id, user_id=user_id)

    # ─── Comments ───────────────────────────────────────

    async def create_comment(self, user_id: int, thread_id: int, content: str) -> Comment:
        if not content.strip():
            raise ValidationError("Content is required")
        await self._require_author(user_id)
        await self.get_thread(thread_id)

        comment = Comment(thread_id=thread_id, user_id=user_id, content=content)
        self.db.add(comment)
        await self._write_authored(user_id, "Could not create comment", self.db.commit)
        await self.db.refresh(comment)
        logger.info("comment.created", comment_id=comment.id, thread_id=thread_id)
        return comment

    async def list_comments(self) -> list[Comment]:
        return await self._all(select(Comment).order_by(Comment.id))

    async def list_comments_for_thread(self, thread_id: int) -> list[Comment]:
        return await self._all(
            select(Comment).where(Comment.thread_id == thread_id).order_by(Comment.id)
        )

    async def delete_comment(self, comment_id: int, user_id: int) -> None:
        comment = await self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        if comment.user_id != user_id:
            raise ForbiddenError("Only the author can delete this comment")

        await self.db.delete(comment)
        await self._commit("Could not delete comment", "Could not delete comment")

    # ─── Categories / tags ──────────────────────────────

    async def create_category(self, name: str) -> Category:
        name = name.strip()
        if not name:
            raise ValidationError("Name is required")
        if len(name) > MAX_CATEGORY_LENGTH:
            raise ValidationError(f"Name must be at most {MAX_CATEGORY_LENGTH} characters long")
        category = Category(name=name)
        self.db.add(category)
        await self._commit("Could not create category", "Category already exists")
        await self.db.refresh(category)
        return category

    async def list_categories(self) -> list[Category]:
        return await self._all(select(Category).order_by(Category.name))

    async def create_tag(self, name: str) -> Tag:
        name = name.strip().lower()
        if not name:
            raise ValidationError("Name is required")
        if len(name) > MAX_TAG_LENGTH:
            raise ValidationError(f"Name must be at most {MAX_TAG_LENGTH} characters long")
        tag = Tag(name=name)
        self.db.add(tag)
        await self._commit("Could not create tag", "Tag already exists")
        await self.db.refresh(tag)
        return tag

    async def list_tags(self) -> list[Tag]:
        return await self._all(select(Tag).order_by(Tag.name))
