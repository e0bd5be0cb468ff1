"""Account store — the repository between account logic and the database.

Learn: AccountService talks to an AccountStore, never to SQLAlchemy
directly. SqlAccountStore is the production implementation; tests can
hand the service any object with the same methods.

Errors are translated at this boundary:
- IntegrityError (unique constraint) → ConflictError
- any other SQLAlchemyError → StorageError (detail kept as __cause__)
"""

from typing import Optional, Protocol

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from webforum.db.models import Account, Comment, Thread, ThreadTag
from webforum.errors import ConflictError, NotFoundError, StorageError

logger = structlog.get_logger()


class AccountStore(Protocol):
    """Storage capability the account lifecycle depends on."""

    async def get(self, account_id: int) -> Optional[Account]: ...

    async def list_all(self) -> list[Account]: ...

    async def find_by_email(self, email: str) -> Optional[Account]: ...

    async def find_by_username(self, username: str) -> Optional[Account]: ...

    async def create(
        self, username: str, email: str, password_hash: str
    ) -> Account: ...

    async def update(
        self,
        account: Account,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Account: ...

    async def delete_cascade(self, account_id: int) -> None: ...


class SqlAccountStore:
    """AccountStore backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads ──────────────────────────────────────────

    async def get(self, account_id: int) -> Optional[Account]:
        try:
            return await self.db.get(Account, account_id)
        except SQLAlchemyError as e:
            raise StorageError("Could not retrieve the user") from e

    async def list_all(self) -> list[Account]:
        try:
            result = await self.db.execute(select(Account).order_by(Account.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError("Could not retrieve users") from e

    async def find_by_email(self, email: str) -> Optional[Account]:
        return await self._find_one(Account.email == email)

    async def find_by_username(self, username: str) -> Optional[Account]:
        return await self._find_one(Account.username == username)

    async def _find_one(self, predicate) -> Optional[Account]:
        try:
            result = await self.db.execute(select(Account).where(predicate))
            return result.scalars().first()
        except SQLAlchemyError as e:
            raise StorageError("Could not retrieve the user") from e

    # ─── Writes ─────────────────────────────────────────

    async def create(self, username: str, email: str, password_hash: str) -> Account:
        account = Account(username=username, email=email, password_hash=password_hash)
        self.db.add(account)
        await self._commit("Could not create user")
        await self.db.refresh(account)
        return account

    async def update(
        self,
        account: Account,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Account:
        if username:
            account.username = username
        if email:
            account.email = email
        await self._commit("Failed to update user")
        return account

    async def _commit(self, failure_message: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError("Username or email already in use") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(failure_message) from e

    # ─── Cascading delete ───────────────────────────────

    async def delete_cascade(self, account_id: int) -> None:
        """Delete an account and everything it owns, all or nothing.

        Learn: Every step runs in the session's single transaction.
        Comments go first (other users' comments on this account's
        threads too, since they would point at deleted threads), then
        thread/tag links, threads, and the account row. Commit happens
        only after the last step; any failure rolls the whole thing back
        and reports the step that failed.
        """
        if await self.get(account_id) is None:
            raise NotFoundError("User not found")

        steps = [
            (self._delete_comments, "Could not delete comments"),
            (self._delete_threads, "Could not delete threads"),
            (self._delete_account_row, "Could not delete user"),
        ]
        log = logger.bind(account_id=account_id)
        for step, failure_message in steps:
            try:
                await step(account_id)
            except SQLAlchemyError as e:
                await self.db.rollback()
                log.error("account.delete_rolled_back", step=step.__name__, error=str(e))
                raise StorageError(failure_message) from e

        await self._commit("Could not delete user")
        log.info("account.deleted")

    def _owned_threads(self, account_id: int):
        return select(Thread.id).where(Thread.user_id == account_id)

    async def _delete_comments(self, account_id: int) -> None:
        await self.db.execute(delete(Comment).where(Comment.user_id == account_id))
        await self.db.execute(
            delete(Comment)
            .where(Comment.thread_id.in_(self._owned_threads(account_id)))
            .execution_options(synchronize_session=False)
        )

    async def _delete_threads(self, account_id: int) -> None:
        await self.db.execute(
            delete(ThreadTag)
            .where(ThreadTag.thread_id.in_(self._owned_threads(account_id)))
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(delete(Thread).where(Thread.user_id == account_id))

    async def _delete_account_row(self, account_id: int) -> None:
        await self.db.execute(delete(Account).where(Account.id == account_id))
