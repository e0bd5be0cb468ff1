"""Account service — signup, login, profile update, cascading delete.

Learn: Service layer separates business logic from HTTP routing.
Routes call the service, the service calls the AccountStore. Validation
happens here, once, for every caller; uniqueness is pre-checked here for
friendly messages but enforced by the database's unique constraints.
"""

import re
from typing import Optional

import structlog

from webforum.auth.jwt import TokenService
from webforum.auth.password import hash_password, verify_password
from webforum.db.models import Account
from webforum.db.store import AccountStore
from webforum.errors import AuthError, ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
MIN_PASSWORD_LENGTH = 8
# Column widths of accounts.username and accounts.email.
MAX_USERNAME_LENGTH = 100
MAX_EMAIL_LENGTH = 255


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


def check_lengths(username: Optional[str], email: Optional[str]) -> None:
    if username is not None and len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(
            f"Username must be at most {MAX_USERNAME_LENGTH} characters long"
        )
    if email is not None and len(email) > MAX_EMAIL_LENGTH:
        raise ValidationError(f"Email must be at most {MAX_EMAIL_LENGTH} characters long")


class AccountService:
    """Business logic for the account lifecycle."""

    def __init__(
        self,
        store: AccountStore,
        tokens: TokenService,
        password_rounds: int = 12,
    ):
        self.store = store
        self.tokens = tokens
        self.password_rounds = password_rounds

    # ─── Signup / login ─────────────────────────────────

    async def signup(self, username: str, email: str, password: str) -> Account:
        username = username.strip()
        email = email.strip()
        if not username or not email or not password:
            raise ValidationError("All fields are required")
        check_lengths(username, email)
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

        # Fast path only — the unique constraints catch concurrent signups.
        if await self.store.find_by_email(email):
            raise ConflictError("Email already in use")
        if await self.store.find_by_username(username):
            raise ConflictError("Username already taken")

        account = await self.store.create(
            username=username,
            email=email,
            password_hash=hash_password(password, rounds=self.password_rounds),
        )
        logger.info("account.created", account_id=account.id)
        return account

    async def login(self, email: str, password: str) -> str:
        """Check credentials and issue a session token.

        Learn: An unknown email and a wrong password produce the same
        AuthError, so the response can't be used to probe for accounts.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        account = await self.store.find_by_email(email.strip())
        if account is None or not verify_password(password, account.password_hash):
            logger.info("account.login_failed")
            raise AuthError("Invalid email or password")

        logger.info("account.logged_in", account_id=account.id)
        return self.tokens.issue(account)

    # ─── Reads ──────────────────────────────────────────

    async def get(self, account_id: int) -> Account:
        account = await self.store.get(account_id)
        if account is None:
            raise NotFoundError("User not found")
        return account

    async def list_accounts(self) -> list[Account]:
        return await self.store.list_all()

    # ─── Update / delete ────────────────────────────────

    async def update(
        self,
        account_id: int,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Account:
        """Partial update — empty or missing fields keep their current value."""
        account = await self.get(account_id)

        username = (username or "").strip() or None
        email = (email or "").strip() or None
        check_lengths(username, email)
        if email is not None and not is_valid_email(email):
            raise ValidationError("Invalid email format")

        if email is not None and email != account.email:
            other = await self.store.find_by_email(email)
            if other is not None and other.id != account.id:
                raise ConflictError("Email already in use")
        if username is not None and username != account.username:
            other = await self.store.find_by_username(username)
            if other is not None and other.id != account.id:
                raise ConflictError("Username already taken")

        account = await self.store.update(account, username=username, email=email)
        logger.info("account.updated", account_id=account.id)
        return account

    async def delete(self, account_id: int) -> None:
        """Delete the account with all its threads and comments, atomically."""
        await self.store.delete_cascade(account_id)
