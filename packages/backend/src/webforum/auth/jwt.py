"""JWT session token issuance and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. A session
token carries the account's id, username and email plus issue and expiry
times, signed with a server-held HMAC secret. Verifying it needs no
database lookup, so the claims may be stale relative to the account row.

The secret is handed to TokenService at construction; nothing in this
module reads a global.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

import jwt
import structlog

from webforum.config import HMAC_ALGORITHMS, Settings
from webforum.errors import AuthError

logger = structlog.get_logger()

REQUIRED_CLAIMS = ["user_id", "username", "email", "iat", "exp"]


class TokenError(AuthError):
    """Raised when a token fails verification."""

    message = "Invalid token"


class TokenExpiredError(TokenError):
    message = "Token has expired"


class TokenSubject(Protocol):
    id: int
    username: str
    email: str


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a session token."""

    user_id: int
    username: str
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and verifies HMAC-signed session tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        """Build the process-wide token service from configuration.

        Learn: Development may run without WEBFORUM_JWT_SECRET. In that
        case a random secret is generated, so tokens stop working when
        the process restarts. Settings refuses an empty secret elsewhere.
        """
        secret = settings.jwt_secret
        if not secret:
            logger.warning(
                "auth.ephemeral_secret",
                environment=settings.environment,
                hint="set WEBFORUM_JWT_SECRET to keep tokens valid across restarts",
            )
            secret = secrets.token_urlsafe(32)
        return cls(
            secret=secret,
            algorithm=settings.jwt_algorithm,
            lifetime=timedelta(hours=settings.token_lifetime_hours),
        )

    def issue(self, account: TokenSubject, now: Optional[datetime] = None) -> str:
        """Create a signed token for an account, valid for `lifetime` from `now`."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "user_id": account.id,
            "username": account.username,
            "email": account.email,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verify and decode a session token.

        Raises TokenExpiredError when the expiry has passed and
        TokenError for every other failure, including tokens signed with
        an algorithm other than the configured one.
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            raise TokenError() from e
        if header.get("alg") != self.algorithm:
            raise TokenError("Unexpected signing method")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.InvalidTokenError as e:
            raise TokenError() from e

        try:
            return TokenClaims(
                user_id=int(payload["user_id"]),
                username=str(payload["username"]),
                email=str(payload["email"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (TypeError, ValueError) as e:
            raise TokenError() from e
