"""FastAPI auth dependencies — the access gate.

Learn: Used as Depends() in route handlers. get_current_claims reads the
Bearer token, verifies it, and returns the verified TokenClaims to the
handler. If anything is wrong it raises AuthError before the handler
body runs (fail closed), and the error handler answers 401.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from webforum.auth.jwt import TokenClaims, TokenError, TokenService
from webforum.errors import ForbiddenError

BEARER_SCHEME = "bearer"


def get_token_service(request: Request) -> TokenService:
    """The process-wide TokenService built in create_app()."""
    return request.app.state.token_service


def get_current_claims(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """Require a valid session token; return its claims."""
    scheme, _, token = (authorization or "").partition(" ")
    # Auth scheme names are case-insensitive (RFC 7235).
    if scheme.lower() != BEARER_SCHEME:
        raise TokenError("Missing or invalid token")
    token = token.strip()
    if not token:
        raise TokenError("Missing or invalid token")
    return tokens.verify(token)


def require_owner(claims: TokenClaims, account_id: int) -> None:
    """Only the account itself may change or delete it."""
    if claims.user_id != account_id:
        raise ForbiddenError("You can only modify your own account")
