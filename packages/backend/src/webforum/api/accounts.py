"""Account API — signup, login, profile, cascading delete.

Learn: Routes for the account lifecycle:
- POST /signup → create an account
- POST /login → email/password → JWT session token
- GET /get_users, GET /get_user/{id} → public profile data
- PUT /users/{id} → partial profile update (owner only)
- DELETE /delete_user/{id} → account + threads + comments (owner only)
- GET /protected → probe for a valid token
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from webforum.auth.dependencies import get_current_claims, get_token_service, require_owner
from webforum.auth.jwt import TokenClaims, TokenService
from webforum.config import settings
from webforum.db.engine import get_db
from webforum.db.store import SqlAccountStore
from webforum.schemas.account import (
    AccountRead,
    AccountUpdate,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    SignupResponse,
    TokenResponse,
)
from webforum.services.account_service import AccountService

router = APIRouter()


def _svc(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AccountService:
    return AccountService(
        SqlAccountStore(db),
        tokens,
        password_rounds=settings.password_hash_rounds,
    )


# ─── Signup / login ─────────────────────────────────────

@router.post("/signup", response_model=SignupResponse)
async def signup(body: SignupRequest, svc: AccountService = Depends(_svc)):
    """Create a new account."""
    account = await svc.signup(body.username, body.email, body.password)
    return SignupResponse(user=AccountRead.model_validate(account))


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, svc: AccountService = Depends(_svc)):
    """Login with email and password → session token."""
    token = await svc.login(body.email, body.password)
    return TokenResponse(token=token)


# ─── Profiles ───────────────────────────────────────────

@router.get("/get_users", response_model=list[AccountRead])
async def list_users(svc: AccountService = Depends(_svc)):
    return await svc.list_accounts()


@router.get("/get_user/{account_id}", response_model=AccountRead)
async def get_user(account_id: int, svc: AccountService = Depends(_svc)):
    return await svc.get(account_id)


@router.put("/users/{account_id}", response_model=AccountRead)
async def update_user(
    account_id: int,
    body: AccountUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    svc: AccountService = Depends(_svc),
):
    """Update username and/or email. Empty fields are left unchanged."""
    require_owner(claims, account_id)
    return await svc.update(account_id, username=body.username, email=body.email)


@router.delete("/delete_user/{account_id}", response_model=MessageResponse)
async def delete_user(
    account_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    svc: AccountService = Depends(_svc),
):
    """Delete the account together with its threads and comments."""
    require_owner(claims, account_id)
    await svc.delete(account_id)
    return MessageResponse(message="User, threads, and comments deleted successfully")


# ─── Protected probe ────────────────────────────────────

@router.get("/protected")
async def protected(claims: TokenClaims = Depends(get_current_claims)):
    return {
        "message": "You have access to this protected route!",
        "user_id": claims.user_id,
        "username": claims.username,
    }
