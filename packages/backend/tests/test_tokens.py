"""Session token tests — issuance, expiry, tampering, algorithm confusion."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest

from webforum.auth.jwt import TokenError, TokenExpiredError, TokenService
from webforum.config import Settings
from webforum.errors import AuthError

SECRET = "unit-test-secret-0123456789abcdef0123"


@pytest.fixture()
def tokens():
    return TokenService(secret=SECRET)


@pytest.fixture()
def account():
    return SimpleNamespace(id=42, username="alice", email="alice@example.com")


def test_issue_and_verify_round_trip(tokens, account):
    claims = tokens.verify(tokens.issue(account))
    assert claims.user_id == 42
    assert claims.username == "alice"
    assert claims.email == "alice@example.com"


def test_lifetime_is_24_hours(tokens, account):
    now = datetime.now(timezone.utc).replace(microsecond=0)
    claims = tokens.verify(tokens.issue(account, now=now))
    assert claims.issued_at == now
    assert claims.expires_at - claims.issued_at == timedelta(hours=24)


def test_issue_is_deterministic_for_same_time(tokens, account):
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert tokens.issue(account, now=now) == tokens.issue(account, now=now)


def test_token_older_than_24_hours_is_expired(tokens, account):
    issued = datetime.now(timezone.utc) - timedelta(hours=24, minutes=1)
    token = tokens.issue(account, now=issued)
    with pytest.raises(TokenExpiredError):
        tokens.verify(token)


def test_token_errors_are_auth_errors(tokens):
    with pytest.raises(AuthError):
        tokens.verify("not.a.token")


def test_garbage_token_rejected(tokens):
    with pytest.raises(TokenError):
        tokens.verify("invalid_token_here")


def test_tampered_signature_rejected(tokens, account):
    token = tokens.issue(account)
    head, payload, signature = token.split(".")
    flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
    with pytest.raises(TokenError):
        tokens.verify(f"{head}.{payload}.{flipped}")


def test_other_secret_rejected(tokens, account):
    other = TokenService(secret="another-secret-0123456789abcdef0123")
    with pytest.raises(TokenError):
        tokens.verify(other.issue(account))


def test_unsigned_token_rejected(tokens):
    """alg=none must never be accepted."""
    payload = {
        "user_id": 1,
        "username": "mallory",
        "email": "m@example.com",
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    token = jwt.encode(payload, "", algorithm="none")
    with pytest.raises(TokenError):
        tokens.verify(token)


def test_other_hmac_algorithm_rejected(tokens, account):
    """Same secret, different algorithm than configured → rejected."""
    hs512 = TokenService(secret=SECRET, algorithm="HS512")
    with pytest.raises(TokenError):
        tokens.verify(hs512.issue(account))


def test_missing_claims_rejected(tokens):
    token = jwt.encode(
        {"exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenError):
        tokens.verify(token)


def test_empty_secret_refused():
    with pytest.raises(ValueError):
        TokenService(secret="")


def test_non_hmac_algorithm_refused():
    with pytest.raises(ValueError):
        TokenService(secret=SECRET, algorithm="RS256")


def test_from_settings_without_secret_generates_one(account):
    service = TokenService.from_settings(
        Settings(jwt_secret="", environment="development")
    )
    assert service.verify(service.issue(account)).user_id == 42


def test_from_settings_uses_configured_lifetime(account):
    service = TokenService.from_settings(
        Settings(jwt_secret=SECRET, token_lifetime_hours=2)
    )
    claims = service.verify(service.issue(account))
    assert claims.expires_at - claims.issued_at == timedelta(hours=2)
