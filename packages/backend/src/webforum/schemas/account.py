"""Pydantic schemas for accounts and auth.

Learn: Request bodies only check shape here; the account rules (email
format, password length) live in AccountService so every caller gets the
same validation. AccountRead has no password field at all.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SignupRequest(BaseModel):
    username: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class AccountUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None


class AccountRead(BaseModel):
    id: int
    username: str
    email: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SignupResponse(BaseModel):
    message: str = "User created successfully"
    user: AccountRead


class TokenResponse(BaseModel):
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str
