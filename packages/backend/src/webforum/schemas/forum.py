"""Pydantic schemas for threads, comments, categories, and tags.

Learn: Separate "Create" schemas (input) from "Read" schemas (output).
Author ids are never part of a Create schema; they come from the token.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ─── Threads ────────────────────────────────────────────

class ThreadCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = ""
    category_id: Optional[int] = None
    tag_ids: list[int] = Field(default_factory=list)


class ThreadRead(BaseModel):
    id: int
    title: str
    content: str
    user_id: int
    category_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ThreadDetail(ThreadRead):
    tag_ids: list[int] = []


# ─── Comments ───────────────────────────────────────────

class CommentCreate(BaseModel):
    thread_id: int
    content: str = Field(..., min_length=1)


class CommentRead(BaseModel):
    id: int
    thread_id: int
    user_id: int
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ─── Categories / tags ──────────────────────────────────

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class CategoryRead(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)


class TagRead(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}
