"""Thread and comment API routes.

Learn: Reads are public. Creating content needs a session token, and the
author is taken from the verified claims rather than the request body.
Deleting needs the token of the author.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from webforum.auth.dependencies import get_current_claims
from webforum.auth.jwt import TokenClaims
from webforum.db.engine import get_db
from webforum.schemas.account import MessageResponse
from webforum.schemas.forum import (
    CommentCreate,
    CommentRead,
    ThreadCreate,
    ThreadDetail,
    ThreadRead,
)
from webforum.services.forum_service import ForumService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> ForumService:
    return ForumService(db)


# ─── Threads ────────────────────────────────────────────

@router.post("/create_thread", response_model=ThreadDetail)
async def create_thread(
    body: ThreadCreate,
    claims: TokenClaims = Depends(get_current_claims),
    svc: ForumService = Depends(_svc),
):
    thread = await svc.create_thread(
        user_id=claims.user_id,
        title=body.title,
        content=body.content,
        category_id=body.category_id,
        tag_ids=body.tag_ids,
    )
    detail = ThreadDetail.model_validate(thread)
    detail.tag_ids = await svc.thread_tag_ids(thread.id)
    return detail


@router.get("/get_threads", response_model=list[ThreadRead])
async def list_threads(svc: ForumService = Depends(_svc)):
    return await svc.list_threads()


@router.get("/get_thread/{thread_id}", response_model=ThreadDetail)
async def get_thread(thread_id: int, svc: ForumService = Depends(_svc)):
    thread = await svc.get_thread(thread_id)
    detail = ThreadDetail.model_validate(thread)
    detail.tag_ids = await svc.thread_tag_ids(thread_id)
    return detail


@router.delete("/delete_thread/{thread_id}", response_model=MessageResponse)
async def delete_thread(
    thread_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    svc: ForumService = Depends(_svc),
):
    await svc.delete_thread(thread_id, user_id=claims.user_id)
    return MessageResponse(message="Thread deleted successfully")


# ─── Comments ───────────────────────────────────────────

@router.post("/create_comment", response_model=CommentRead)
async def create_comment(
    body: CommentCreate,
    claims: TokenClaims = Depends(get_current_claims),
    svc: ForumService = Depends(_svc),
):
    return await svc.create_comment(
        user_id=claims.user_id, thread_id=body.thread_id, content=body.content
    )


@router.get("/get_comments", response_model=list[CommentRead])
async def list_comments(svc: ForumService = Depends(_svc)):
    return await svc.list_comments()


@router.get("/get_comments/{thread_id}", response_model=list[CommentRead])
async def list_thread_comments(thread_id: int, svc: ForumService = Depends(_svc)):
    return await svc.list_comments_for_thread(thread_id)


@router.delete("/delete_comment/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    svc: ForumService = Depends(_svc),
):
    await svc.delete_comment(comment_id, user_id=claims.user_id)
    return MessageResponse(message="Comment deleted successfully")
