"""Category and tag API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from webforum.auth.dependencies import get_current_claims
from webforum.db.engine import get_db
from webforum.schemas.forum import CategoryCreate, CategoryRead, TagCreate, TagRead
from webforum.services.forum_service import ForumService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> ForumService:
    return ForumService(db)


@router.post(
    "/create_category",
    response_model=CategoryRead,
    dependencies=[Depends(get_current_claims)],
)
async def create_category(body: CategoryCreate, svc: ForumService = Depends(_svc)):
    return await svc.create_category(body.name)


@router.get("/get_categories", response_model=list[CategoryRead])
async def list_categories(svc: ForumService = Depends(_svc)):
    return await svc.list_categories()


@router.post(
    "/create_tag",
    response_model=TagRead,
    dependencies=[Depends(get_current_claims)],
)
async def create_tag(body: TagCreate, svc: ForumService = Depends(_svc)):
    return await svc.create_tag(body.name)


@router.get("/get_tags", response_model=list[TagRead])
async def list_tags(svc: ForumService = Depends(_svc)):
    return await svc.list_tags()
