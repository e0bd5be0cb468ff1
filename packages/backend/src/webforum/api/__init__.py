"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Unlike a router-wide auth dependency, auth here is per route:
reads are public, while every write depends on get_current_claims so the
handler receives the verified caller.
"""

from fastapi import APIRouter

from webforum.api.accounts import router as accounts_router
from webforum.api.categories import router as categories_router
from webforum.api.health import router as health_router
from webforum.api.threads import router as threads_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(accounts_router, tags=["accounts"])
api_router.include_router(threads_router, tags=["threads", "comments"])
api_router.include_router(categories_router, tags=["categories", "tags"])
