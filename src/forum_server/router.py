from fastapi import APIRouter

from forum_server.routers.activity import router as activity_router
from forum_server.routers.forums import router as forums_router
from forum_server.routers.search import router as search_router
from forum_server.routers.threads import router as threads_router

router = APIRouter()
router.include_router(forums_router)
router.include_router(threads_router)
router.include_router(search_router)
router.include_router(activity_router)
