"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.events import router as events_router
from api.v1.routes.tasks import router as tasks_router
from api.v1.routes.uploads import router as uploads_router
from api.v1.routes.users import router as users_router

router = APIRouter()
router.include_router(events_router)
router.include_router(users_router)
router.include_router(tasks_router)
router.include_router(uploads_router)
