from fastapi import APIRouter

from .status import router as status_router
from .robots import router as robots_router
from .localization import router as localization_router
from .trajectory import router as trajectory_router

router = APIRouter(prefix="/api/v1")

router.include_router(status_router)
router.include_router(robots_router)
router.include_router(localization_router)
router.include_router(trajectory_router)
