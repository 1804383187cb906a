# fleet_overlay/api/routes/status.py
"""
Status and control routes.
"""
from fastapi import APIRouter

from ..deps import get_shared
from ...models import StatusResponse
from ...services.status_service import get_status_service

router = APIRouter(tags=["status"])


@router.get("/status", response_model=StatusResponse)
def status():
    """Localization and batch status."""
    return get_status_service(get_shared())


@router.post("/reset")
def reset():
    """Drop robots, alignment and trajectories."""
    get_shared().reset()
    return {"ok": True}
