# fleet_overlay/api/routes/robots.py
"""
Robot cache routes (network refresh push).
"""
from typing import List

from fastapi import APIRouter

from ..deps import get_shared
from ...models import RobotListResponse, RobotState
from ...services.robot_service import get_robots_service, update_robot_states_service

router = APIRouter(tags=["robots"])


@router.get("/robots", response_model=RobotListResponse)
def robots():
    """Cached robots with their tracking state."""
    return get_robots_service(get_shared())


@router.post("/robots")
def update_robots(states: List[RobotState]):
    """Body: the fleet server's robot list."""
    n = update_robot_states_service(get_shared(), states)
    return {"ok": True, "count": n}
