# fleet_overlay/models/robot.py
"""
Pydantic models for robot state refreshes and marker sightings.
"""
from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class RobotState(BaseModel):
    """One entry of the fleet server's robot list."""
    model_config = ConfigDict(allow_inf_nan=False)

    robot_name: str
    fleet_name: str = ""
    battery_percent: float = 0.0
    location_x: float
    location_y: float
    location_yaw: float
    level_name: str = ""
    mode: str = ""
    assignments: List[str] = Field(default_factory=list)


class TrackedRobotOut(BaseModel):
    """Cached robot as seen by the host."""
    name: str
    fleet_name: str
    x: float
    y: float
    yaw: float
    mode: str
    level_name: str
    is_tracked: bool
    last_seen: Optional[float] = None


class RobotListResponse(BaseModel):
    robots: List[TrackedRobotOut]


class MarkerObservationIn(BaseModel):
    """
    A fiducial sighting keyed by robot name. The pose is either a 4x4
    row-major matrix, or a position + (x, y, z, w) quaternion.
    """
    model_config = ConfigDict(allow_inf_nan=False)

    name: str
    tracked: bool = True
    matrix: Optional[List[List[float]]] = None
    position: Optional[List[float]] = None
    orientation: Optional[List[float]] = None


class MarkerBatch(BaseModel):
    """
    - t: sighting time in seconds (host clock if omitted)
    - observations: everything detected in this frame
    """
    t: Optional[float] = None
    observations: List[MarkerObservationIn]
