# fleet_overlay/models/trajectory.py
"""
Pydantic models for the trajectory server protocol.
"""
from __future__ import annotations

from typing import List
from pydantic import BaseModel, ConfigDict, Field

from .. import config as C


class TrajectoryParam(BaseModel):
    map_name: str
    duration: int = C.TRAJECTORY_DURATION_MS
    trim: bool = C.TRAJECTORY_TRIM


class TrajectoryRequest(BaseModel):
    request: str = "trajectory"
    param: TrajectoryParam


class TimeRequest(BaseModel):
    request: str = "time"
    param: List[str] = Field(default_factory=list)


class SplineKnotIn(BaseModel):
    """t in ms; v = (vx, vy, vyaw); x = (x, y, yaw)."""
    model_config = ConfigDict(extra="forbid")

    t: int
    v: List[float] = Field(min_length=3, max_length=3)
    x: List[float] = Field(min_length=3, max_length=3)


class RobotTrajectory(BaseModel):
    robot_name: str
    fleet_name: str = ""
    shape: str = ""
    dimensions: float = 0.0
    id: int
    segments: List[SplineKnotIn]


class TrajectoryResponse(BaseModel):
    """
    Response to a trajectory request:
    - values: one trajectory per scheduled robot
    - conflicts: pairs of trajectory ids occupying the same space-time
    """
    response: str
    values: List[RobotTrajectory] = Field(default_factory=list)
    conflicts: List[List[int]] = Field(default_factory=list)


class TimeResponse(BaseModel):
    """Response to a time request: values[0] is server time in ns."""
    response: str
    values: List[int] = Field(min_length=1)
