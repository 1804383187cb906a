# fleet_overlay/models/overlay.py
"""
Pydantic models for the rendered overlay.
"""
from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel


class PoseOut(BaseModel):
    x: float
    y: float
    yaw: float


class SegmentOut(BaseModel):
    """
    One visible path segment:
    - start/end: planar poses
    - partial: starts at the robot's interpolated pose
    - midpoint/length/width/heading/z: box placement for the renderer
    """
    start: PoseOut
    end: PoseOut
    partial: bool
    midpoint: List[float]
    length: float
    heading: float
    z: float
    width: float


class OverlayItem(BaseModel):
    trajectory_id: int
    robot_name: str
    pose: Optional[PoseOut] = None
    is_conflicting: bool
    height_level: int
    color_class: str
    highlighted: bool = False
    segments: List[SegmentOut]


class OverlayResponse(BaseModel):
    """Overlay for the latest trajectory batch at server time t (ms)."""
    t: int
    items: List[OverlayItem]
