# fleet_overlay/models/status.py
"""
Pydantic model for the host status endpoint.
"""
from __future__ import annotations

from typing import Optional
from pydantic import BaseModel


class StatusResponse(BaseModel):
    localized: bool
    level_name: Optional[str] = None
    unaligned_counter: int
    robot_count: int
    tracked_count: int
    trajectory_count: int
    awaiting_time: bool
    query_time_ms: Optional[int] = None
