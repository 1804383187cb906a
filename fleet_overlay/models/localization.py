# fleet_overlay/models/localization.py
"""
Pydantic models for localizer results.
"""
from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel


class LocalizationResponse(BaseModel):
    """
    Result of feeding one marker batch to the localizer:
    - localized: whether an alignment is active after this batch
    - event: "world_origin_set", "alignment_updated" or None
    - robot_name: reference robot used (None if skipped)
    """
    localized: bool
    event: Optional[str] = None
    robot_name: Optional[str] = None
    level_name: Optional[str] = None
    unaligned_counter: int = 0


class AlignmentResponse(BaseModel):
    """
    - matrix: device->world 4x4 transform
    - origin_in_local: world origin expressed in the device frame
    """
    matrix: List[List[float]]
    origin_in_local: List[List[float]]
    level_name: Optional[str] = None
    unaligned_counter: int
