# fleet_overlay/core/models.py
"""
Data classes shared by the localizer, the spline reconstructor and the
conflict layout engine.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class Pose2D:
    """A planar pose (x, y, yaw) in the fleet world frame."""
    x: float
    y: float
    yaw: float


@dataclass
class MarkerObservation:
    """One fiducial sighting: 4x4 marker pose in the device tracking frame."""
    pose: np.ndarray
    tracked: bool = True

    def __post_init__(self):
        self.pose = np.asarray(self.pose, dtype=float).reshape(4, 4)

    @property
    def position(self) -> np.ndarray:
        return self.pose[:3, 3]


@dataclass(frozen=True)
class AlignmentTransform:
    """
    Rigid transform taking device-local coordinates to the fleet world frame.
    Replaced wholesale on relocalization, never edited in place.
    """
    matrix: np.ndarray

    @property
    def rotation(self) -> np.ndarray:
        return self.matrix[:3, :3]

    @property
    def translation(self) -> np.ndarray:
        return self.matrix[:3, 3]

    def apply(self, pose: np.ndarray) -> np.ndarray:
        """Map a 4x4 pose (or 4-vector) from the device frame into the world."""
        return self.matrix @ np.asarray(pose, dtype=float)

    def origin_in_local(self) -> np.ndarray:
        """World origin expressed in the device frame (inverse transform)."""
        r = self.rotation
        inv = np.eye(4)
        inv[:3, :3] = r.T
        inv[:3, 3] = -r.T @ self.translation
        return inv

    def as_list(self) -> List[List[float]]:
        return self.matrix.tolist()


@dataclass
class TrackedRobot:
    """
    Cached robot state. Pose/mode come from the network refresh, the
    tracked flag and last_seen from marker sightings.
    """
    name: str
    latest_pose: Pose2D
    mode: str = ""
    level_name: str = ""
    fleet_name: str = ""
    last_seen: Optional[float] = None
    is_tracked: bool = False


@dataclass(frozen=True)
class SplineKnot:
    """Spline control point. t in ms, velocity/position as (x, y, yaw)."""
    t: int
    velocity: Tuple[float, float, float]
    position: Tuple[float, float, float]


@dataclass(frozen=True)
class Trajectory:
    id: int
    robot_name: str
    knots: Tuple[SplineKnot, ...] = ()
    fleet_name: str = ""

    @property
    def drawable(self) -> bool:
        return len(self.knots) >= 2

    def points(self) -> List[Tuple[float, float]]:
        return [(k.position[0], k.position[1]) for k in self.knots]


@dataclass(frozen=True)
class PathSegment:
    """A visible piece of a trajectory between two planar poses."""
    start: Pose2D
    end: Pose2D
    partial: bool = False


@dataclass(frozen=True)
class LayoutAssignment:
    trajectory_id: int
    height_level: int
    is_conflicting: bool


# ---- Localizer events (returned to the host for dispatch) ----

@dataclass(frozen=True)
class WorldOriginSet:
    """First localization: renderer must redefine its origin, peers get the level."""
    transform: AlignmentTransform
    level_name: str
    robot_name: str


@dataclass(frozen=True)
class AlignmentUpdated:
    """Drift correction after the debounce threshold was reached."""
    transform: AlignmentTransform
    robot_name: str
    position_error: float
    rotation_error: float


@dataclass
class LocalizerState:
    """Session state owned by the host and handed to FrameLocalizer.tick."""
    alignment: Optional[AlignmentTransform] = None
    unaligned_counter: int = 0
    last_update_time: Optional[float] = None

    @property
    def localized(self) -> bool:
        return self.alignment is not None


@dataclass(frozen=True)
class SegmentPlacement:
    """Where a renderer should put one path segment."""
    midpoint: Tuple[float, float]
    length: float
    heading: float
    z: float
    width: float
