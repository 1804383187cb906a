# fleet_overlay/core/localizer.py
"""
Aligns the device tracking frame with the fleet world frame using a single
fiducial marker mounted on a robot whose world pose is known.

The session state (active alignment, debounce counter, last tick time) lives
in a LocalizerState owned by the caller; FrameLocalizer itself only holds
configuration. tick() must not run concurrently for the same state.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from .. import config as C
from ..utils.math import angle_diff
from .geometry import planar_yaw, point_x_axis_at, rigid, rotation_z
from .models import (
    AlignmentTransform,
    AlignmentUpdated,
    LocalizerState,
    MarkerObservation,
    Pose2D,
    TrackedRobot,
    WorldOriginSet,
)

logger = logging.getLogger(__name__)

LocalizerEvent = Union[WorldOriginSet, AlignmentUpdated]


def marker_heading(pose: np.ndarray) -> np.ndarray:
    """The marker's y-axis points out of the tag; heading points into it."""
    return -np.asarray(pose, dtype=float)[:3, 1]


def select_reference_robot(
    candidates: Iterable[TrackedRobot], moving_token: str = C.MOVING_MODE_TOKEN
) -> Optional[TrackedRobot]:
    """
    Most recently seen robot that is currently tracked and not moving.
    Ties on last_seen go to the lexically smallest name.
    """
    eligible = [
        r for r in candidates
        if r.is_tracked and moving_token not in (r.mode or "")
    ]
    if not eligible:
        return None
    eligible.sort(key=lambda r: r.name)
    return max(
        eligible,
        key=lambda r: r.last_seen if r.last_seen is not None else -math.inf,
    )


def solve_translation(rotation: np.ndarray, marker_position: Sequence[float], target: Sequence[float]) -> np.ndarray:
    """Translation t such that rotation @ marker_position + t == target."""
    rotated = rotation @ np.asarray(marker_position, dtype=float)
    offset = rotated - np.asarray(target, dtype=float)
    return -offset


def compute_alignment(
    marker_pose: np.ndarray,
    robot_pose: Pose2D,
    marker_height: float = C.MARKER_HEIGHT,
    up: Sequence[float] = C.LOCAL_UP,
    eps: float = C.HEADING_EPS,
) -> AlignmentTransform:
    """
    Build the device->world transform that puts the marker at
    (robot.x, robot.y, marker_height) with its heading along robot.yaw.
    """
    marker_pose = np.asarray(marker_pose, dtype=float).reshape(4, 4)
    r_marker = point_x_axis_at(marker_heading(marker_pose), up, eps)
    r_robot = rotation_z(robot_pose.yaw)
    rotation = r_robot @ r_marker.T

    target = (robot_pose.x, robot_pose.y, marker_height)
    translation = solve_translation(rotation, marker_pose[:3, 3], target)
    return AlignmentTransform(matrix=rigid(rotation, translation))


def alignment_error(
    alignment: AlignmentTransform, marker_pose: np.ndarray, robot_pose: Pose2D
) -> tuple[float, float]:
    """
    Planar position error and signed yaw error of the marker as predicted by
    the active alignment, against the robot's reported pose.
    """
    predicted = alignment.apply(marker_pose)
    dx = predicted[0, 3] - robot_pose.x
    dy = predicted[1, 3] - robot_pose.y
    heading_world = alignment.rotation @ marker_heading(marker_pose)
    rotation_error = angle_diff(planar_yaw(heading_world), robot_pose.yaw)
    return math.hypot(dx, dy), rotation_error


def correct_alignment(
    alignment: AlignmentTransform,
    marker_pose: np.ndarray,
    robot_pose: Pose2D,
    rotation_error: float,
    marker_height: float = C.MARKER_HEIGHT,
) -> AlignmentTransform:
    """Undo the measured yaw drift and re-solve the translation."""
    rotation = rotation_z(-rotation_error) @ alignment.rotation
    target = (robot_pose.x, robot_pose.y, marker_height)
    translation = solve_translation(rotation, np.asarray(marker_pose)[:3, 3], target)
    return AlignmentTransform(matrix=rigid(rotation, translation))


class FrameLocalizer:
    """Unlocalized -> Localized, then debounced drift correction."""

    def __init__(
        self,
        update_rate_hz: float = C.UPDATE_RATE_HZ,
        marker_height: float = C.MARKER_HEIGHT,
        distance_threshold: float = C.DISTANCE_THRESHOLD,
        angular_threshold_deg: float = C.ANGULAR_THRESHOLD_DEG,
        relocalization_threshold: int = C.RELOCALIZATION_THRESHOLD,
        up: Sequence[float] = C.LOCAL_UP,
    ):
        if update_rate_hz <= 0:
            raise ValueError("update_rate_hz must be > 0")
        if relocalization_threshold < 1:
            raise ValueError("relocalization_threshold must be >= 1")
        self.min_interval = 1.0 / update_rate_hz
        self.marker_height = marker_height
        self.distance_threshold = distance_threshold
        self.angular_threshold = math.radians(angular_threshold_deg)
        self.relocalization_threshold = relocalization_threshold
        self.up = np.asarray(up, dtype=float)
        if not np.any(self.up):
            raise ValueError("up axis must be non-zero")

    def tick(
        self,
        state: LocalizerState,
        observation: MarkerObservation,
        robot: TrackedRobot,
        now: float,
    ) -> Optional[LocalizerEvent]:
        last = state.last_update_time
        if last is not None and now < last:
            logger.warning("[localizer] clock went back %.3fs, re-anchoring", last - now)
        elif last is not None and now - last < self.min_interval:
            logger.debug("[localizer] tick dropped, %.3fs since previous", now - last)
            return None
        state.last_update_time = now

        if not observation.tracked:
            logger.info("[localizer] marker for %s not tracked, skipping", robot.name)
            return None

        if not state.localized:
            return self._localize(state, observation, robot)
        return self._relocalize(state, observation, robot)

    def _localize(self, state: LocalizerState, observation: MarkerObservation, robot: TrackedRobot) -> WorldOriginSet:
        logger.info("[localizer] localizing against %s on level %r", robot.name, robot.level_name)
        alignment = compute_alignment(observation.pose, robot.latest_pose, self.marker_height, self.up)
        state.alignment = alignment
        state.unaligned_counter = 0
        return WorldOriginSet(transform=alignment, level_name=robot.level_name, robot_name=robot.name)

    def _relocalize(
        self, state: LocalizerState, observation: MarkerObservation, robot: TrackedRobot
    ) -> Optional[AlignmentUpdated]:
        position_error, rotation_error = alignment_error(state.alignment, observation.pose, robot.latest_pose)
        logger.debug(
            "[localizer] position error=%.3f rotation error=%.3f", position_error, rotation_error
        )

        if abs(rotation_error) > self.angular_threshold or position_error > self.distance_threshold:
            state.unaligned_counter += 1
            logger.debug(
                "[localizer] over threshold, count %d of %d",
                state.unaligned_counter, self.relocalization_threshold,
            )
        else:
            state.unaligned_counter = 0
            return None

        if state.unaligned_counter < self.relocalization_threshold:
            return None

        logger.info("[localizer] relocalizing against %s", robot.name)
        alignment = correct_alignment(
            state.alignment, observation.pose, robot.latest_pose, rotation_error, self.marker_height
        )
        state.alignment = alignment
        state.unaligned_counter = 0
        return AlignmentUpdated(
            transform=alignment,
            robot_name=robot.name,
            position_error=position_error,
            rotation_error=rotation_error,
        )
