from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Iterable, List, Tuple

from ..core.models import Pose2D, TrackedRobot
from ..models import RobotListResponse, RobotState, TrackedRobotOut

logger = logging.getLogger(__name__)


def update_robot_states_service(shared, states: Iterable[RobotState]) -> int:
    """
    Network refresh: upsert pose/mode/level. Tracked flag and last_seen are
    owned by marker sightings and survive the refresh.
    """
    n = 0
    with shared.robots_lock:
        for s in states:
            pose = Pose2D(x=s.location_x, y=s.location_y, yaw=s.location_yaw)
            robot = shared.robots.get(s.robot_name)
            if robot is None:
                shared.robots[s.robot_name] = TrackedRobot(
                    name=s.robot_name,
                    latest_pose=pose,
                    mode=s.mode,
                    level_name=s.level_name,
                    fleet_name=s.fleet_name,
                )
            else:
                robot.latest_pose = pose
                robot.mode = s.mode
                robot.level_name = s.level_name
                robot.fleet_name = s.fleet_name
            n += 1
    logger.debug("[robots] refreshed %d robot states", n)
    return n


def record_sightings_and_snapshot(
    shared, sightings: Iterable[Tuple[str, bool]], t: float
) -> Dict[str, TrackedRobot]:
    """
    Apply marker sightings and return a copy of the robot cache, all within
    one critical section.
    """
    with shared.robots_lock:
        for name, tracked in sightings:
            robot = shared.robots.get(name)
            if robot is None:
                logger.info("[robots] marker %r does not match a known robot", name)
                continue
            robot.is_tracked = tracked
            if tracked:
                robot.last_seen = t
        return {name: dataclasses.replace(r) for name, r in shared.robots.items()}


def snapshot_robots(shared) -> Dict[str, TrackedRobot]:
    with shared.robots_lock:
        return {name: dataclasses.replace(r) for name, r in shared.robots.items()}


def get_robots_service(shared) -> RobotListResponse:
    robots = snapshot_robots(shared)
    items: List[TrackedRobotOut] = [
        TrackedRobotOut(
            name=r.name,
            fleet_name=r.fleet_name,
            x=r.latest_pose.x,
            y=r.latest_pose.y,
            yaw=r.latest_pose.yaw,
            mode=r.mode,
            level_name=r.level_name,
            is_tracked=r.is_tracked,
            last_seen=r.last_seen,
        )
        for r in sorted(robots.values(), key=lambda r: r.name)
    ]
    return RobotListResponse(robots=items)
