from __future__ import annotations

import logging
from typing import List, Optional

from ..core.models import SplineKnot, Trajectory
from ..models import (
    OverlayResponse,
    RobotTrajectory,
    TimeRequest,
    TimeResponse,
    TrajectoryParam,
    TrajectoryRequest,
    TrajectoryResponse,
)
from ..utils.math import ns_to_ms
from .overlay_service import build_overlay

logger = logging.getLogger(__name__)


class ResponseTagError(ValueError):
    """A server response arrived with the wrong `response` tag."""


class MissingBatchError(LookupError):
    """A time response arrived with no trajectory batch waiting for it."""


def build_trajectory_request(shared) -> Optional[TrajectoryRequest]:
    """Request trajectories for the level the localizer reported."""
    with shared.lock:
        level = shared.level_name
    if not level:
        return None
    return TrajectoryRequest(param=TrajectoryParam(map_name=level))


def build_time_request() -> TimeRequest:
    return TimeRequest()


def to_trajectory(rt: RobotTrajectory) -> Trajectory:
    knots = tuple(
        SplineKnot(t=k.t, velocity=tuple(k.v), position=tuple(k.x))
        for k in rt.segments
    )
    return Trajectory(id=rt.id, robot_name=rt.robot_name, knots=knots, fleet_name=rt.fleet_name)


def ingest_trajectory_response(shared, resp: TrajectoryResponse) -> int:
    """
    First half of the exchange: park the batch until the server time that
    goes with it arrives. A newer batch replaces any parked one.
    """
    if resp.response != "trajectory":
        raise ResponseTagError(f"expected 'trajectory' response, got {resp.response!r}")
    trajectories: List[Trajectory] = [to_trajectory(v) for v in resp.values]
    with shared.lock:
        if shared.pending_trajectories is not None:
            logger.info("[trajectory] replacing unpaired batch")
        shared.pending_trajectories = trajectories
        shared.pending_conflicts = [list(p) for p in resp.conflicts]
    return len(trajectories)


def ingest_time_response(shared, resp: TimeResponse) -> OverlayResponse:
    """
    Second half: pair the parked batch with this server time, lay it out
    and publish it as the current batch.
    """
    if resp.response != "time":
        raise ResponseTagError(f"expected 'time' response, got {resp.response!r}")
    query_time = ns_to_ms(resp.values[0])

    with shared.lock:
        trajectories = shared.pending_trajectories
        conflicts = shared.pending_conflicts
        shared.pending_trajectories = None
        shared.pending_conflicts = []
    if trajectories is None:
        raise MissingBatchError("time response without a pending trajectory batch")

    overlay = build_overlay(trajectories, conflicts, query_time)

    with shared.lock:
        shared.trajectories = trajectories
        shared.conflicts = conflicts
        shared.query_time_ms = query_time
    logger.debug("[trajectory] batch of %d paired at t=%d ms", len(trajectories), query_time)
    return overlay
