# fleet_overlay/core/spline.py
"""
Cubic Hermite reconstruction of server trajectories.

Each pair of consecutive knots defines one cubic per axis (x, y, yaw) in
normalised time u in [0, 1].
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from ..utils.math import clip
from .models import PathSegment, Pose2D, SplineKnot, Trajectory

AXES = (0, 1, 2)  # x, y, yaw


def coefficients_for(knot_a: SplineKnot, knot_b: SplineKnot, axis: int) -> Tuple[float, float, float, float]:
    """(a, b, c, d) of a*u^3 + b*u^2 + c*u + d on one axis."""
    dt = knot_b.t - knot_a.t
    x0, x1 = knot_a.position[axis], knot_b.position[axis]
    w0 = knot_a.velocity[axis] / dt
    w1 = knot_b.velocity[axis] / dt

    a = w1 + w0 - 2 * x1 + 2 * x0
    b = -w1 - 2 * w0 + 3 * x1 - 3 * x0
    c = w0
    d = x0
    return a, b, c, d


def evaluate(knot_a: SplineKnot, knot_b: SplineKnot, query_time: float) -> Pose2D:
    u = clip((query_time - knot_a.t) / (knot_b.t - knot_a.t), 0.0, 1.0)
    values = []
    for axis in AXES:
        a, b, c, d = coefficients_for(knot_a, knot_b, axis)
        values.append(((a * u + b) * u + c) * u + d)
    return Pose2D(x=values[0], y=values[1], yaw=values[2])


def knot_pose(knot: SplineKnot) -> Pose2D:
    return Pose2D(x=knot.position[0], y=knot.position[1], yaw=knot.position[2])


def active_pair(trajectory: Trajectory, query_time: float) -> int:
    """
    Index i of the knot pair (i, i+1) with knots[i].t <= t < knots[i+1].t,
    or -1 when t is outside the trajectory.
    """
    knots = trajectory.knots
    for i in range(len(knots) - 1):
        if knots[i].t <= query_time < knots[i + 1].t:
            return i
    return -1


def pose_at(trajectory: Trajectory, query_time: float) -> Optional[Pose2D]:
    """Interpolated pose at query_time, None if outside the trajectory."""
    i = active_pair(trajectory, query_time)
    if i < 0:
        return None
    return evaluate(trajectory.knots[i], trajectory.knots[i + 1], query_time)


def reconstruct_visible(trajectory: Trajectory, query_time: float) -> List[PathSegment]:
    """
    Segments still ahead of the robot at query_time:
      - pairs ending at or before query_time are dropped (already driven)
      - the pair containing query_time starts at the interpolated pose
      - later pairs are returned whole
    """
    knots = trajectory.knots
    if len(knots) < 2:
        return []

    segments: List[PathSegment] = []
    for knot_a, knot_b in zip(knots, knots[1:]):
        if knot_b.t <= query_time:
            continue
        if knot_a.t > query_time:
            segments.append(PathSegment(start=knot_pose(knot_a), end=knot_pose(knot_b)))
        else:
            start = evaluate(knot_a, knot_b, query_time)
            segments.append(PathSegment(start=start, end=knot_pose(knot_b), partial=True))
    return segments
