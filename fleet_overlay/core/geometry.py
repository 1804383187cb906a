# fleet_overlay/core/geometry.py
"""
Vector, rotation and segment primitives used by the localizer and layout.
"""
from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

Point = Tuple[float, float]

ORIENT_EPS = 1e-12


def normalize(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    if n == 0.0:
        return v
    return v / n


def rotation_z(yaw: float) -> np.ndarray:
    """Rotation about the vertical (z) axis of the world frame."""
    c, s = math.cos(yaw), math.sin(yaw)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def rigid(rotation: np.ndarray, translation: Sequence[float]) -> np.ndarray:
    """Compose a 4x4 homogeneous transform."""
    m = np.eye(4)
    m[:3, :3] = rotation
    m[:3, 3] = np.asarray(translation, dtype=float)
    return m


def quat_to_matrix(qx: float, qy: float, qz: float, qw: float) -> np.ndarray:
    """Unit quaternion (x, y, z, w) -> 3x3 rotation."""
    q = normalize(np.array([qx, qy, qz, qw], dtype=float))
    x, y, z, w = q
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
        [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
        [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
    ])


def pose_from_quat(position: Sequence[float], quat: Sequence[float]) -> np.ndarray:
    return rigid(quat_to_matrix(*quat), position)


def horizontal(v: np.ndarray, up: np.ndarray) -> np.ndarray:
    """Drop the component of v along the (unit) up axis."""
    return v - np.dot(v, up) * up


def point_x_axis_at(heading: np.ndarray, up: Sequence[float], eps: float = 1e-4) -> np.ndarray:
    """
    Rotation whose columns are (heading, up x heading, up): its transpose maps
    the heading onto +x and the up axis onto +z. A heading with no horizontal
    extent (marker normal exactly vertical) is nudged by eps along a
    horizontal axis before normalising.
    """
    up = normalize(np.asarray(up, dtype=float))
    x = horizontal(np.asarray(heading, dtype=float), up)
    if np.dot(x, x) == 0.0:
        # first basis axis that is not parallel to up
        for axis in np.eye(3):
            nudge = horizontal(axis, up)
            if np.dot(nudge, nudge) > 0.0:
                x = x + eps * normalize(nudge)
                break
    x = normalize(x)
    y = normalize(np.cross(up, x))
    z = np.cross(x, y)
    return np.column_stack((x, y, z))


def planar_yaw(direction: Sequence[float]) -> float:
    return math.atan2(direction[1], direction[0])


# ---- 2D segment intersection ----

def orientation(p: Point, q: Point, r: Point) -> int:
    """
    Sign of (q - p) x (r - q): 1 counter-clockwise, -1 clockwise,
    0 collinear.
    """
    val = (q[0] - p[0]) * (r[1] - q[1]) - (q[1] - p[1]) * (r[0] - q[0])
    if abs(val) <= ORIENT_EPS:
        return 0
    return 1 if val > 0 else -1


def on_segment(p: Point, q: Point, r: Point) -> bool:
    """For collinear p, q, r: does q lie within the bounding box of p-r?"""
    return (
        min(p[0], r[0]) <= q[0] <= max(p[0], r[0])
        and min(p[1], r[1]) <= q[1] <= max(p[1], r[1])
    )


def segments_intersect(p1: Point, q1: Point, p2: Point, q2: Point) -> bool:
    o1 = orientation(p1, q1, p2)
    o2 = orientation(p1, q1, q2)
    o3 = orientation(p2, q2, p1)
    o4 = orientation(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True

    # collinear special cases
    if o1 == 0 and on_segment(p1, p2, q1):
        return True
    if o2 == 0 and on_segment(p1, q2, q1):
        return True
    if o3 == 0 and on_segment(p2, p1, q2):
        return True
    if o4 == 0 and on_segment(p2, q1, q2):
        return True
    return False


def polylines_intersect(a: Sequence[Point], b: Sequence[Point]) -> bool:
    """True if any consecutive-point segment of a crosses one of b."""
    for i in range(len(a) - 1):
        for j in range(len(b) - 1):
            if segments_intersect(a[i], a[i + 1], b[j], b[j + 1]):
                return True
    return False
