import math

import numpy as np
import pytest

from fleet_overlay.core.geometry import (
    orientation,
    point_x_axis_at,
    polylines_intersect,
    pose_from_quat,
    rotation_z,
    segments_intersect,
)
from fleet_overlay.utils.math import angle_diff, ns_to_ms, wrap_pi


def test_orientation_three_way():
    assert orientation((0, 0), (1, 0), (1, 1)) == 1
    assert orientation((0, 0), (1, 0), (1, -1)) == -1
    assert orientation((0, 0), (1, 0), (2, 0)) == 0


def test_crossing_segments_intersect():
    assert segments_intersect((0, 0), (10, 0), (5, -5), (5, 5))
    assert segments_intersect((0, 0), (10, 10), (0, 10), (10, 0))


def test_clockwise_and_counter_clockwise_crossings_both_detected():
    # same crossing, second segment drawn in both directions
    assert segments_intersect((0, 0), (4, 4), (0, 4), (4, 0))
    assert segments_intersect((0, 0), (4, 4), (4, 0), (0, 4))


def test_disjoint_segments():
    assert not segments_intersect((0, 0), (1, 0), (0, 1), (1, 1))
    assert not segments_intersect((0, 0), (1, 1), (2, 0), (3, -5))


def test_collinear_cases():
    assert segments_intersect((0, 0), (4, 0), (2, 0), (6, 0))
    assert not segments_intersect((0, 0), (1, 0), (2, 0), (3, 0))
    # touching at an endpoint
    assert segments_intersect((0, 0), (1, 1), (1, 1), (2, 0))


def test_polylines_intersect_any_pair():
    a = [(0, 0), (1, 0), (2, 0)]
    b = [(5, 5), (1.5, 1), (1.5, -1)]
    assert polylines_intersect(a, b)
    assert not polylines_intersect(a, [(0, 1), (2, 1)])
    assert not polylines_intersect(a, [(0, 1)])


def test_point_x_axis_at_is_rotation_mapping_up_to_z():
    up = (0.0, 1.0, 0.0)
    r = point_x_axis_at(np.array([1.0, 0.3, -1.0]), up)
    assert np.allclose(r.T @ r, np.eye(3))
    assert np.linalg.det(r) == pytest.approx(1.0)
    assert np.allclose(r.T @ np.array(up), [0.0, 0.0, 1.0])
    heading = r.T @ np.array([1.0, 0.0, -1.0]) / math.sqrt(2)
    assert np.allclose(heading, [1.0, 0.0, 0.0])


def test_point_x_axis_at_vertical_heading_does_not_fail():
    r = point_x_axis_at(np.array([0.0, -1.0, 0.0]), (0.0, 1.0, 0.0))
    assert np.all(np.isfinite(r))
    assert np.allclose(r.T @ r, np.eye(3))


def test_quaternion_pose_matches_yaw_rotation():
    pose = pose_from_quat((1.0, 2.0, 3.0), (0.0, 0.0, math.sin(0.35), math.cos(0.35)))
    assert np.allclose(pose[:3, :3], rotation_z(0.7))
    assert np.allclose(pose[:3, 3], [1.0, 2.0, 3.0])


def test_angle_helpers():
    assert wrap_pi(2.5 * math.pi) == pytest.approx(0.5 * math.pi)
    assert angle_diff(math.radians(170), math.radians(-170)) == pytest.approx(math.radians(-20))
    assert ns_to_ms(1_500_600_000) == 1501


def test_wrap_pi_range_and_bad_input():
    assert wrap_pi(math.pi) == pytest.approx(math.pi)
    assert wrap_pi(-math.pi) == pytest.approx(math.pi)
    assert -math.pi < wrap_pi(1e12) <= math.pi
    with pytest.raises(ValueError):
        wrap_pi(math.inf)
    with pytest.raises(ValueError):
        wrap_pi(math.nan)
