import math

import numpy as np
import pytest
from fastapi.testclient import TestClient

from fleet_overlay.api.deps import set_shared
from fleet_overlay.core import FrameLocalizer, SharedState
from fleet_overlay.core.models import SplineKnot, Trajectory


def marker_pose(heading_angle: float, position=(0.0, 0.0, 0.0)) -> np.ndarray:
    """
    Marker pose in a y-up device frame whose into-the-tag heading makes
    heading_angle with the device x axis in the horizontal (x, -z) plane.
    """
    heading = np.array([math.cos(heading_angle), 0.0, -math.sin(heading_angle)])
    x_axis = np.array([0.0, 1.0, 0.0])
    y_axis = -heading
    z_axis = np.cross(x_axis, y_axis)
    pose = np.eye(4)
    pose[:3, 0] = x_axis
    pose[:3, 1] = y_axis
    pose[:3, 2] = z_axis
    pose[:3, 3] = position
    return pose


def knot(t, x, y, yaw=0.0, vx=0.0, vy=0.0, vyaw=0.0) -> SplineKnot:
    return SplineKnot(t=t, velocity=(vx, vy, vyaw), position=(x, y, yaw))


def straight(tid, start, end, t0=0, t1=1000, robot="r") -> Trajectory:
    return Trajectory(id=tid, robot_name=robot, knots=(knot(t0, *start), knot(t1, *end)))


@pytest.fixture
def localizer():
    return FrameLocalizer(
        update_rate_hz=1.0,
        marker_height=0.3,
        distance_threshold=0.2,
        angular_threshold_deg=10.0,
        relocalization_threshold=3,
    )


@pytest.fixture
def shared(localizer):
    return SharedState(localizer=localizer)


@pytest.fixture
def client(shared):
    from fleet_overlay.app import app

    set_shared(shared)
    with TestClient(app) as c:
        yield c
    set_shared(None)
