# fleet_overlay/models/__init__.py
from .robot import RobotState, TrackedRobotOut, RobotListResponse, MarkerObservationIn, MarkerBatch
from .localization import LocalizationResponse, AlignmentResponse
from .trajectory import (
    TrajectoryParam, TrajectoryRequest, TimeRequest,
    SplineKnotIn, RobotTrajectory, TrajectoryResponse, TimeResponse,
)
from .overlay import PoseOut, SegmentOut, OverlayItem, OverlayResponse
from .status import StatusResponse
