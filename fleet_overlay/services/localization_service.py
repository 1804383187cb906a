from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from ..core.geometry import pose_from_quat
from ..core.localizer import select_reference_robot
from ..core.models import AlignmentUpdated, MarkerObservation, WorldOriginSet
from ..models import AlignmentResponse, LocalizationResponse, MarkerBatch, MarkerObservationIn
from .robot_service import record_sightings_and_snapshot

logger = logging.getLogger(__name__)


def marker_to_observation(m: MarkerObservationIn) -> MarkerObservation:
    if m.matrix is not None:
        return MarkerObservation(pose=m.matrix, tracked=m.tracked)
    if m.position is not None and m.orientation is not None:
        if len(m.position) != 3 or len(m.orientation) != 4:
            raise ValueError(f"marker {m.name!r} needs a 3-vector position and an (x, y, z, w) quaternion")
        return MarkerObservation(pose=pose_from_quat(m.position, m.orientation), tracked=m.tracked)
    raise ValueError(f"marker {m.name!r} has neither matrix nor position/orientation")


def event_to_message(event) -> Dict[str, Any]:
    if isinstance(event, WorldOriginSet):
        return {
            "type": "world_origin_set",
            "level_name": event.level_name,
            "robot_name": event.robot_name,
            "matrix": event.transform.as_list(),
            "origin_in_local": event.transform.origin_in_local().tolist(),
        }
    return {
        "type": "alignment_updated",
        "robot_name": event.robot_name,
        "position_error": event.position_error,
        "rotation_error": event.rotation_error,
        "matrix": event.transform.as_list(),
        "origin_in_local": event.transform.origin_in_local().tolist(),
    }


def dispatch_event(shared, event) -> None:
    """
    Hand a localizer event to its consumers. Caller holds shared.lock.
    The level name drives which map the trajectory request asks for.
    """
    if isinstance(event, WorldOriginSet):
        shared.level_name = event.level_name
    shared.events.append(event_to_message(event))


def localize_service(shared, batch: MarkerBatch, now: Optional[float] = None) -> LocalizationResponse:
    """
    Feed one frame's marker sightings to the localizer:
    record sightings -> pick the reference robot -> tick -> dispatch.
    batch.t only stamps last_seen; the update rate runs on the host's
    monotonic clock unless `now` is given.
    """
    t = batch.t if batch.t is not None else time.time()
    now = time.monotonic() if now is None else now

    observations = {m.name: marker_to_observation(m) for m in batch.observations}
    robots = record_sightings_and_snapshot(
        shared, [(name, obs.tracked) for name, obs in observations.items()], t
    )

    robot = select_reference_robot(r for name, r in robots.items() if name in observations)

    with shared.lock:
        state = shared.localizer_state
        if robot is None:
            logger.info("[localizer] no tracked, stationary robot in view")
            return LocalizationResponse(
                localized=state.localized,
                level_name=shared.level_name,
                unaligned_counter=state.unaligned_counter,
            )

        event = shared.localizer.tick(state, observations[robot.name], robot, now)
        if event is not None:
            dispatch_event(shared, event)
        return LocalizationResponse(
            localized=state.localized,
            event=_event_name(event),
            robot_name=robot.name,
            level_name=shared.level_name,
            unaligned_counter=state.unaligned_counter,
        )


def _event_name(event) -> Optional[str]:
    if isinstance(event, WorldOriginSet):
        return "world_origin_set"
    if isinstance(event, AlignmentUpdated):
        return "alignment_updated"
    return None


def get_alignment_service(shared) -> Optional[AlignmentResponse]:
    with shared.lock:
        state = shared.localizer_state
        alignment = state.alignment
        counter = state.unaligned_counter
        level = shared.level_name
    if alignment is None:
        return None
    return AlignmentResponse(
        matrix=alignment.as_list(),
        origin_in_local=alignment.origin_in_local().tolist(),
        level_name=level,
        unaligned_counter=counter,
    )
