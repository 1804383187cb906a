from __future__ import annotations

from ..models import StatusResponse
from .robot_service import snapshot_robots


def get_status_service(shared) -> StatusResponse:
    robots = snapshot_robots(shared)
    with shared.lock:
        state = shared.localizer_state
        out = StatusResponse(
            localized=state.localized,
            level_name=shared.level_name,
            unaligned_counter=state.unaligned_counter,
            robot_count=len(robots),
            tracked_count=sum(1 for r in robots.values() if r.is_tracked),
            trajectory_count=len(shared.trajectories),
            awaiting_time=shared.pending_trajectories is not None,
            query_time_ms=shared.query_time_ms,
        )
    return out
