from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..core.layout import layout, place_segment
from ..core.models import Pose2D, Trajectory
from ..core.spline import pose_at, reconstruct_visible
from ..models import OverlayItem, OverlayResponse, PoseOut, SegmentOut


def _pose_out(p: Pose2D) -> PoseOut:
    return PoseOut(x=p.x, y=p.y, yaw=p.yaw)


def build_overlay(
    trajectories: Sequence[Trajectory],
    conflicts: Iterable[Sequence[int]],
    query_time_ms: int,
    highlighted: Optional[str] = None,
) -> OverlayResponse:
    """
    One item per drawable trajectory, in id order: interpolated pose at
    query time, conflict flag, height level and the segments still ahead.
    """
    by_id = {t.id: t for t in trajectories}
    items: List[OverlayItem] = []
    for a in layout(trajectories, conflicts):
        traj = by_id[a.trajectory_id]
        segments = []
        for seg in reconstruct_visible(traj, query_time_ms):
            placed = place_segment(seg, a.height_level)
            segments.append(SegmentOut(
                start=_pose_out(seg.start),
                end=_pose_out(seg.end),
                partial=seg.partial,
                midpoint=list(placed.midpoint),
                length=placed.length,
                heading=placed.heading,
                z=placed.z,
                width=placed.width,
            ))
        pose = pose_at(traj, query_time_ms)
        items.append(OverlayItem(
            trajectory_id=a.trajectory_id,
            robot_name=traj.robot_name,
            pose=_pose_out(pose) if pose is not None else None,
            is_conflicting=a.is_conflicting,
            height_level=a.height_level,
            color_class="conflict" if a.is_conflicting else "clear",
            highlighted=highlighted is not None and traj.robot_name == highlighted,
            segments=segments,
        ))
    return OverlayResponse(t=query_time_ms, items=items)


def get_overlay_service(shared, highlighted: Optional[str] = None) -> Optional[OverlayResponse]:
    """Overlay for the latest paired batch, None if there is none yet."""
    with shared.lock:
        trajectories = list(shared.trajectories)
        conflicts = list(shared.conflicts)
        t = shared.query_time_ms
    if t is None:
        return None
    return build_overlay(trajectories, conflicts, t, highlighted)


def is_localized(shared) -> bool:
    with shared.lock:
        return shared.localizer_state.localized
