# fleet_overlay/core/layout.py
"""
Conflict flags and height-level stacking for a trajectory batch.

Levels are assigned greedily in ascending id order: a trajectory takes the
lowest level where it crosses none of the trajectories already placed
there. Levels are rebuilt from scratch on every call and mean nothing
across batches.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .. import config as C
from .geometry import polylines_intersect
from .models import LayoutAssignment, PathSegment, SegmentPlacement, Trajectory

logger = logging.getLogger(__name__)


def conflicting_ids(conflicts: Iterable[Sequence[int]], known_ids: Set[int]) -> Set[int]:
    """Ids named in any conflict pair; ids missing from the batch are ignored."""
    out: Set[int] = set()
    for pair in conflicts:
        for tid in pair:
            if tid in known_ids:
                out.add(tid)
            else:
                logger.warning("[layout] conflict references unknown trajectory %s", tid)
    return out


def trajectories_intersect(a: Trajectory, b: Trajectory) -> bool:
    return polylines_intersect(a.points(), b.points())


def layout(
    trajectories: Iterable[Trajectory],
    conflicts: Iterable[Sequence[int]] = (),
    max_level: Optional[int] = None,
) -> List[LayoutAssignment]:
    drawable = sorted((t for t in trajectories if t.drawable), key=lambda t: t.id)
    in_conflict = conflicting_ids(conflicts, {t.id for t in drawable})

    # n trajectories can never need more than n levels
    cap = max(len(drawable) - 1, 0)
    if max_level is not None:
        cap = min(cap, max(max_level, 0))
    levels: Dict[int, List[Trajectory]] = {}
    out: List[LayoutAssignment] = []

    for traj in drawable:
        level = 0
        while any(trajectories_intersect(traj, placed) for placed in levels.get(level, [])):
            if level >= cap:
                logger.warning("[layout] trajectory %s still crosses others at top level %d", traj.id, level)
                break
            level += 1
        levels.setdefault(level, []).append(traj)
        out.append(LayoutAssignment(
            trajectory_id=traj.id,
            height_level=level,
            is_conflicting=traj.id in in_conflict,
        ))
    return out


def level_height(level: int, z_offset: float = C.TRAJ_Z_OFFSET, step: float = C.TRAJ_HEIGHT_LEVEL_STEP) -> float:
    return z_offset + level * step


def place_segment(segment: PathSegment, level: int) -> SegmentPlacement:
    dx = segment.end.x - segment.start.x
    dy = segment.end.y - segment.start.y
    return SegmentPlacement(
        midpoint=(segment.start.x + dx / 2, segment.start.y + dy / 2),
        length=math.hypot(dx, dy),
        heading=math.atan2(dy, dx),
        z=level_height(level),
        width=C.TRAJ_PATH_SIZE,
    )
