# fleet_overlay/core/state.py
"""
SharedState: Top-level container for everything the host keeps between
requests.
"""
from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Deque, Dict, List, Optional

from .. import config as C
from .localizer import FrameLocalizer
from .models import LocalizerState, TrackedRobot, Trajectory


@dataclass
class SharedState:
    """
    Two locks, never nested:
      robots_lock guards the robot cache (written by network refresh and
      marker sightings);
      lock guards the localizer session, trajectory batches and
      the outgoing event queue.
    """
    robots: Dict[str, TrackedRobot] = field(default_factory=dict)
    robots_lock: Lock = field(default_factory=Lock)

    localizer: FrameLocalizer = field(default_factory=FrameLocalizer)
    localizer_state: LocalizerState = field(default_factory=LocalizerState)
    level_name: Optional[str] = None

    # trajectory batch waiting for its matching time response
    pending_trajectories: Optional[List[Trajectory]] = None
    pending_conflicts: List[List[int]] = field(default_factory=list)

    trajectories: List[Trajectory] = field(default_factory=list)
    conflicts: List[List[int]] = field(default_factory=list)
    query_time_ms: Optional[int] = None

    events: Deque[Dict[str, Any]] = field(default_factory=lambda: deque(maxlen=C.EVENT_QUEUE_MAX))
    lock: Lock = field(default_factory=Lock)

    def reset(self):
        """Drop the session: robots, alignment and trajectory data."""
        with self.robots_lock:
            self.robots.clear()
        with self.lock:
            self.localizer_state = LocalizerState()
            self.level_name = None
            self.pending_trajectories = None
            self.pending_conflicts = []
            self.trajectories = []
            self.conflicts = []
            self.query_time_ms = None
            self.events.clear()
