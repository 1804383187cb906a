from .layout import layout, place_segment, trajectories_intersect
from .localizer import FrameLocalizer, compute_alignment, select_reference_robot
from .spline import coefficients_for, evaluate, reconstruct_visible
from .state import SharedState

__all__ = [
    "FrameLocalizer",
    "SharedState",
    "coefficients_for",
    "compute_alignment",
    "evaluate",
    "layout",
    "place_segment",
    "reconstruct_visible",
    "select_reference_robot",
    "trajectories_intersect",
]
