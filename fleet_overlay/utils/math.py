# fleet_overlay/utils/math.py
"""
Common mathematical utility functions.
"""
import math


def clip(v: float, lo: float, hi: float) -> float:
    """Clip value v to range [lo, hi]."""
    return lo if v < lo else hi if v > hi else v


def wrap_pi(a: float) -> float:
    """Wrap angle to (-pi, pi]."""
    if not math.isfinite(a):
        raise ValueError(f"cannot wrap non-finite angle {a!r}")
    a = math.remainder(a, 2 * math.pi)
    return math.pi if a <= -math.pi else a


def angle_diff(a: float, b: float) -> float:
    """Shortest signed angle taking b onto a."""
    return wrap_pi(a - b)


def ns_to_ms(ns: int) -> int:
    """Server nanoseconds -> integer milliseconds used as query time."""
    return int(round(ns / 1e6))
