from .math import angle_diff, clip, ns_to_ms, wrap_pi

__all__ = ["angle_diff", "clip", "ns_to_ms", "wrap_pi"]
