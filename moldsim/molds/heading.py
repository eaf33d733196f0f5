"""Angle helpers shared by the steering rules.  All angles are in degrees."""

from __future__ import annotations

import math


def normalize_heading(angle: float) -> float:
    """Wrap ``angle`` into ``[0, 360)``."""
    wrapped = angle % 360.0
    # A tiny negative input can round up to exactly 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def angle_difference(target: float, current: float) -> float:
    """Shortest signed turn from ``current`` to ``target``, in ``[-180, 180)``."""
    diff = (target - current + 180.0) % 360.0 - 180.0
    return -180.0 if diff >= 180.0 else diff


def step_vector(heading: float, distance: float) -> tuple[float, float]:
    """Return the ``(dx, dy)`` offset of travelling ``distance`` along ``heading``."""
    rad = math.radians(heading)
    return distance * math.cos(rad), distance * math.sin(rad)
