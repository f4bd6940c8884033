"""Per-frame drift of the galaxy points.

Every frame recomputes the live positions from the baseline, so the motion is
a pure function of the elapsed time: nothing accumulates between frames and a
frame can be replayed or skipped freely.
"""

from __future__ import annotations

import numpy as np

from .generator import PointBuffer
from .parameters import GalaxyParameters

__all__ = ["PHASE_STEP_XY", "PHASE_STEP_Z", "ROTATION_SPEED", "advance", "drift_offsets", "display_rotation"]

# Per-index phase steps; they keep neighbouring points out of lockstep.
PHASE_STEP_XY = 0.1
PHASE_STEP_Z = 0.2
# Radians per second of the display rotation about the vertical axis.
ROTATION_SPEED = 0.02


def drift_offsets(count: int, elapsed: float, params: GalaxyParameters) -> np.ndarray:
    """Return the ``(count, 3)`` displacement of every point at ``elapsed``.

    The trig terms are taken relative to their value at ``elapsed == 0`` so a
    freshly generated buffer is displayed exactly at its baseline.
    """

    index = np.arange(count, dtype=np.float64)
    base = float(elapsed) * params.animation_speed
    rest_xy = index * PHASE_STEP_XY
    rest_z = index * PHASE_STEP_Z
    phase_xy = base + rest_xy
    phase_z = base + rest_z

    offsets = np.empty((count, 3), dtype=np.float64)
    offsets[:, 0] = np.sin(phase_xy) - np.sin(rest_xy)
    offsets[:, 1] = np.cos(phase_xy) - np.cos(rest_xy)
    offsets[:, 2] = np.sin(phase_z) - np.sin(rest_z)
    offsets *= params.motion_radius
    return offsets


def advance(buffer: PointBuffer, elapsed: float, params: GalaxyParameters) -> None:
    """Overwrite ``buffer.live`` with ``baseline + drift(elapsed)``."""

    offsets = drift_offsets(buffer.count, elapsed, params)
    np.add(buffer.baseline, offsets, out=buffer.live, casting="same_kind")


def display_rotation(elapsed: float) -> float:
    """Angle (radians) of the rigid rotation about Y applied at display time."""

    return float(elapsed) * ROTATION_SPEED
