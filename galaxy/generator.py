from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .parameters import GalaxyParameters

__all__ = ["PointBuffer", "generate", "branch_angles", "mix_colors"]


@dataclass
class PointBuffer:
    """Point cloud produced by :func:`generate`.

    ``baseline`` and ``colors`` are written once per generation.  ``live`` is
    overwritten every frame from ``baseline`` by the animator.  All three are
    ``(count, 3)`` float32 arrays ready to be uploaded as vertex attributes.
    """

    baseline: np.ndarray
    live: np.ndarray
    colors: np.ndarray
    radii: np.ndarray

    @property
    def count(self) -> int:
        return int(self.baseline.shape[0])

    def __len__(self) -> int:
        return self.count


def branch_angles(count: int, branches: int) -> np.ndarray:
    """Angle of the arm each index belongs to: ``(i mod branches) / branches * 2pi``."""

    index = np.arange(count)
    return (index % branches) / branches * (2.0 * math.pi)


def mix_colors(inner: np.ndarray, outer: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Per-channel linear interpolation between two RGB colors."""

    inner = np.asarray(inner, dtype=np.float64)
    outer = np.asarray(outer, dtype=np.float64)
    t = np.asarray(t, dtype=np.float64)[:, np.newaxis]
    return inner + (outer - inner) * t


def _jitter(rng: np.random.Generator, count: int, params: GalaxyParameters) -> np.ndarray:
    # u ** power concentrates the offsets near zero for large powers
    magnitude = rng.random((count, 3)) ** params.randomness_power
    sign = np.where(rng.random((count, 3)) < 0.5, 1.0, -1.0)
    return magnitude * sign * params.randomness


def generate(params: GalaxyParameters, rng: Optional[np.random.Generator] = None) -> PointBuffer:
    """Place ``params.count`` points along the spiral arms.

    A fresh random generator is used unless ``rng`` is given, so two calls
    with the same parameters produce different layouts.
    """

    params.validate()
    if rng is None:
        rng = np.random.default_rng()
    count = params.count

    radii = rng.random(count) * params.radius
    angle = branch_angles(count, params.branches) + radii * params.spin
    jitter = _jitter(rng, count, params)

    positions = np.empty((count, 3), dtype=np.float64)
    positions[:, 0] = np.cos(angle) * radii + jitter[:, 0]
    positions[:, 1] = jitter[:, 1]
    positions[:, 2] = np.sin(angle) * radii + jitter[:, 2]

    colors = mix_colors(params.inner_color, params.outer_color, radii / params.radius)

    baseline = positions.astype(np.float32)
    return PointBuffer(
        baseline=baseline,
        live=baseline.copy(),
        colors=colors.astype(np.float32),
        radii=radii,
    )
