"""Software point renderer used by the Qt view.

Points are projected through a fixed perspective camera and accumulated
additively into an RGB frame, which mirrors what the historical WebGL material
did (additive blending, vertex colors, size attenuation, no depth writes).
The module only depends on numpy so frames can be produced headlessly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

__all__ = ["Camera", "Projection", "rotate_y", "project", "render_points"]

Vec3 = Tuple[float, float, float]

# Largest half-width (px) of the square drawn for a single point.
MAX_SPLAT_RADIUS = 4


@dataclass(frozen=True)
class Camera:
    position: Vec3 = (5.0, 3.0, 3.5)
    target: Vec3 = (0.0, 0.0, 0.0)
    fov: float = 75.0
    near: float = 0.1
    far: float = 100.0

    def basis(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return the (right, up, forward) unit vectors of the camera."""

        eye = np.asarray(self.position, dtype=np.float64)
        forward = np.asarray(self.target, dtype=np.float64) - eye
        norm = np.linalg.norm(forward)
        if norm == 0:
            raise ValueError("camera position and target coincide")
        forward /= norm
        right = np.cross(forward, (0.0, 1.0, 0.0))
        if np.linalg.norm(right) < 1e-9:
            right = np.array([1.0, 0.0, 0.0])
        right /= np.linalg.norm(right)
        up = np.cross(right, forward)
        return right, up, forward

    def focal_length(self, height: int) -> float:
        return (height / 2.0) / math.tan(math.radians(self.fov) / 2.0)


@dataclass
class Projection:
    sx: np.ndarray
    sy: np.ndarray
    depth: np.ndarray
    visible: np.ndarray


def rotate_y(positions: np.ndarray, angle: float) -> np.ndarray:
    """Rotate ``(n, 3)`` positions about the vertical axis by ``angle`` radians."""

    c = math.cos(angle)
    s = math.sin(angle)
    out = np.empty(positions.shape, dtype=np.float64)
    x = positions[:, 0]
    z = positions[:, 2]
    out[:, 0] = x * c + z * s
    out[:, 1] = positions[:, 1]
    out[:, 2] = -x * s + z * c
    return out


def project(positions: np.ndarray, camera: Camera, width: int, height: int) -> Projection:
    right, up, forward = camera.basis()
    rel = np.asarray(positions, dtype=np.float64) - np.asarray(camera.position, dtype=np.float64)
    xc = rel @ right
    yc = rel @ up
    depth = rel @ forward
    visible = (depth > camera.near) & (depth < camera.far)
    safe = np.where(visible, depth, 1.0)
    focal = camera.focal_length(height)
    sx = width / 2.0 + xc * focal / safe
    sy = height / 2.0 - yc * focal / safe
    visible &= (sx >= 0) & (sx < width) & (sy >= 0) & (sy < height)
    return Projection(sx=sx, sy=sy, depth=depth, visible=visible)


def render_points(
    positions: np.ndarray,
    colors: np.ndarray,
    *,
    width: int,
    height: int,
    rotation: float = 0.0,
    size: float = 0.01,
    camera: Camera = Camera(),
    with_alpha: bool = False,
) -> np.ndarray:
    """Return a ``(height, width, 3)`` uint8 frame (``4`` channels with alpha)."""

    channels = 4 if with_alpha else 3
    if width <= 0 or height <= 0:
        return np.zeros((max(0, height), max(0, width), channels), dtype=np.uint8)

    world = rotate_y(positions, rotation) if rotation else np.asarray(positions, dtype=np.float64)
    proj = project(world, camera, width, height)
    accum = np.zeros((height * width, 3), dtype=np.float64)

    if np.any(proj.visible):
        sx = proj.sx[proj.visible]
        sy = proj.sy[proj.visible]
        depth = proj.depth[proj.visible]
        rgb = np.asarray(colors, dtype=np.float64)[proj.visible]

        # point diameter in px, attenuated with depth
        diameter = size * (height * 0.5) / depth
        half = np.clip(np.floor(diameter / 2.0), 0, MAX_SPLAT_RADIUS).astype(np.int64)
        side = 2 * half + 1
        # spread the covered area over the drawn square, capped at full intensity
        weight = np.minimum(1.0, diameter * diameter / (side * side))

        ix = sx.astype(np.int64)
        iy = sy.astype(np.int64)
        flat_parts = []
        rgb_parts = []
        for radius in np.unique(half):
            radius = int(radius)
            group = half == radius
            gx = ix[group]
            gy = iy[group]
            contribution = rgb[group] * weight[group][:, np.newaxis]
            for dy in range(-radius, radius + 1):
                for dx in range(-radius, radius + 1):
                    px = gx + dx
                    py = gy + dy
                    inside = (px >= 0) & (px < width) & (py >= 0) & (py < height)
                    flat_parts.append(py[inside] * width + px[inside])
                    rgb_parts.append(contribution[inside])
        flat = np.concatenate(flat_parts)
        splats = np.concatenate(rgb_parts)
        for channel in range(3):
            accum[:, channel] = np.bincount(flat, weights=splats[:, channel], minlength=height * width)

    frame = np.clip(accum * 255.0, 0.0, 255.0).astype(np.uint8).reshape(height, width, 3)
    if not with_alpha:
        return frame
    alpha = frame.max(axis=2, keepdims=True)
    return np.concatenate([frame, alpha], axis=2)
