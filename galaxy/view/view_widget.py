"""Qt widgets displaying the animated galaxy.

The widget owns a :class:`~galaxy.engine.GalaxyEngine`.  A ``QTimer`` schedules
a repaint roughly every 16 ms; each paint ticks the engine, rasterises the live
buffer with :func:`~galaxy.view.renderer.render_points` and blits the frame.

Only a small API is used by the rest of the application:

* ``ControlWindow.push_params`` calls :meth:`set_params` with the whole state.
* ``ControlWindow.regenerate`` calls :meth:`regenerate`.
* ``ViewWindow`` toggles the background with :meth:`set_transparent`.

This module exposes :func:`GalaxyViewWidget`, a factory returning either an
OpenGL-backed widget or a raster ``QWidget`` with the same interface.
"""

from __future__ import annotations

import os
import sys
from typing import Mapping, Optional

import numpy as np
from PyQt5 import QtCore, QtGui, QtWidgets

from ..engine import GalaxyEngine
from ..parameters import GalaxyParameters
from .renderer import Camera, render_points

__all__ = ["GalaxyViewWidget"]


def _coerce_int(value: object, default: int) -> int:
    if value is None:
        return default
    try:
        return int(float(str(value)))
    except (TypeError, ValueError):
        return default


class _ViewWidgetBase:
    """Common behaviour shared by both the OpenGL and raster backends."""

    def _init_view_widget(self, parameters: Optional[GalaxyParameters] = None) -> None:
        self.setAttribute(QtCore.Qt.WA_OpaquePaintEvent, False)
        self.setAutoFillBackground(False)
        self.engine = GalaxyEngine(parameters)
        self.camera = Camera()
        self._transparent = False
        self._frame: Optional[np.ndarray] = None
        self._timer = QtCore.QTimer(self)
        self._frame_interval_ms = 16
        self._timer.timeout.connect(self.update)
        self._timer.start(self._frame_interval_ms)

    def _apply_frame_interval(self, interval_ms: int) -> None:
        """Update the refresh interval used by the render timer."""

        interval_ms = max(int(interval_ms), 0)
        if interval_ms == self._frame_interval_ms and self._timer.isActive() == (
            interval_ms > 0
        ):
            return
        self._frame_interval_ms = interval_ms
        if interval_ms <= 0:
            if self._timer.isActive():
                self._timer.stop()
            return
        if self._timer.isActive():
            self._timer.setInterval(interval_ms)
        else:
            self._timer.start(interval_ms)

    # ------------------------------------------------------------------ API
    def set_params(self, payload: Mapping[str, object]) -> bool:
        """Forward a control-window state to the engine.

        Returns ``True`` when the galaxy was regenerated.  Configuration
        errors propagate to the caller and leave the current galaxy untouched.
        """

        # system settings do not depend on the galaxy section being valid
        system = payload.get("system")
        if isinstance(system, Mapping):
            self._apply_frame_interval(_coerce_int(system.get("frameIntervalMs"), 16))
            transparent = system.get("transparent")
            if transparent is not None and bool(transparent) != self._transparent:
                self.set_transparent(bool(transparent))
        self.update()
        galaxy = payload.get("galaxy")
        if isinstance(galaxy, Mapping):
            return self.engine.set_params(galaxy)
        return False

    def regenerate(self) -> None:
        self.engine.regenerate()
        self.update()

    def set_transparent(self, enabled: bool) -> None:  # pragma: no cover - simple setter
        self._transparent = bool(enabled)
        self.setAttribute(QtCore.Qt.WA_NoSystemBackground, enabled)
        self.setAttribute(QtCore.Qt.WA_TranslucentBackground, enabled)
        self.update()

    def reset_visual_state(self) -> None:
        """Restart the animation clock without touching the points."""

        self.engine.reset_clock()
        self.update()

    # ------------------------------------------------------------------ Rendering helpers
    def _render_with_painter(self, painter: QtGui.QPainter) -> None:
        width = max(1, self.width())
        height = max(1, self.height())
        if self._transparent:
            painter.setCompositionMode(QtGui.QPainter.CompositionMode_Source)
            painter.fillRect(self.rect(), QtCore.Qt.transparent)
            painter.setCompositionMode(QtGui.QPainter.CompositionMode_SourceOver)
        else:
            painter.fillRect(self.rect(), QtGui.QColor("black"))

        self.engine.tick()
        buffer = self.engine.buffer
        frame = render_points(
            buffer.live,
            buffer.colors,
            width=width,
            height=height,
            rotation=self.engine.rotation,
            size=self.engine.parameters.size,
            camera=self.camera,
            with_alpha=self._transparent,
        )
        # QImage does not copy: keep the array alive until the next paint
        self._frame = np.ascontiguousarray(frame)
        if self._transparent:
            image = QtGui.QImage(
                self._frame.data, width, height, width * 4, QtGui.QImage.Format_RGBA8888_Premultiplied
            )
        else:
            image = QtGui.QImage(self._frame.data, width, height, width * 3, QtGui.QImage.Format_RGB888)
        painter.setCompositionMode(QtGui.QPainter.CompositionMode_Plus)
        painter.drawImage(0, 0, image)


class _OpenGLViewWidget(QtWidgets.QOpenGLWidget, _ViewWidgetBase):
    """OpenGL-backed renderer when the system can create a GL context."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, parameters: Optional[GalaxyParameters] = None) -> None:
        QtWidgets.QOpenGLWidget.__init__(self, parent)
        self._init_view_widget(parameters)

    def resizeGL(self, width: int, height: int) -> None:  # pragma: no cover - requires GUI context
        # The renderer reads the widget size on every frame
        del width, height

    def paintGL(self) -> None:  # pragma: no cover - requires GUI context
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()


class _RasterViewWidget(QtWidgets.QWidget, _ViewWidgetBase):
    """Fallback renderer using the traditional raster ``QWidget`` backend."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, parameters: Optional[GalaxyParameters] = None) -> None:
        QtWidgets.QWidget.__init__(self, parent)
        self._init_view_widget(parameters)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        del event
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.update()


def _should_use_opengl(force_backend: Optional[str]) -> bool:
    if force_backend == "raster":
        return False
    if force_backend == "opengl":
        return True

    env_backend = os.environ.get("GALAXY_FORCE_BACKEND", "").strip().lower()
    if env_backend == "raster":
        return False
    if env_backend == "opengl":
        return True
    return hasattr(QtWidgets, "QOpenGLWidget")


def GalaxyViewWidget(
    parent: Optional[QtWidgets.QWidget] = None,
    *,
    force_backend: Optional[str] = None,
    parameters: Optional[GalaxyParameters] = None,
) -> QtWidgets.QWidget:
    """Factory returning the best available renderer widget.

    Parameters
    ----------
    parent:
        Parent widget used by Qt for ownership.
    force_backend:
        ``"opengl"`` forces the OpenGL widget while ``"raster"`` selects the
        pure QWidget implementation.  ``GALAXY_FORCE_BACKEND`` is consulted
        when omitted.
    parameters:
        Initial galaxy; defaults to :class:`GalaxyParameters` defaults.
    """

    if _should_use_opengl(force_backend):
        try:
            widget = _OpenGLViewWidget(parent, parameters)
            setattr(widget, "backend_name", "opengl")
            return widget
        except Exception as exc:
            print(
                f"[Galaxy][WARN] Unable to initialise OpenGL backend ({exc!r}). Using raster widget instead.",
                file=sys.stderr,
            )
    widget = _RasterViewWidget(parent, parameters)
    setattr(widget, "backend_name", "raster")
    return widget
