# -*- coding: utf-8 -*-
import argparse
import io
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, NoReturn, Optional, Sequence


def _handle_qt_import_error(exc: ImportError) -> NoReturn:
    """Exit with a helpful message when the Qt bindings cannot be imported."""

    details = str(exc)
    message_lines = [
        "Impossible de lancer Galaxy : l'import de PyQt5 a échoué.",
        "Vérifiez que PyQt5 est installé (pip install PyQt5) et que les bibliothèques OpenGL requises sont disponibles.",
    ]
    if "libGL.so.1" in details:
        message_lines.append(
            "Indice : la bibliothèque système libGL.so.1 est manquante. Installez les paquets Mesa/OpenGL appropriés."
        )
    message_lines.append(f"Erreur d'origine : {details}")
    raise SystemExit("\n".join(message_lines)) from exc


try:
    from PyQt5 import QtCore, QtWidgets, QtGui
    from PyQt5.QtCore import Qt
    from PyQt5.QtGui import QSurfaceFormat
except ImportError as exc:  # pragma: no cover - dépendances environnementales
    _handle_qt_import_error(exc)

from .control.control_window import ControlWindow
from .parameters import GalaxyConfigError, GalaxyParameters
from .view import GalaxyViewWidget

DEBUG_MARKER = "[Galaxy][DEBUG]"


class _DebugSilencer(io.TextIOBase):
    """Stream wrapper filtering the verbose engine diagnostics."""

    def __init__(self, stream: io.TextIOBase, marker: str) -> None:
        super().__init__()
        self._stream = stream
        self._marker = marker
        self._buffer: str = ""

    def write(self, text: str) -> int:  # type: ignore[override]
        self._buffer += text
        while "\n" in self._buffer:
            line, self._buffer = self._buffer.split("\n", 1)
            self._emit(line + "\n")
        return len(text)

    def flush(self) -> None:  # type: ignore[override]
        if self._buffer:
            self._emit(self._buffer)
            self._buffer = ""
        self._stream.flush()

    def _emit(self, chunk: str) -> None:
        if self._marker not in chunk:
            self._stream.write(chunk)

    def __getattr__(self, name):
        return getattr(self._stream, name)


def _install_debug_silencer(marker: str = DEBUG_MARKER) -> None:
    if marker and not isinstance(sys.stdout, _DebugSilencer):
        sys.stdout = _DebugSilencer(sys.stdout, marker)
    if marker and not isinstance(sys.stderr, _DebugSilencer):
        sys.stderr = _DebugSilencer(sys.stderr, marker)


def _debug_enabled(flag: bool) -> bool:
    if flag:
        return True
    return os.environ.get("GALAXY_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")


def load_params(path: Optional[str], count: Optional[int] = None) -> GalaxyParameters:
    """Read the optional JSON parameter file and apply command line overrides.

    Raises :class:`GalaxyConfigError` for unreadable, malformed or invalid
    files so the caller can report a single kind of failure.
    """

    payload: Dict[str, Any] = {}
    if path:
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as exc:
            raise GalaxyConfigError("params", f"cannot read {path}: {exc.strerror or exc}") from exc
        except json.JSONDecodeError as exc:
            raise GalaxyConfigError("params", f"{path} is not valid JSON ({exc.msg}, line {exc.lineno})") from exc
        if isinstance(raw, dict) and isinstance(raw.get("galaxy"), dict):
            raw = raw["galaxy"]
        if not isinstance(raw, dict):
            raise GalaxyConfigError("params", f"{path} must contain a JSON object")
        payload.update(raw)
    if count is not None:
        payload["count"] = count
    return GalaxyParameters.from_payload(payload)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="galaxy", description="Galaxie spirale animée en nuage de points.")
    parser.add_argument("--params", metavar="PATH", help="fichier JSON de paramètres (clés camelCase)")
    parser.add_argument("--backend", choices=("opengl", "raster"), default=None, help="force le moteur de rendu")
    parser.add_argument("--count", type=int, default=None, metavar="N", help="nombre de particules")
    parser.add_argument("--debug", action="store_true", help="affiche les diagnostics [Galaxy][DEBUG]")
    return parser


class ViewWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        screen: QtGui.QScreen,
        *,
        force_backend: Optional[str] = None,
        parameters: Optional[GalaxyParameters] = None,
    ):
        super().__init__(None)
        self.setWindowTitle("Galaxy")
        self._target_screen = screen
        self._external_layout = False  # when True, don't auto-center/resize on show
        self.view = GalaxyViewWidget(self, force_backend=force_backend, parameters=parameters)

        w = QtWidgets.QWidget()
        w.setAttribute(Qt.WA_NoSystemBackground, True)
        w.setAutoFillBackground(False)
        lay = QtWidgets.QVBoxLayout(w)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.view)
        self.setCentralWidget(w)

        self._apply_screen_geometry(screen)
        QtWidgets.QShortcut(Qt.Key_Escape, self, activated=self.close)
        self._transparent: Optional[bool] = None

    def _apply_screen_geometry(self, screen: QtGui.QScreen):
        if window_handle := self.windowHandle():
            window_handle.setScreen(screen)
        geometry = screen.geometry()
        width = int(geometry.width() * 0.8)
        height = int(geometry.height() * 0.8)
        left = geometry.left() + (geometry.width() - width) // 2
        top = geometry.top() + (geometry.height() - height) // 2
        self.setGeometry(left, top, width, height)

    def showEvent(self, event: QtGui.QShowEvent):
        if not self._external_layout:
            self._apply_screen_geometry(self._target_screen)
        super().showEvent(event)

    def set_external_layout(self, enabled: bool) -> None:
        self._external_layout = bool(enabled)

    def set_transparent(self, enabled: bool):
        enabled = bool(enabled)
        if self._transparent == enabled:
            return
        self._transparent = enabled
        bg_style = "background: transparent;" if enabled else ""
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setAttribute(Qt.WA_NoSystemBackground, enabled)
        self.setAttribute(Qt.WA_TranslucentBackground, enabled)
        self.setStyleSheet(bg_style)
        central = self.centralWidget()
        if central is not None:
            central.setAutoFillBackground(not enabled)
            central.setAttribute(Qt.WA_TranslucentBackground, enabled)
            central.setStyleSheet(bg_style)
        self.view.set_transparent(enabled)
        self.update()

    def reset_visual_state(self) -> None:
        self.view.reset_visual_state()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the application and return the exit code."""

    args = build_parser().parse_args(argv)
    if not _debug_enabled(args.debug):
        _install_debug_silencer()

    try:
        parameters = load_params(args.params, args.count)
    except GalaxyConfigError as exc:
        raise SystemExit(f"Paramètres invalides : {exc}") from exc

    fmt = QSurfaceFormat()
    fmt.setAlphaBufferSize(8)
    QSurfaceFormat.setDefaultFormat(fmt)

    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_EnableHighDpiScaling, True)
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_UseHighDpiPixmaps, True)
    app = QtWidgets.QApplication(sys.argv[:1])
    screens = QtGui.QGuiApplication.screens()
    primary = QtGui.QGuiApplication.primaryScreen()
    second = screens[1] if len(screens) > 1 else primary

    view_win = ViewWindow(second, force_backend=args.backend, parameters=parameters)
    view_win.set_external_layout(True)
    control_win = ControlWindow(app, second, view_win, initial=parameters)

    # View on the left half, controls on the right half
    geo = second.availableGeometry()
    half_w = max(200, geo.width() // 2)
    full_h = max(200, geo.height())
    view_win.setGeometry(geo.left(), geo.top(), half_w, full_h)
    right_x = geo.left() + half_w
    control_win.resize(geo.width() - half_w, full_h)
    control_win.move(right_x, geo.top())

    view_win.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
