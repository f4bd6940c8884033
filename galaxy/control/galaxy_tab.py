from PyQt5 import QtWidgets, QtCore
from .widgets import row, ColorButton
from .config import DEFAULTS, LABELS, RANGES, TOOLTIPS
from ..parameters import rgb_to_hex


NUMERIC_KEYS = ["animationSpeed", "motionRadius", "count", "size", "radius", "branches", "spin", "randomness", "randomnessPower"]
COLOR_KEYS = ["innerColor", "outerColor"]


class GalaxyTab(QtWidgets.QWidget):
    """Form exposing every galaxy parameter.

    Edits are only reported once finalized (focus out, Enter, color dialog
    validated) so a regeneration is not triggered on each keystroke.
    """

    changed = QtCore.pyqtSignal(dict)

    def __init__(self):
        super().__init__()
        d = DEFAULTS["galaxy"]
        fl = QtWidgets.QFormLayout(self)
        self.editors = {}

        for key in NUMERIC_KEYS:
            minimum, maximum, step, decimals = RANGES[key]
            if decimals == 0:
                w = QtWidgets.QSpinBox()
                w.setRange(int(minimum), int(maximum))
                w.setSingleStep(int(step))
                w.setValue(int(d[key]))
            else:
                w = QtWidgets.QDoubleSpinBox()
                w.setDecimals(decimals)
                w.setRange(minimum, maximum)
                w.setSingleStep(step)
                w.setValue(float(d[key]))
            w.setKeyboardTracking(False)
            w.editingFinished.connect(self.emit_delta)
            self.editors[key] = w
            row(fl, LABELS[key], w, TOOLTIPS[f"galaxy.{key}"], lambda k=key: self._reset_key(k))

        for key in COLOR_KEYS:
            w = ColorButton(d[key], LABELS[key])
            w.colorChanged.connect(self.emit_delta)
            self.editors[key] = w
            row(fl, LABELS[key], w, TOOLTIPS[f"galaxy.{key}"], lambda k=key: self._reset_key(k))

        # payload reported to the view; spin boxes may round what they display
        self._values = dict(d)
        self._shown = self.collect()

    def collect(self):
        out = {}
        for key, w in self.editors.items():
            out[key] = w.color() if isinstance(w, ColorButton) else w.value()
        return out

    def values(self):
        return dict(self._values)

    def set_defaults(self, cfg):
        """Load ``cfg`` into the editors and return the labels of widened rows.

        Spin box limits are extended to hold any loaded value so nothing is
        clamped behind the user's back.
        """

        cfg = cfg or {}
        d = DEFAULTS["galaxy"]
        widened = []
        for key, w in self.editors.items():
            value = cfg.get(key, d[key])
            self._values[key] = value
            if isinstance(w, ColorButton):
                w.setColor(value if isinstance(value, str) else rgb_to_hex(value))
                continue
            value = int(value) if isinstance(w, QtWidgets.QSpinBox) else float(value)
            minimum, maximum = w.minimum(), w.maximum()
            if value < minimum or value > maximum:
                w.setRange(min(minimum, value), max(maximum, value))
                widened.append(LABELS[key])
            with QtCore.QSignalBlocker(w):
                w.setValue(value)
        self._shown = self.collect()
        return widened

    def _reset_key(self, key):
        d = DEFAULTS["galaxy"]
        w = self.editors[key]
        if isinstance(w, ColorButton):
            w.setColor(d[key])
        else:
            with QtCore.QSignalBlocker(w):
                w.setValue(d[key])
        self._shown[key] = self.collect()[key]
        if self._values[key] != d[key]:
            self._values[key] = d[key]
            self.changed.emit({"galaxy": self.values()})

    def emit_delta(self, *a):
        shown = self.collect()
        # editingFinished also fires on a plain focus change
        edited = [key for key, value in shown.items() if value != self._shown[key]]
        if not edited:
            return
        self._shown = shown
        for key in edited:
            self._values[key] = shown[key]
        self.changed.emit({"galaxy": self.values()})
