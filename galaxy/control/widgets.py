from PyQt5 import QtWidgets, QtCore, QtGui


def mk_info(text: str) -> QtWidgets.QToolButton:
    b = QtWidgets.QToolButton(); b.setText("i"); b.setCursor(QtCore.Qt.PointingHandCursor)
    b.setToolTipDuration(0); b.setToolTip(text); b.setFixedSize(20,20)
    b.setStyleSheet("QToolButton{border:1px solid #7aa7c7;border-radius:10px;font-weight:bold;padding:0;color:#2b6ea8;background:#e6f2fb;}QToolButton:hover{background:#d8ecfa;}")
    return b

def mk_reset(cb) -> QtWidgets.QToolButton:
    b = QtWidgets.QToolButton(); b.setText("↺"); b.setCursor(QtCore.Qt.PointingHandCursor)
    b.setToolTip("Réinitialiser"); b.setFixedSize(22,22)
    b.setStyleSheet("QToolButton{border:1px solid #9aa5b1;border-radius:11px;padding:0;background:#f2f4f7;color:#2b2b2b;font-weight:bold;}QToolButton:hover{background:#e9edf2;}")
    b.clicked.connect(lambda checked=False, _cb=cb: _cb())
    return b

def row(form: QtWidgets.QFormLayout, label: str, widget: QtWidgets.QWidget, tip: str, reset_cb=None):
    h = QtWidgets.QHBoxLayout(); h.setContentsMargins(0,0,0,0); h.setSpacing(6)
    h.addWidget(widget, 1)
    if reset_cb: h.addWidget(mk_reset(reset_cb), 0)
    h.addWidget(mk_info(tip), 0)
    w = QtWidgets.QWidget(); w.setLayout(h)
    lbl = QtWidgets.QLabel(label)
    lbl.setObjectName("FormLabel")
    form.addRow(lbl, w)
    w._form_label = lbl  # type: ignore[attr-defined]
    return w


class ColorButton(QtWidgets.QWidget):
    """Hex line edit paired with a swatch button opening ``QColorDialog``.

    ``colorChanged`` fires once the user validates a color, never while typing.
    """

    colorChanged = QtCore.pyqtSignal(str)

    def __init__(self, color: str, title: str = "Couleur"):
        super().__init__()
        self._title = title
        self.edit = QtWidgets.QLineEdit(color)
        self.edit.setInputMask("\\#HHHHHH")
        self.swatch = QtWidgets.QPushButton()
        self.swatch.setFixedSize(28, 22)
        self.swatch.setCursor(QtCore.Qt.PointingHandCursor)
        lay = QtWidgets.QHBoxLayout(self); lay.setContentsMargins(0,0,0,0); lay.setSpacing(6)
        lay.addWidget(self.edit, 1); lay.addWidget(self.swatch, 0)
        self.swatch.clicked.connect(self.pick_color)
        self.edit.editingFinished.connect(self._on_edit_finished)
        self._refresh_swatch()

    def color(self) -> str:
        return self.edit.text().strip().lower()

    def setColor(self, color: str):
        with QtCore.QSignalBlocker(self.edit):
            self.edit.setText(color)
        self._refresh_swatch()

    def pick_color(self):
        c = QtWidgets.QColorDialog.getColor(QtGui.QColor(self.color() or "#ffffff"), self, self._title)
        if c.isValid():
            self.setColor(c.name())
            self.colorChanged.emit(self.color())

    def _on_edit_finished(self):
        if not QtGui.QColor(self.color()).isValid():
            return
        self._refresh_swatch()
        self.colorChanged.emit(self.color())

    def _refresh_swatch(self):
        color = self.color()
        if QtGui.QColor(color).isValid():
            self.swatch.setStyleSheet(f"QPushButton{{background:{color};border:1px solid #9aa5b1;border-radius:4px;}}")
