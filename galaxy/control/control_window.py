# galaxy/control/control_window.py
import copy

from PyQt5 import QtWidgets, QtCore, QtGui

from .config import DEFAULTS
from .galaxy_tab import GalaxyTab
from ..parameters import GalaxyConfigError, GalaxyParameters


class ControlWindow(QtWidgets.QMainWindow):
    def __init__(self, app: QtWidgets.QApplication, screen: QtGui.QScreen, view_win, initial=None):
        super().__init__(None)
        self.setWindowTitle("Galaxy - Contrôle")
        self.view_win = view_win
        self.state = copy.deepcopy(DEFAULTS)
        if isinstance(initial, GalaxyParameters):
            # float colors stay exact until the user edits them
            initial = initial.to_payload(hex_colors=False)
        if initial:
            self.state["galaxy"].update(initial)

        # Barre d’outils persistante
        toolbar = QtWidgets.QToolBar("Main")
        toolbar.setMovable(False)
        toolbar.setFloatable(False)
        toolbar.setIconSize(QtCore.QSize(18, 18))
        self.addToolBar(QtCore.Qt.TopToolBarArea, toolbar)
        style = self.style()

        act_quit = QtWidgets.QAction(
            style.standardIcon(QtWidgets.QStyle.SP_TitleBarCloseButton), "Quitter", self
        )
        act_quit.setShortcut(QtGui.QKeySequence("Ctrl+Q"))
        act_quit.setShortcutContext(QtCore.Qt.ApplicationShortcut)
        act_quit.triggered.connect(app.quit)
        self.addAction(act_quit)
        toolbar.addAction(act_quit)

        toolbar.addSeparator()

        self.act_regenerate = QtWidgets.QAction(
            style.standardIcon(QtWidgets.QStyle.SP_BrowserReload), "Régénérer", self
        )
        self.act_regenerate.setShortcut(QtGui.QKeySequence("F5"))
        self.act_regenerate.setShortcutContext(QtCore.Qt.ApplicationShortcut)
        self.act_regenerate.setStatusTip("Tirer une nouvelle galaxie avec les mêmes paramètres")
        self.act_regenerate.triggered.connect(self.regenerate)
        self.addAction(self.act_regenerate)
        toolbar.addAction(self.act_regenerate)

        self.act_reset = QtWidgets.QAction(
            style.standardIcon(QtWidgets.QStyle.SP_DialogResetButton), "Valeurs par défaut", self
        )
        self.act_reset.setStatusTip("Revenir aux paramètres par défaut")
        self.act_reset.triggered.connect(self.reset_defaults)
        toolbar.addAction(self.act_reset)

        self.tab_galaxy = GalaxyTab()
        widened = self.tab_galaxy.set_defaults(self.state["galaxy"])
        self.tab_galaxy.changed.connect(self.on_delta)

        scroll = QtWidgets.QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.tab_galaxy)
        self.setCentralWidget(scroll)
        self.setStatusBar(QtWidgets.QStatusBar(self))

        self.resize(420, 520)
        geo = screen.availableGeometry()
        self.move(geo.x()+(geo.width()-self.width())//2, geo.y()+(geo.height()-self.height())//2)
        self.show()
        self.push_params()
        self._report_widened(widened)

    def on_delta(self, delta: dict):
        for k, v in delta.items():
            if isinstance(v, dict):
                self.state.setdefault(k, {}).update(v)
            else:
                self.state[k] = v
        self.push_params()

    def push_params(self):
        try:
            regenerated = self.view_win.view.set_params(self.state)
        except GalaxyConfigError as exc:
            self.statusBar().showMessage(f"Paramètres invalides : {exc}")
            return
        engine = self.view_win.view.engine
        if regenerated:
            self.statusBar().showMessage(f"{engine.buffer.count} particules générées", 4000)

    def regenerate(self):
        view = self.view_win.view
        view.regenerate()
        self.statusBar().showMessage(f"{view.engine.buffer.count} particules générées", 4000)

    def reset_defaults(self):
        self.state = copy.deepcopy(DEFAULTS)
        self.tab_galaxy.set_defaults(self.state["galaxy"])
        self.push_params()

    def _report_widened(self, keys):
        if keys:
            self.statusBar().showMessage(
                "Plage du panneau étendue pour : " + ", ".join(keys), 8000
            )
