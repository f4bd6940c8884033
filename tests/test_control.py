import os
from types import SimpleNamespace

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PyQt5.QtWidgets")

from galaxy.control.control_window import ControlWindow  # noqa: E402
from galaxy.control.galaxy_tab import GalaxyTab  # noqa: E402
from galaxy.parameters import GalaxyConfigError, GalaxyParameters  # noqa: E402
from galaxy.view import GalaxyViewWidget  # noqa: E402


@pytest.fixture(scope="module")
def app():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


def _capture(tab):
    emitted = []
    tab.changed.connect(emitted.append)
    return emitted


def test_loaded_values_outside_panel_limits_are_kept(app):
    tab = GalaxyTab()
    widened = tab.set_defaults(GalaxyParameters(count=50, branches=1).to_payload())
    assert len(widened) == 2
    assert tab.editors["count"].value() == 50
    assert tab.editors["branches"].value() == 1

    emitted = _capture(tab)
    tab.editors["spin"].setValue(2.5)
    tab.emit_delta()
    galaxy = emitted[-1]["galaxy"]
    assert galaxy["count"] == 50
    assert galaxy["branches"] == 1
    assert galaxy["spin"] == 2.5


def test_unedited_values_are_not_rounded(app):
    tab = GalaxyTab()
    tab.set_defaults({"spin": 1.23456, "innerColor": [0.5, 0.5, 0.5]})
    emitted = _capture(tab)
    tab.editors["radius"].setValue(7.0)
    tab.emit_delta()
    galaxy = emitted[-1]["galaxy"]
    assert galaxy["spin"] == 1.23456
    assert galaxy["innerColor"] == [0.5, 0.5, 0.5]
    assert galaxy["radius"] == 7.0


def test_focus_change_without_edit_emits_nothing(app):
    tab = GalaxyTab()
    emitted = _capture(tab)
    tab.emit_delta()
    assert emitted == []


def test_reset_key_restores_default(app):
    tab = GalaxyTab()
    tab.set_defaults({"branches": 9})
    emitted = _capture(tab)
    tab._reset_key("branches")
    assert emitted[-1]["galaxy"]["branches"] == 3
    assert tab.editors["branches"].value() == 3


def test_startup_parameters_reach_the_view_unchanged(app):
    params = GalaxyParameters(count=50, branches=1, inner_color=(0.5, 0.5, 0.5))
    view = GalaxyViewWidget(force_backend="raster", parameters=params)
    window = ControlWindow(app, app.primaryScreen(), SimpleNamespace(view=view), initial=params)
    try:
        assert view.engine.generation == 1
        assert view.engine.parameters == params
        assert "étendue" in window.statusBar().currentMessage()
    finally:
        window.close()


def test_system_settings_survive_an_invalid_galaxy(app):
    view = GalaxyViewWidget(force_backend="raster", parameters=GalaxyParameters(count=100))
    buffer = view.engine.buffer
    with pytest.raises(GalaxyConfigError):
        view.set_params({"galaxy": {"count": 0}, "system": {"frameIntervalMs": 40}})
    assert view._frame_interval_ms == 40
    assert view.engine.buffer is buffer
