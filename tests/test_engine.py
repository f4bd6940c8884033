import numpy as np
import pytest

from galaxy.animator import drift_offsets
from galaxy.engine import GalaxyEngine
from galaxy.parameters import GalaxyConfigError, GalaxyParameters


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(clock):
    params = GalaxyParameters(count=800, motion_radius=0.2)
    return GalaxyEngine(params, rng=np.random.default_rng(3), clock=clock)


def test_initial_state(engine):
    assert engine.generation == 1
    assert engine.buffer.count == 800
    assert engine.elapsed == 0.0
    assert engine.rotation == 0.0
    np.testing.assert_array_equal(engine.buffer.live, engine.buffer.baseline)


def test_tick_follows_the_clock(engine, clock):
    clock.now += 2.5
    assert engine.tick() == pytest.approx(2.5)
    assert engine.last_elapsed == pytest.approx(2.5)
    assert engine.rotation == pytest.approx(0.05)
    expected = engine.buffer.baseline + drift_offsets(800, 2.5, engine.parameters)
    np.testing.assert_allclose(engine.buffer.live, expected, rtol=0, atol=1e-6)


def test_explicit_tick_time(engine):
    engine.tick(elapsed=4.0)
    first = engine.buffer.live.copy()
    engine.tick(elapsed=9.0)
    engine.tick(elapsed=4.0)
    np.testing.assert_array_equal(engine.buffer.live, first)


def test_display_fields_do_not_regenerate(engine):
    buffer = engine.buffer
    assert engine.set_params({"size": 0.05, "animationSpeed": 1.2, "motionRadius": 0.0}) is False
    assert engine.buffer is buffer
    assert engine.generation == 1
    assert engine.parameters.size == 0.05
    engine.tick(elapsed=6.0)
    np.testing.assert_array_equal(engine.buffer.live, engine.buffer.baseline)


def test_layout_fields_regenerate(engine):
    buffer = engine.buffer
    assert engine.set_params({"spin": 2.0}) is True
    assert engine.buffer is not buffer
    assert engine.generation == 2
    assert engine.set_params({"count": 120}) is True
    assert engine.buffer.count == 120


def test_unchanged_payload_is_a_no_op(engine):
    buffer = engine.buffer
    assert engine.set_params(engine.parameters.to_payload()) is False
    assert engine.buffer is buffer


def test_new_buffer_continues_the_current_time(engine):
    engine.tick(elapsed=1.5)
    engine.set_params({"branches": 5})
    expected = engine.buffer.baseline + drift_offsets(800, 1.5, engine.parameters)
    np.testing.assert_allclose(engine.buffer.live, expected, rtol=0, atol=1e-6)


def test_invalid_payload_keeps_previous_galaxy(engine):
    params = engine.parameters
    buffer = engine.buffer
    baseline = buffer.baseline.copy()
    with pytest.raises(GalaxyConfigError) as info:
        engine.set_params({"count": 0, "spin": 3.0})
    assert info.value.field == "count"
    assert engine.parameters is params
    assert engine.buffer is buffer
    np.testing.assert_array_equal(engine.buffer.baseline, baseline)


def test_set_params_accepts_a_record(engine):
    assert engine.set_params(GalaxyParameters(count=64)) is True
    assert engine.parameters.count == 64
    with pytest.raises(GalaxyConfigError):
        engine.set_params(GalaxyParameters(radius=-1.0))


def test_regenerate_draws_fresh_points(engine):
    before = engine.buffer.baseline.copy()
    buffer = engine.regenerate()
    assert buffer is engine.buffer
    assert buffer.count == 800
    assert engine.generation == 2
    assert not np.array_equal(before, buffer.baseline)


def test_reset_clock(engine, clock):
    clock.now += 10.0
    engine.tick()
    engine.reset_clock()
    assert engine.elapsed == 0.0
    assert engine.rotation == 0.0
    np.testing.assert_array_equal(engine.buffer.live, engine.buffer.baseline)


def test_generation_is_logged(capsys, clock):
    GalaxyEngine(GalaxyParameters(count=10), clock=clock)
    out = capsys.readouterr().out
    assert "[Galaxy][DEBUG] generated 10 points" in out
