import math

import pytest

from galaxy.parameters import (
    GENERATION_FIELDS,
    PAYLOAD_KEYS,
    GalaxyConfigError,
    GalaxyParameters,
    hex_to_rgb,
    rgb_to_hex,
)


def test_defaults_payload():
    payload = GalaxyParameters().to_payload()
    assert set(payload) == set(PAYLOAD_KEYS.values())
    assert payload["count"] == 100000
    assert payload["randomnessPower"] == 3.5
    assert payload["innerColor"] == "#ff6030"
    assert payload["outerColor"] == "#1b3984"


def test_payload_round_trip_keeps_record():
    params = GalaxyParameters(count=500, spin=-1.25, inner_color=(1.0, 0.0, 0.0))
    assert GalaxyParameters.from_payload(params.to_payload()) == params


def test_from_payload_accepts_both_key_styles_and_ignores_unknown():
    params = GalaxyParameters.from_payload(
        {"randomnessPower": 2, "motion_radius": "0.25", "count": "42", "whatever": 1}
    )
    assert params.randomness_power == 2.0
    assert params.motion_radius == 0.25
    assert params.count == 42
    assert params.radius == GalaxyParameters().radius


def test_from_payload_keeps_base_values():
    base = GalaxyParameters(branches=7)
    merged = base.merged({"spin": 0.5})
    assert merged.branches == 7
    assert merged.spin == 0.5


def test_hex_helpers():
    assert hex_to_rgb("#fff") == (1.0, 1.0, 1.0)
    assert hex_to_rgb("#000000") == (0.0, 0.0, 0.0)
    assert rgb_to_hex(hex_to_rgb("#1b3984")) == "#1b3984"
    with pytest.raises(ValueError):
        hex_to_rgb("#12345")


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"count": 0}, "count"),
        ({"count": 2.5}, "count"),
        ({"count": True}, "count"),
        ({"branches": 0}, "branches"),
        ({"radius": 0}, "radius"),
        ({"size": -0.1}, "size"),
        ({"randomness": -1}, "randomness"),
        ({"randomnessPower": 0}, "randomness_power"),
        ({"motionRadius": -0.5}, "motion_radius"),
        ({"spin": math.nan}, "spin"),
        ({"animationSpeed": "fast"}, "animation_speed"),
        ({"innerColor": "#zz0000"}, "inner_color"),
        ({"outerColor": (2.0, 0.0, 0.0)}, "outer_color"),
    ],
)
def test_invalid_payloads_are_rejected(payload, field):
    with pytest.raises(GalaxyConfigError) as info:
        GalaxyParameters.from_payload(payload)
    assert info.value.field == field
    assert isinstance(info.value, ValueError)


def test_with_changes_validates():
    with pytest.raises(GalaxyConfigError):
        GalaxyParameters().with_changes(count=-3)


def test_regeneration_only_for_layout_fields():
    base = GalaxyParameters()
    assert not base.with_changes(size=0.05).requires_regeneration(base)
    assert not base.with_changes(animation_speed=1.0, motion_radius=0.3).requires_regeneration(base)
    assert base.with_changes(spin=2.0).requires_regeneration(base)
    assert base.with_changes(outer_color=(0.0, 0.0, 0.0)).requires_regeneration(base)
    assert base.with_changes(count=10).changed_fields(base) == frozenset({"count"})
    assert "size" not in GENERATION_FIELDS


def test_exact_payload_keeps_float_colors():
    params = GalaxyParameters(inner_color=(0.5, 0.5, 0.5))
    payload = params.to_payload(hex_colors=False)
    assert payload["innerColor"] == [0.5, 0.5, 0.5]
    assert GalaxyParameters.from_payload(payload) == params
    assert params.merged(payload).requires_regeneration(params) is False
