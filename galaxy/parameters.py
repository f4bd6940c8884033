"""Galaxy parameter record shared by the generator, the animator and the UI.

The control window and JSON files speak the camelCase payload of the historical
tweak panel (``randomnessPower``, ``innerColor`` ...).  :class:`GalaxyParameters`
is the validated, immutable form of that payload; every consumer receives the
record explicitly instead of reading a shared mutable object.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

RGB = Tuple[float, float, float]

__all__ = [
    "RGB",
    "GalaxyConfigError",
    "GalaxyParameters",
    "PAYLOAD_KEYS",
    "GENERATION_FIELDS",
    "hex_to_rgb",
    "rgb_to_hex",
]


class GalaxyConfigError(ValueError):
    """Raised when a parameter set cannot produce a well defined galaxy."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


# attribute name -> payload key
PAYLOAD_KEYS: Dict[str, str] = {
    "count": "count",
    "size": "size",
    "radius": "radius",
    "branches": "branches",
    "spin": "spin",
    "randomness": "randomness",
    "randomness_power": "randomnessPower",
    "inner_color": "innerColor",
    "outer_color": "outerColor",
    "animation_speed": "animationSpeed",
    "motion_radius": "motionRadius",
}

# Fields whose change invalidates the generated point buffer.
GENERATION_FIELDS = frozenset(
    {
        "count",
        "radius",
        "branches",
        "spin",
        "randomness",
        "randomness_power",
        "inner_color",
        "outer_color",
    }
)


def hex_to_rgb(value: str) -> RGB:
    """Convert ``#rrggbb`` (or ``#rgb``) into a float triple in ``[0, 1]``."""

    text = value.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"invalid hex color {value!r}")
    try:
        number = int(text, 16)
    except ValueError:
        raise ValueError(f"invalid hex color {value!r}") from None
    return (
        ((number >> 16) & 255) / 255.0,
        ((number >> 8) & 255) / 255.0,
        (number & 255) / 255.0,
    )


def rgb_to_hex(color: Sequence[float]) -> str:
    channels = [int(round(max(0.0, min(1.0, float(c))) * 255)) for c in color[:3]]
    return "#{:02x}{:02x}{:02x}".format(*channels)


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise GalaxyConfigError(name, f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise GalaxyConfigError(name, f"expected an integer, got {value!r}") from None
    if not math.isfinite(number) or number != int(number):
        raise GalaxyConfigError(name, f"expected an integer, got {value!r}")
    return int(number)


def _coerce_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise GalaxyConfigError(name, f"expected a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise GalaxyConfigError(name, f"expected a number, got {value!r}") from None


def _coerce_color(name: str, value: Any) -> RGB:
    if isinstance(value, str):
        try:
            return hex_to_rgb(value)
        except ValueError as exc:
            raise GalaxyConfigError(name, str(exc)) from None
    if isinstance(value, Sequence) and len(value) == 3:
        return (
            _coerce_float(name, value[0]),
            _coerce_float(name, value[1]),
            _coerce_float(name, value[2]),
        )
    raise GalaxyConfigError(name, f"expected '#rrggbb' or an RGB triple, got {value!r}")


@dataclass(frozen=True)
class GalaxyParameters:
    """Immutable configuration of a galaxy.

    Defaults reproduce the galaxy of the original tweak panel.  Use
    :meth:`with_changes` or :meth:`merged` to derive a new record.
    """

    count: int = 100000
    size: float = 0.01
    radius: float = 5.0
    branches: int = 3
    spin: float = 1.0
    randomness: float = 0.02
    randomness_power: float = 3.5
    inner_color: RGB = hex_to_rgb("#ff6030")
    outer_color: RGB = hex_to_rgb("#1b3984")
    animation_speed: float = 0.3
    motion_radius: float = 0.1

    # ---------------------------------------------------------------- checks
    def validate(self) -> "GalaxyParameters":
        """Return ``self`` or raise :class:`GalaxyConfigError`."""

        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1:
            raise GalaxyConfigError("count", f"must be an integer >= 1, got {self.count!r}")
        if isinstance(self.branches, bool) or not isinstance(self.branches, int) or self.branches < 1:
            raise GalaxyConfigError("branches", f"must be an integer >= 1, got {self.branches!r}")
        for name in ("size", "radius", "spin", "randomness", "randomness_power", "animation_speed", "motion_radius"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise GalaxyConfigError(name, f"must be finite, got {value!r}")
        if self.radius <= 0:
            raise GalaxyConfigError("radius", f"must be > 0, got {self.radius!r}")
        if self.size <= 0:
            raise GalaxyConfigError("size", f"must be > 0, got {self.size!r}")
        if self.randomness < 0:
            raise GalaxyConfigError("randomness", f"must be >= 0, got {self.randomness!r}")
        if self.randomness_power <= 0:
            raise GalaxyConfigError("randomness_power", f"must be > 0, got {self.randomness_power!r}")
        if self.motion_radius < 0:
            raise GalaxyConfigError("motion_radius", f"must be >= 0, got {self.motion_radius!r}")
        for name in ("inner_color", "outer_color"):
            color = getattr(self, name)
            if len(color) != 3 or not all(math.isfinite(c) and 0.0 <= c <= 1.0 for c in color):
                raise GalaxyConfigError(name, f"channels must lie in [0, 1], got {color!r}")
        return self

    # ------------------------------------------------------------ conversion
    @classmethod
    def from_payload(
        cls,
        payload: Optional[Mapping[str, Any]],
        base: Optional["GalaxyParameters"] = None,
    ) -> "GalaxyParameters":
        """Build a validated record from a UI/JSON payload.

        Keys may use either the camelCase payload names or the attribute
        names.  Missing keys keep the value of ``base`` (defaults when
        omitted); unknown keys are ignored.
        """

        current = base or cls()
        if not payload:
            return current.validate()
        changes: Dict[str, Any] = {}
        for attr, key in PAYLOAD_KEYS.items():
            if key in payload:
                raw = payload[key]
            elif attr in payload:
                raw = payload[attr]
            else:
                continue
            if attr in ("count", "branches"):
                changes[attr] = _coerce_int(attr, raw)
            elif attr in ("inner_color", "outer_color"):
                changes[attr] = _coerce_color(attr, raw)
            else:
                changes[attr] = _coerce_float(attr, raw)
        return replace(current, **changes).validate()

    def to_payload(self, hex_colors: bool = True) -> Dict[str, Any]:
        """Return the camelCase payload.

        Colors are ``#rrggbb`` strings, which round to 8 bits per channel;
        ``hex_colors=False`` keeps the exact float triples as lists instead.
        """

        out: Dict[str, Any] = {}
        for attr, key in PAYLOAD_KEYS.items():
            value = getattr(self, attr)
            if attr in ("inner_color", "outer_color"):
                value = rgb_to_hex(value) if hex_colors else list(value)
            out[key] = value
        return out

    def with_changes(self, **changes: Any) -> "GalaxyParameters":
        return replace(self, **changes).validate()

    def merged(self, payload: Mapping[str, Any]) -> "GalaxyParameters":
        return type(self).from_payload(payload, base=self)

    def changed_fields(self, other: "GalaxyParameters") -> frozenset:
        return frozenset(
            f.name for f in fields(self) if getattr(self, f.name) != getattr(other, f.name)
        )

    def requires_regeneration(self, other: "GalaxyParameters") -> bool:
        """True when switching from ``other`` to ``self`` changes the point layout."""

        return bool(self.changed_fields(other) & GENERATION_FIELDS)
