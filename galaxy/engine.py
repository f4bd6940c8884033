from __future__ import annotations

import time
from typing import Any, Callable, Mapping, Optional, Union

import numpy as np

from .animator import advance, display_rotation
from .generator import PointBuffer, generate
from .parameters import GalaxyParameters

__all__ = ["GalaxyEngine"]


class GalaxyEngine:
    """Small helper responsible for generating and animating the galaxy.

    Parameter changes are explicit commands (:meth:`set_params`,
    :meth:`regenerate`); the frame clock calls :meth:`tick`.  Both run on the
    caller's thread, so regeneration and animation never overlap.
    """

    def __init__(
        self,
        parameters: Optional[GalaxyParameters] = None,
        *,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._params = (parameters or GalaxyParameters()).validate()
        self._rng = rng
        self._clock = clock
        self._start_time = clock()
        self._last_elapsed = 0.0
        self._rotation = 0.0
        self._generation = 0
        self._buffer = self._build(self._params)

    # ------------------------------------------------------------------ helpers
    @property
    def parameters(self) -> GalaxyParameters:
        return self._params

    @property
    def buffer(self) -> PointBuffer:
        return self._buffer

    @property
    def generation(self) -> int:
        """Number of buffers built so far, the initial one included."""

        return self._generation

    @property
    def elapsed(self) -> float:
        return self._clock() - self._start_time

    @property
    def last_elapsed(self) -> float:
        return self._last_elapsed

    @property
    def rotation(self) -> float:
        return self._rotation

    def _debug(self, message: str) -> None:
        print(f"[Galaxy][DEBUG] {message}", flush=True)

    def _build(self, params: GalaxyParameters) -> PointBuffer:
        started = time.perf_counter()
        buffer = generate(params, self._rng)
        self._generation += 1
        self._debug(
            f"generated {buffer.count} points in {(time.perf_counter() - started) * 1000.0:.1f} ms "
            f"(branches={params.branches}, radius={params.radius:g})"
        )
        return buffer

    # ---------------------------------------------------------------- commands
    def set_params(self, payload: Union[GalaxyParameters, Mapping[str, Any]]) -> bool:
        """Apply a parameter change and regenerate when the layout depends on it.

        Raises :class:`~galaxy.parameters.GalaxyConfigError` without touching
        the current parameters or buffer when the result is invalid.  Returns
        ``True`` when a new buffer was generated.
        """

        if isinstance(payload, GalaxyParameters):
            updated = payload.validate()
        else:
            updated = self._params.merged(payload)
        previous = self._params
        if not updated.requires_regeneration(previous):
            self._params = updated
            return False
        buffer = self._build(updated)
        # swap only once the new buffer is complete
        self._params = updated
        self._buffer = buffer
        advance(self._buffer, self._last_elapsed, self._params)
        return True

    def regenerate(self) -> PointBuffer:
        """Rebuild every point from scratch with fresh randomness."""

        self._buffer = self._build(self._params)
        advance(self._buffer, self._last_elapsed, self._params)
        return self._buffer

    def reset_clock(self) -> None:
        self._start_time = self._clock()
        self._last_elapsed = 0.0
        self._rotation = 0.0
        np.copyto(self._buffer.live, self._buffer.baseline)

    def tick(self, elapsed: Optional[float] = None) -> float:
        """Advance the live positions to ``elapsed`` (defaults to the clock)."""

        if elapsed is None:
            elapsed = self.elapsed
        elapsed = float(elapsed)
        advance(self._buffer, elapsed, self._params)
        self._rotation = display_rotation(elapsed)
        self._last_elapsed = elapsed
        return elapsed
