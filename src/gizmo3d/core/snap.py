from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SnapConfig:
    enabled: bool = False
    increment: float | None = 1.0
    to_absolute: bool = True

    @property
    def active(self) -> bool:
        return self.enabled and increment_is_valid(self.increment)


def increment_is_valid(increment: float | None) -> bool:
    if increment is None:
        return False
    try:
        value = float(increment)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value > 0.0


def snap_value(value: float, increment: float | None) -> float:
    """Round ``value`` to the nearest multiple of ``increment`` (halves round up).

    A missing, zero, negative or non-finite increment leaves the value untouched.
    """
    if not increment_is_valid(increment):
        return float(value)
    step = float(increment)  # type: ignore[arg-type]
    return math.floor(float(value) / step + 0.5) * step


class SnapAccumulator:
    """Turns the raw running total of one drag into the emitted total.

    Absolute mode quantizes the whole offset from ``origin`` on every sample.
    Relative mode quantizes the step taken since the last commit and adds it
    to the committed total. The anchor advances by the committed step, so the
    rounding remainder carries into the next step and the emitted total stays
    within half an increment of the raw total.
    """

    def __init__(self, origin: float = 0.0) -> None:
        self._origin = float(origin)
        self._anchor = float(origin)
        self._committed = float(origin)

    @property
    def committed(self) -> float:
        return self._committed

    def update(self, raw_total: float, config: SnapConfig) -> tuple[float, bool]:
        raw = float(raw_total)
        if not config.active:
            self._anchor = raw
            self._committed = raw
            return raw, False
        if config.to_absolute:
            value = self._origin + snap_value(raw - self._origin, config.increment)
            self._anchor = value
            self._committed = value
            return value, True
        step = snap_value(raw - self._anchor, config.increment)
        if step != 0.0:
            self._committed += step
            self._anchor += step
        return self._committed, True
