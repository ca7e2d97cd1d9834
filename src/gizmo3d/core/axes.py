from __future__ import annotations

from enum import Enum, IntEnum
from typing import Tuple


class Axis(IntEnum):
    NONE = 0
    X = 1
    Y = 2
    Z = 3
    UNIFORM = 4


class TransformMode(IntEnum):
    WORLD = 0
    LOCAL = 1


class GizmoKind(str, Enum):
    TRANSLATION = "translation"
    ROTATION = "rotation"
    SCALE = "scale"

    @property
    def axes(self) -> Tuple[Axis, ...]:
        """Hit-test candidates in tie-break priority order."""
        if self == GizmoKind.SCALE:
            return (Axis.X, Axis.Y, Axis.Z, Axis.UNIFORM)
        return (Axis.X, Axis.Y, Axis.Z)

    def supports(self, axis: Axis | int) -> bool:
        try:
            return Axis(axis) in self.axes
        except ValueError:
            return False


def coerce_axis(value: object) -> Axis | None:
    try:
        return Axis(int(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def coerce_mode(value: object) -> TransformMode | None:
    try:
        return TransformMode(int(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
