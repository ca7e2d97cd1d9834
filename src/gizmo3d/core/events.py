from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from .axes import Axis, GizmoKind, TransformMode


@dataclass(frozen=True)
class GizmoStarted:
    kind: GizmoKind
    axis: Axis


@dataclass(frozen=True)
class GizmoDelta:
    """Total delta since the drag started (not an increment).

    ``value`` is a distance for translation, an angle in degrees for rotation
    and a multiplicative factor for scale.
    """

    kind: GizmoKind
    axis: Axis
    mode: TransformMode
    value: float
    snap_active: bool


@dataclass(frozen=True)
class GizmoEnded:
    kind: GizmoKind
    axis: Axis
    cancelled: bool = False


GizmoEvent = Union[GizmoStarted, GizmoDelta, GizmoEnded]
GizmoEventHandler = Callable[[GizmoEvent], None]
