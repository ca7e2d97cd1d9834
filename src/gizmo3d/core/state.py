from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from ..config import DEFAULT_SETTINGS, GizmoSettings
from .axes import Axis, GizmoKind, TransformMode
from .camera import Camera
from .drag import DragBaseline, DragSample, DragTracker, create_tracker
from .events import GizmoDelta, GizmoEnded, GizmoEvent, GizmoEventHandler, GizmoStarted
from .projection import AxisHandle, build_handles, hit_test
from .scene import SceneNodeRef, Vector, node_is_valid
from .snap import SnapAccumulator, SnapConfig

_LOG = logging.getLogger(__name__)

DEFAULT_GIZMO_SIZE = 100.0
DEFAULT_SNAP = {
    GizmoKind.TRANSLATION: SnapConfig(enabled=False, increment=1.0, to_absolute=True),
    GizmoKind.ROTATION: SnapConfig(enabled=False, increment=15.0, to_absolute=True),
    GizmoKind.SCALE: SnapConfig(enabled=False, increment=0.1, to_absolute=True),
}


@dataclass
class GizmoInteractionState:
    active_axis: Axis = Axis.NONE
    dragging: bool = False
    drag_start_pointer: Vector | None = None
    drag_baseline: DragBaseline | None = None


class GizmoStateMachine:
    """Idle/Dragging lifecycle for one gizmo instance.

    Every drag emits exactly one ``GizmoStarted``, any number of ``GizmoDelta``
    and exactly one ``GizmoEnded``, in that order, including when the drag is
    cut short by ``cancel()`` or by the target going away.
    """

    def __init__(
        self,
        kind: GizmoKind,
        handler: GizmoEventHandler | None = None,
        *,
        settings: GizmoSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.kind = GizmoKind(kind)
        self.settings = settings
        self._handler = handler
        self._state = GizmoInteractionState()
        self._target: SceneNodeRef | None = None
        self.camera: Camera | None = None
        self.transform_mode = TransformMode.WORLD
        self.snap = DEFAULT_SNAP[self.kind]
        self.gizmo_size = DEFAULT_GIZMO_SIZE
        self.arrow_start_ratio = 0.2 if self.kind == GizmoKind.SCALE else 0.0
        self.arrow_end_ratio = 1.0
        self._tracker: DragTracker | None = None
        self._snapper: SnapAccumulator | None = None

    @property
    def state(self) -> GizmoInteractionState:
        return self._state

    @property
    def active_axis(self) -> Axis:
        return self._state.active_axis

    @property
    def dragging(self) -> bool:
        return self._state.dragging

    @property
    def tracker(self) -> DragTracker | None:
        return self._tracker

    @property
    def target_node(self) -> SceneNodeRef | None:
        return self._target

    def set_handler(self, handler: GizmoEventHandler | None) -> None:
        self._handler = handler

    def set_target_node(self, node: SceneNodeRef | None) -> bool:
        if node is self._target:
            return False
        if self._state.dragging:
            _LOG.debug("%s gizmo target rebound mid-drag; cancelling", self.kind.value)
            self._finish(cancelled=True)
        self._target = node
        return True

    def handles(self) -> List[AxisHandle]:
        node = self._target
        if self.camera is None or node is None or not node_is_valid(node):
            return []
        return build_handles(
            self.kind,
            self.camera,
            node.world_position(),
            node.world_orientation(),
            self.transform_mode,
            self.gizmo_size,
            arrow_start_ratio=self.arrow_start_ratio,
            arrow_end_ratio=self.arrow_end_ratio,
            settings=self.settings,
        )

    def hit_test(self, pointer: Vector) -> Axis:
        handles = [handle for handle in self.handles() if self.kind.supports(handle.axis)]
        if not handles:
            return Axis.NONE
        return hit_test(pointer, handles, self.settings.hit_tolerance_px)

    def pointer_down(self, pointer: Vector) -> bool:
        if self._state.dragging:
            return True
        node = self._target
        if self.camera is None or node is None or not node_is_valid(node):
            return False
        point = np.asarray(pointer, dtype=float).reshape(2)
        axis = self.hit_test(point)
        if axis == Axis.NONE:
            return False
        baseline = DragBaseline.capture(node, point, self.gizmo_size, self.transform_mode)
        self._tracker = create_tracker(self.kind, axis, baseline, self.camera, self.settings)
        self._snapper = SnapAccumulator(origin=self._tracker.identity)
        self._state = GizmoInteractionState(
            active_axis=axis,
            dragging=True,
            drag_start_pointer=baseline.pointer,
            drag_baseline=baseline,
        )
        _LOG.debug("%s drag started on axis %s", self.kind.value, axis.name)
        self._emit(GizmoStarted(kind=self.kind, axis=axis))
        return True

    def pointer_move(self, pointer: Vector) -> bool:
        if not self._state.dragging:
            return False
        node = self._target
        if node is None or not node_is_valid(node):
            _LOG.debug("%s gizmo target lost mid-drag; cancelling", self.kind.value)
            self._finish(cancelled=True)
            return True
        if self.camera is None or self._tracker is None or self._snapper is None:
            return True
        sample = DragSample(
            camera=self.camera,
            position=node.world_position(),
            orientation=node.world_orientation(),
        )
        raw = self._tracker.update(np.asarray(pointer, dtype=float).reshape(2), sample)
        value, snap_active = self._snapper.update(raw, self.snap)
        if self.kind == GizmoKind.SCALE:
            value = max(self.settings.scale_floor, value)
        baseline = self._state.drag_baseline
        mode = baseline.mode if baseline is not None else self.transform_mode
        self._emit(
            GizmoDelta(
                kind=self.kind,
                axis=self._state.active_axis,
                mode=mode,
                value=float(value),
                snap_active=snap_active,
            )
        )
        return True

    def pointer_up(self, pointer: Vector | None = None) -> bool:
        _ = pointer
        if not self._state.dragging:
            return False
        self._finish(cancelled=False)
        return True

    def cancel(self) -> bool:
        if not self._state.dragging:
            return False
        _LOG.debug("%s drag cancelled", self.kind.value)
        self._finish(cancelled=True)
        return True

    def dispose(self) -> None:
        self.cancel()
        self._target = None
        self._handler = None

    def _finish(self, *, cancelled: bool) -> None:
        axis = self._state.active_axis
        self._state = GizmoInteractionState()
        self._tracker = None
        self._snapper = None
        _LOG.debug("%s drag ended on axis %s (cancelled=%s)", self.kind.value, axis.name, cancelled)
        self._emit(GizmoEnded(kind=self.kind, axis=axis, cancelled=cancelled))

    def _emit(self, event: GizmoEvent) -> None:
        if self._handler is not None:
            self._handler(event)
