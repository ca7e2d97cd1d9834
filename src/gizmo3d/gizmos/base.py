from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List

import numpy as np
from PySide6 import QtCore, QtGui

from ..config import DEFAULT_SETTINGS, GizmoSettings
from ..core import (
    Axis,
    AxisHandle,
    Camera,
    GizmoDelta,
    GizmoEnded,
    GizmoEvent,
    GizmoKind,
    GizmoStarted,
    GizmoStateMachine,
    SceneNodeRef,
)
from ..core.axes import coerce_axis, coerce_mode
from ..drawing import painter_ready


def to_xy(pos: object) -> np.ndarray:
    if isinstance(pos, (QtCore.QPointF, QtCore.QPoint)):
        return np.array([float(pos.x()), float(pos.y())], dtype=float)
    return np.asarray(pos, dtype=float).reshape(2)


class GizmoBase(QtCore.QObject):
    """Qt surface of one gizmo: properties, lifecycle signals and painting.

    Subclasses declare the ``<prefix>Started``, ``<prefix>Delta`` and
    ``<prefix>Ended`` signals and paint their own handles.
    """

    kind: GizmoKind = GizmoKind.TRANSLATION
    signal_prefix = "translation"

    AXIS_COLORS = {
        Axis.X: "#ff3b3b",
        Axis.Y: "#3bd95a",
        Axis.Z: "#3b8cff",
        Axis.UNIFORM: "#e6e6e6",
    }
    ACTIVE_COLOR = "#ffd23f"
    HIGHLIGHT_COLOR = "#fff08a"
    LINE_WIDTH = 3.0
    ACTIVE_LINE_WIDTH = 4.0

    gizmoSizeChanged = QtCore.Signal()
    activeAxisChanged = QtCore.Signal()
    transformModeChanged = QtCore.Signal()
    targetNodeChanged = QtCore.Signal()
    snapEnabledChanged = QtCore.Signal()
    snapToAbsoluteChanged = QtCore.Signal()
    updateRequested = QtCore.Signal()

    def __init__(self, parent: QtCore.QObject | None = None, *, settings: GizmoSettings = DEFAULT_SETTINGS) -> None:
        super().__init__(parent)
        self._log = logging.getLogger(__name__)
        self._machine = GizmoStateMachine(self.kind, self._on_core_event, settings=settings)
        self._highlight_axis = Axis.NONE
        self._listeners: List[Callable[[GizmoEvent], None]] = []

    # -- Python-side hooks -------------------------------------------------

    @property
    def machine(self) -> GizmoStateMachine:
        return self._machine

    @property
    def camera(self) -> Camera | None:
        return self._machine.camera

    def set_camera(self, camera: Camera | None) -> None:
        self._machine.camera = camera
        self.updateRequested.emit()

    def add_listener(self, listener: Callable[[GizmoEvent], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[GizmoEvent], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_target_node(self, node: SceneNodeRef | None) -> None:
        if self._machine.set_target_node(node):
            self.targetNodeChanged.emit()
            self.updateRequested.emit()

    def handle_press(self, pos: object) -> bool:
        handled = self._machine.pointer_down(to_xy(pos))
        if not handled:
            self._log.debug("%s press missed every handle", self.kind.value)
        return handled

    def handle_move(self, pos: object) -> bool:
        return self._machine.pointer_move(to_xy(pos))

    def handle_release(self, pos: object | None = None) -> bool:
        return self._machine.pointer_up(None if pos is None else to_xy(pos))

    def hover_axis(self, pos: object) -> Axis:
        return self._machine.hit_test(to_xy(pos))

    def cancel(self) -> bool:
        """Abort the current drag, e.g. when the host loses pointer capture."""
        return self._machine.cancel()

    def dispose(self) -> None:
        had_target = self._machine.target_node is not None
        self._machine.cancel()
        self._machine.set_target_node(None)
        self._listeners.clear()
        if had_target:
            self.targetNodeChanged.emit()

    # -- Qt properties ------------------------------------------------------

    def _get_gizmo_size(self) -> float:
        return self._machine.gizmo_size

    def _set_gizmo_size(self, value: float) -> None:
        value = float(value)
        if value == self._machine.gizmo_size:
            return
        self._machine.gizmo_size = value
        self.gizmoSizeChanged.emit()
        self.updateRequested.emit()

    gizmoSize = QtCore.Property(float, _get_gizmo_size, _set_gizmo_size, notify=gizmoSizeChanged)

    def _get_active_axis(self) -> int:
        if self._machine.dragging:
            return int(self._machine.active_axis)
        return int(self._highlight_axis)

    def _set_active_axis(self, value: int) -> None:
        axis = coerce_axis(value)
        if self._machine.dragging or axis is None:
            return
        if axis != Axis.NONE and not self.kind.supports(axis):
            return
        if axis == self._highlight_axis:
            return
        self._highlight_axis = axis
        self.activeAxisChanged.emit()
        self.updateRequested.emit()

    activeAxis = QtCore.Property(int, _get_active_axis, _set_active_axis, notify=activeAxisChanged)

    def _get_transform_mode(self) -> int:
        return int(self._machine.transform_mode)

    def _set_transform_mode(self, value: int) -> None:
        mode = coerce_mode(value)
        if mode is None or mode == self._machine.transform_mode:
            return
        self._machine.transform_mode = mode
        self.transformModeChanged.emit()
        self.updateRequested.emit()

    transformMode = QtCore.Property(int, _get_transform_mode, _set_transform_mode, notify=transformModeChanged)

    def _get_target_node(self) -> object:
        return self._machine.target_node

    def _set_target_node(self, node: object) -> None:
        self.set_target_node(node)  # type: ignore[arg-type]

    targetNode = QtCore.Property(object, _get_target_node, _set_target_node, notify=targetNodeChanged)

    def _get_target_position(self) -> object:
        node = self._machine.target_node
        if node is None:
            return None
        return np.asarray(node.world_position(), dtype=float)

    targetPosition = QtCore.Property(object, _get_target_position, notify=targetNodeChanged)

    def _get_snap_enabled(self) -> bool:
        return self._machine.snap.enabled

    def _set_snap_enabled(self, value: bool) -> None:
        value = bool(value)
        if value == self._machine.snap.enabled:
            return
        self._machine.snap = replace(self._machine.snap, enabled=value)
        self.snapEnabledChanged.emit()

    snapEnabled = QtCore.Property(bool, _get_snap_enabled, _set_snap_enabled, notify=snapEnabledChanged)

    def _get_snap_to_absolute(self) -> bool:
        return self._machine.snap.to_absolute

    def _set_snap_to_absolute(self, value: bool) -> None:
        value = bool(value)
        if value == self._machine.snap.to_absolute:
            return
        self._machine.snap = replace(self._machine.snap, to_absolute=value)
        self.snapToAbsoluteChanged.emit()

    snapToAbsolute = QtCore.Property(bool, _get_snap_to_absolute, _set_snap_to_absolute, notify=snapToAbsoluteChanged)

    def _snap_increment(self) -> float:
        increment = self._machine.snap.increment
        return float(increment) if increment is not None else 0.0

    def _store_snap_increment(self, value: float) -> bool:
        value = float(value)
        if value == self._machine.snap.increment:
            return False
        self._machine.snap = replace(self._machine.snap, increment=value)
        return True

    # -- events -------------------------------------------------------------

    def _on_core_event(self, event: GizmoEvent) -> None:
        if isinstance(event, GizmoStarted):
            self._highlight_axis = Axis.NONE
            getattr(self, f"{self.signal_prefix}Started").emit(int(event.axis))
            self.activeAxisChanged.emit()
        elif isinstance(event, GizmoDelta):
            getattr(self, f"{self.signal_prefix}Delta").emit(
                int(event.axis), int(event.mode), float(event.value), bool(event.snap_active)
            )
        elif isinstance(event, GizmoEnded):
            getattr(self, f"{self.signal_prefix}Ended").emit(int(event.axis))
            self.activeAxisChanged.emit()
        for listener in list(self._listeners):
            listener(event)
        self.updateRequested.emit()

    # -- painting -----------------------------------------------------------

    def axis_color(self, axis: Axis) -> str:
        if axis == self._machine.active_axis and self._machine.dragging:
            return self.ACTIVE_COLOR
        if axis == self._highlight_axis:
            return self.HIGHLIGHT_COLOR
        return self.AXIS_COLORS.get(axis, self.AXIS_COLORS[Axis.UNIFORM])

    def line_width(self, axis: Axis) -> float:
        if axis == self._machine.active_axis and self._machine.dragging:
            return self.ACTIVE_LINE_WIDTH
        return self.LINE_WIDTH

    def paint(self, painter: QtGui.QPainter | None) -> None:
        if not painter_ready(painter):
            return
        handles = self._machine.handles()
        if not handles:
            return
        painter.save()
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        try:
            self._paint_handles(painter, handles)
        finally:
            painter.restore()

    def _paint_handles(self, painter: QtGui.QPainter, handles: List[AxisHandle]) -> None:
        raise NotImplementedError


__all__ = ["GizmoBase", "to_xy"]
