from __future__ import annotations

import math
from typing import List

import numpy as np
from PySide6 import QtCore, QtGui

from ..core import AxisHandle, GizmoKind, RotationTracker
from ..drawing import CircleDrawOptions, CirclePrimitive
from .base import GizmoBase


class RotationGizmo(GizmoBase):
    kind = GizmoKind.ROTATION
    signal_prefix = "rotation"

    rotationStarted = QtCore.Signal(int)
    rotationDelta = QtCore.Signal(int, int, float, bool)
    rotationEnded = QtCore.Signal(int)
    snapAngleChanged = QtCore.Signal()

    def __init__(self, parent: QtCore.QObject | None = None, **kwargs) -> None:
        super().__init__(parent, **kwargs)
        self._circle = CirclePrimitive()

    def _get_snap_angle(self) -> float:
        return self._snap_increment()

    def _set_snap_angle(self, value: float) -> None:
        if self._store_snap_increment(value):
            self.snapAngleChanged.emit()

    snapAngle = QtCore.Property(float, _get_snap_angle, _set_snap_angle, notify=snapAngleChanged)

    def _sweep_options(self) -> CircleDrawOptions | None:
        tracker = self.machine.tracker
        if not isinstance(tracker, RotationTracker):
            return None
        start = tracker.start_vector
        if float(np.hypot(start[0], start[1])) <= 1e-6:
            return None
        arc_start = math.atan2(-float(start[1]), float(start[0]))
        return CircleDrawOptions(
            filled=True,
            arc_start=arc_start,
            arc_end=arc_start + math.radians(tracker.screen_sweep_deg),
        )

    def _paint_handles(self, painter: QtGui.QPainter, handles: List[AxisHandle]) -> None:
        node = self.machine.target_node
        center = None
        if node is not None and self.camera is not None:
            center = self.camera.project(node.world_position())
        for handle in handles:
            color = self.axis_color(handle.axis)
            width = self.line_width(handle.axis)
            options = None
            if self.machine.dragging and handle.axis == self.machine.active_axis:
                options = self._sweep_options()
            if options is not None and center is not None:
                self._circle.draw(painter, handle.points, center, color, width, options)
            else:
                self._circle.draw_circle(painter, handle.points, color, width)
