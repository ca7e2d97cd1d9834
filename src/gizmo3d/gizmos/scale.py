from __future__ import annotations

from typing import List

from PySide6 import QtCore, QtGui

from ..core import Axis, AxisHandle, GizmoKind
from ..drawing import ArrowPrimitive, PlanePrimitive, SquareHandlePrimitive
from .base import GizmoBase


class ScaleGizmo(GizmoBase):
    kind = GizmoKind.SCALE
    signal_prefix = "scale"

    scaleStarted = QtCore.Signal(int)
    scaleDelta = QtCore.Signal(int, int, float, bool)
    scaleEnded = QtCore.Signal(int)
    snapIncrementChanged = QtCore.Signal()
    arrowStartRatioChanged = QtCore.Signal()
    arrowEndRatioChanged = QtCore.Signal()

    def __init__(self, parent: QtCore.QObject | None = None, **kwargs) -> None:
        super().__init__(parent, **kwargs)
        self._arrow = ArrowPrimitive()
        self._plane = PlanePrimitive()
        self._square = SquareHandlePrimitive()

    def _get_snap_increment(self) -> float:
        return self._snap_increment()

    def _set_snap_increment(self, value: float) -> None:
        if self._store_snap_increment(value):
            self.snapIncrementChanged.emit()

    snapIncrement = QtCore.Property(float, _get_snap_increment, _set_snap_increment, notify=snapIncrementChanged)

    def _get_arrow_start_ratio(self) -> float:
        return self.machine.arrow_start_ratio

    def _set_arrow_start_ratio(self, value: float) -> None:
        value = float(value)
        if value == self.machine.arrow_start_ratio:
            return
        self.machine.arrow_start_ratio = value
        self.arrowStartRatioChanged.emit()
        self.updateRequested.emit()

    arrowStartRatio = QtCore.Property(
        float, _get_arrow_start_ratio, _set_arrow_start_ratio, notify=arrowStartRatioChanged
    )

    def _get_arrow_end_ratio(self) -> float:
        return self.machine.arrow_end_ratio

    def _set_arrow_end_ratio(self, value: float) -> None:
        value = float(value)
        if value == self.machine.arrow_end_ratio:
            return
        self.machine.arrow_end_ratio = value
        self.arrowEndRatioChanged.emit()
        self.updateRequested.emit()

    arrowEndRatio = QtCore.Property(float, _get_arrow_end_ratio, _set_arrow_end_ratio, notify=arrowEndRatioChanged)

    def _paint_handles(self, painter: QtGui.QPainter, handles: List[AxisHandle]) -> None:
        square_size = self.machine.settings.uniform_handle_size
        for handle in handles:
            color = self.axis_color(handle.axis)
            if handle.axis == Axis.UNIFORM:
                center = handle.points[0]
                half = handle.half_size * 1.5
                corners = [
                    (center[0] - half, center[1] - half),
                    (center[0] + half, center[1] - half),
                    (center[0] + half, center[1] + half),
                    (center[0] - half, center[1] + half),
                ]
                active = self.machine.dragging and self.machine.active_axis == Axis.UNIFORM
                self._plane.draw(painter, corners, color, active)
                self._square.draw(painter, center, color)
                continue
            start, end = handle.points
            self._arrow.draw_with_square(painter, start, end, color, self.line_width(handle.axis), square_size)
