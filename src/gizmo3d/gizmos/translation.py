from __future__ import annotations

from typing import List

from PySide6 import QtCore, QtGui

from ..core import AxisHandle, GizmoKind
from ..drawing import ArrowPrimitive
from .base import GizmoBase


class TranslationGizmo(GizmoBase):
    kind = GizmoKind.TRANSLATION
    signal_prefix = "translation"

    translationStarted = QtCore.Signal(int)
    translationDelta = QtCore.Signal(int, int, float, bool)
    translationEnded = QtCore.Signal(int)
    snapIncrementChanged = QtCore.Signal()

    def __init__(self, parent: QtCore.QObject | None = None, **kwargs) -> None:
        super().__init__(parent, **kwargs)
        self._arrow = ArrowPrimitive()

    def _get_snap_increment(self) -> float:
        return self._snap_increment()

    def _set_snap_increment(self, value: float) -> None:
        if self._store_snap_increment(value):
            self.snapIncrementChanged.emit()

    snapIncrement = QtCore.Property(float, _get_snap_increment, _set_snap_increment, notify=snapIncrementChanged)

    def _paint_handles(self, painter: QtGui.QPainter, handles: List[AxisHandle]) -> None:
        for handle in handles:
            start, end = handle.points
            self._arrow.draw(painter, start, end, self.axis_color(handle.axis), self.line_width(handle.axis))
