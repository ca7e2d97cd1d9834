from __future__ import annotations

import logging

import numpy as np
import pyqtgraph.opengl as gl
from PySide6 import QtCore, QtGui, QtWidgets

from ..core import Camera, SceneNode, quat_to_matrix
from ..gizmos import GizmoBase


def _matrix_to_numpy(matrix: QtGui.QMatrix4x4) -> np.ndarray:
    rows = []
    for idx in range(4):
        row = matrix.row(idx)
        rows.append([row.x(), row.y(), row.z(), row.w()])
    return np.asarray(rows, dtype=float)


def _numpy_to_matrix(matrix: np.ndarray) -> QtGui.QMatrix4x4:
    return QtGui.QMatrix4x4(*[float(v) for v in np.asarray(matrix, dtype=float).reshape(16)])


def node_model_matrix(node: SceneNode) -> np.ndarray:
    """Model matrix for a unit box centred on the node origin."""
    model = np.eye(4, dtype=float)
    model[:3, :3] = quat_to_matrix(node.orientation) @ np.diag(node.scale)
    model[:3, 3] = node.position
    center = np.eye(4, dtype=float)
    center[:3, 3] = -0.5
    return model @ center


class GizmoViewport(gl.GLViewWidget):
    """GL scene view that routes pointer input to the active gizmo first.

    Presses that miss every gizmo handle fall through to the orbit/pan
    camera handling of ``GLViewWidget``.
    """

    BG_COLOR = "#1f1f1f"
    GRID_COLOR = (200, 200, 200, 70)

    def __init__(self, node: SceneNode, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent=parent)
        self._log = logging.getLogger(__name__)
        self._node = node
        self._gizmo: GizmoBase | None = None
        self._press_handled = False
        self.setBackgroundColor(self.BG_COLOR)
        self.setMouseTracking(True)
        self.opts["distance"] = 12.0

        grid = gl.GLGridItem()
        grid.setSpacing(1.0, 1.0, 1.0)
        grid.setSize(20.0, 20.0, 1.0)
        grid.setColor(self.GRID_COLOR)
        self.addItem(grid)
        self.addItem(gl.GLAxisItem(size=QtGui.QVector3D(3.0, 3.0, 3.0)))

        self._box = gl.GLBoxItem(color=(220, 220, 220, 255))
        self.addItem(self._box)
        self.refresh_node()

    def set_gizmo(self, gizmo: GizmoBase | None) -> None:
        if self._gizmo is gizmo:
            return
        if self._gizmo is not None:
            self._gizmo.cancel()
            self._gizmo.updateRequested.disconnect(self.update)
        self._gizmo = gizmo
        if gizmo is not None:
            gizmo.updateRequested.connect(self.update)
            gizmo.set_camera(self.current_camera())
        self.update()

    def refresh_node(self) -> None:
        self._box.setTransform(_numpy_to_matrix(node_model_matrix(self._node)))
        self.update()

    def current_camera(self) -> Camera:
        width = max(self.width(), 1)
        height = max(self.height(), 1)
        viewport = (0, 0, width, height)
        projection = _matrix_to_numpy(self.projectionMatrix(viewport, viewport))
        view = _matrix_to_numpy(self.viewMatrix())
        return Camera(view=view, projection=projection, viewport=(float(width), float(height)))

    def _sync_camera(self) -> None:
        if self._gizmo is not None:
            self._gizmo.set_camera(self.current_camera())

    def paintGL(self, *args, **kwargs) -> None:
        super().paintGL(*args, **kwargs)
        if self._gizmo is None:
            return
        self._gizmo.machine.camera = self.current_camera()
        painter = QtGui.QPainter(self)
        try:
            self._gizmo.paint(painter)
        finally:
            painter.end()

    def mousePressEvent(self, ev: QtGui.QMouseEvent) -> None:
        self._press_handled = False
        if ev.button() == QtCore.Qt.MouseButton.LeftButton and self._gizmo is not None:
            self._sync_camera()
            self._press_handled = self._gizmo.handle_press(ev.position())
        if self._press_handled:
            ev.accept()
            return
        super().mousePressEvent(ev)

    def mouseMoveEvent(self, ev: QtGui.QMouseEvent) -> None:
        if self._press_handled and self._gizmo is not None:
            if not (ev.buttons() & QtCore.Qt.MouseButton.LeftButton):
                self._gizmo.cancel()
                self._press_handled = False
                return
            self._gizmo.handle_move(ev.position())
            ev.accept()
            return
        if self._gizmo is not None:
            self._sync_camera()
            self._gizmo.activeAxis = int(self._gizmo.hover_axis(ev.position()))
        super().mouseMoveEvent(ev)

    def mouseReleaseEvent(self, ev: QtGui.QMouseEvent) -> None:
        if self._press_handled and self._gizmo is not None:
            self._gizmo.handle_release(ev.position())
            self._press_handled = False
            ev.accept()
            return
        super().mouseReleaseEvent(ev)

    def keyPressEvent(self, ev: QtGui.QKeyEvent) -> None:
        if ev.key() == QtCore.Qt.Key.Key_Escape and self._gizmo is not None and self._gizmo.cancel():
            self._press_handled = False
            ev.accept()
            return
        super().keyPressEvent(ev)

    def focusOutEvent(self, ev: QtGui.QFocusEvent) -> None:
        if self._gizmo is not None and self._gizmo.cancel():
            self._log.debug("focus lost mid-drag; drag cancelled")
            self._press_handled = False
        super().focusOutEvent(ev)

    def wheelEvent(self, ev: QtGui.QWheelEvent) -> None:
        super().wheelEvent(ev)
        self._sync_camera()
