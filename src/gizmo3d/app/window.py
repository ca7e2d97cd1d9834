from __future__ import annotations

import logging

import numpy as np
from PySide6 import QtCore, QtGui, QtWidgets

from ..core import Axis, SceneNode, TransformMode
from ..gizmos import GizmoBase, RotationGizmo, ScaleGizmo, TranslationGizmo
from .transform_controller import TransformController

_viewport_error: str | None = None

try:
    from .viewport import GizmoViewport  # type: ignore
    _viewport_available = True
except Exception as exc:  # pragma: no cover - optional dependency
    GizmoViewport = None  # type: ignore
    _viewport_available = False
    _viewport_error = str(exc)


def viewport_error() -> str | None:
    if _viewport_available:
        return None
    return _viewport_error


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Gizmo3D Demo")
        self.resize(1000, 700)
        self._log = logging.getLogger(__name__)

        self._node = SceneNode("box")
        self._controller = TransformController(self._node, self)
        self._controller.node_changed.connect(self._on_node_changed)

        self._gizmos: dict[str, GizmoBase] = {
            "move": TranslationGizmo(self),
            "rotate": RotationGizmo(self),
            "scale": ScaleGizmo(self),
        }
        for gizmo in self._gizmos.values():
            gizmo.set_target_node(self._node)
            self._controller.attach(gizmo)
            gizmo.add_listener(self._on_gizmo_event)

        if GizmoViewport is not None:
            self._viewport = GizmoViewport(self._node)
            self.setCentralWidget(self._viewport)
        else:
            self._viewport = None
            label = QtWidgets.QLabel(f"3D view unavailable: {viewport_error()}")
            label.setAlignment(QtCore.Qt.AlignCenter)
            self.setCentralWidget(label)

        self._tool_group = QtGui.QActionGroup(self)
        self._tool_group.setExclusive(True)
        self._tool_actions: dict[str, QtGui.QAction] = {}
        for key, label, shortcut in (("move", "Move", "W"), ("rotate", "Rotate", "E"), ("scale", "Scale", "R")):
            action = QtGui.QAction(label, self)
            action.setCheckable(True)
            action.setShortcut(QtGui.QKeySequence(shortcut))
            action.triggered.connect(lambda _checked=False, name=key: self._select_tool(name))
            self._tool_group.addAction(action)
            self._tool_actions[key] = action

        self._local_action = QtGui.QAction("Local Axes", self)
        self._local_action.setCheckable(True)
        self._local_action.setShortcut(QtGui.QKeySequence("L"))
        self._local_action.toggled.connect(self._on_local_toggled)

        self._snap_action = QtGui.QAction("Snap", self)
        self._snap_action.setCheckable(True)
        self._snap_action.setShortcut(QtGui.QKeySequence("S"))
        self._snap_action.toggled.connect(self._on_snap_toggled)

        self._reset_action = QtGui.QAction("Reset Node", self)
        self._reset_action.triggered.connect(self._reset_node)

        toolbar = self.addToolBar("Tools")
        for action in self._tool_actions.values():
            toolbar.addAction(action)
        toolbar.addSeparator()
        toolbar.addAction(self._local_action)
        toolbar.addAction(self._snap_action)
        toolbar.addSeparator()
        toolbar.addAction(self._reset_action)

        self._status = QtWidgets.QLabel()
        self.statusBar().addPermanentWidget(self._status)

        self._active_key = ""
        self._tool_actions["move"].setChecked(True)
        self._select_tool("move")

    @property
    def active_gizmo(self) -> GizmoBase:
        return self._gizmos[self._active_key]

    def _select_tool(self, key: str) -> None:
        if key == self._active_key:
            return
        if self._active_key:
            self.active_gizmo.cancel()
        self._active_key = key
        if self._viewport is not None:
            self._viewport.set_gizmo(self.active_gizmo)
        self._update_status()

    def _on_local_toggled(self, checked: bool) -> None:
        mode = TransformMode.LOCAL if checked else TransformMode.WORLD
        for gizmo in self._gizmos.values():
            gizmo.transformMode = int(mode)
        self._update_status()

    def _on_snap_toggled(self, checked: bool) -> None:
        for gizmo in self._gizmos.values():
            gizmo.snapEnabled = checked
        self._update_status()

    def _reset_node(self) -> None:
        self.active_gizmo.cancel()
        self._node.position = np.zeros(3, dtype=float)
        self._node.orientation = np.array([1.0, 0.0, 0.0, 0.0], dtype=float)
        self._node.scale = np.ones(3, dtype=float)
        self._on_node_changed()

    def _on_node_changed(self) -> None:
        if self._viewport is not None:
            self._viewport.refresh_node()
        self._update_status()

    def _on_gizmo_event(self, event: object) -> None:
        self._log.debug("gizmo event %s", event)

    def _update_status(self) -> None:
        pos = self._node.world_position()
        scale = self._node.world_scale()
        mode = "local" if self._local_action.isChecked() else "world"
        snap = "on" if self._snap_action.isChecked() else "off"
        axis = Axis(self.active_gizmo.activeAxis).name if self._active_key else "NONE"
        self._status.setText(
            f"{self._active_key} | axes {mode} | snap {snap} | axis {axis} | "
            f"pos ({pos[0]:.2f}, {pos[1]:.2f}, {pos[2]:.2f}) | "
            f"scale ({scale[0]:.2f}, {scale[1]:.2f}, {scale[2]:.2f})"
        )

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        for gizmo in self._gizmos.values():
            gizmo.dispose()
        self._node.release()
        super().closeEvent(event)
