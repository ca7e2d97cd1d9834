from __future__ import annotations

import logging

import numpy as np
from PySide6 import QtCore

from ..core import Axis, SceneNode, TransformMode, quat_from_axis_angle, quat_multiply, resolve_axis_direction
from ..core.scene import normalize_quaternion
from ..gizmos import GizmoBase, RotationGizmo, ScaleGizmo, TranslationGizmo

_LOG = logging.getLogger(__name__)

_SCALE_MASKS = {
    Axis.X: np.array([1.0, 0.0, 0.0]),
    Axis.Y: np.array([0.0, 1.0, 0.0]),
    Axis.Z: np.array([0.0, 0.0, 1.0]),
    Axis.UNIFORM: np.array([1.0, 1.0, 1.0]),
}


class TransformController(QtCore.QObject):
    """Applies gizmo deltas to a node: ``baseline (+|*) delta`` per drag."""

    node_changed = QtCore.Signal()

    def __init__(self, node: SceneNode | None = None, parent: QtCore.QObject | None = None) -> None:
        super().__init__(parent)
        self._node = node
        self._start_position = np.zeros(3, dtype=float)
        self._start_orientation = np.array([1.0, 0.0, 0.0, 0.0], dtype=float)
        self._start_scale = np.ones(3, dtype=float)

    @property
    def node(self) -> SceneNode | None:
        return self._node

    def set_node(self, node: SceneNode | None) -> None:
        self._node = node

    def attach(self, gizmo: GizmoBase) -> None:
        if isinstance(gizmo, TranslationGizmo):
            gizmo.translationStarted.connect(self._capture_baseline)
            gizmo.translationDelta.connect(self._apply_translation)
        elif isinstance(gizmo, RotationGizmo):
            gizmo.rotationStarted.connect(self._capture_baseline)
            gizmo.rotationDelta.connect(self._apply_rotation)
        elif isinstance(gizmo, ScaleGizmo):
            gizmo.scaleStarted.connect(self._capture_baseline)
            gizmo.scaleDelta.connect(self._apply_scale)
        else:
            raise ValueError(f"Unsupported gizmo: {type(gizmo).__name__}")

    def _capture_baseline(self, axis: int) -> None:
        _ = axis
        if self._node is None:
            return
        self._start_position = self._node.world_position()
        self._start_orientation = self._node.world_orientation()
        self._start_scale = self._node.world_scale()

    def _apply_translation(self, axis: int, mode: int, distance: float, snap_active: bool) -> None:
        _ = snap_active
        if self._node is None:
            return
        direction = resolve_axis_direction(Axis(axis), TransformMode(mode), self._start_orientation)
        if direction is None:
            return
        self._node.position = self._start_position + direction * float(distance)
        self.node_changed.emit()

    def _apply_rotation(self, axis: int, mode: int, angle_deg: float, snap_active: bool) -> None:
        _ = snap_active
        if self._node is None:
            return
        direction = resolve_axis_direction(Axis(axis), TransformMode(mode), self._start_orientation)
        if direction is None:
            return
        delta = quat_from_axis_angle(direction, float(angle_deg))
        # World-space axis, so the delta is applied on the left.
        self._node.orientation = normalize_quaternion(quat_multiply(delta, self._start_orientation))
        self.node_changed.emit()

    def _apply_scale(self, axis: int, mode: int, factor: float, snap_active: bool) -> None:
        _ = (mode, snap_active)
        if self._node is None:
            return
        mask = _SCALE_MASKS.get(Axis(axis))
        if mask is None:
            _LOG.debug("ignoring scale delta for axis %s", axis)
            return
        multiplier = np.where(mask > 0.0, float(factor), 1.0)
        self._node.scale = self._start_scale * multiplier
        self.node_changed.emit()
