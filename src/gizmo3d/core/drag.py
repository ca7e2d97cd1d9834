from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..config import DEFAULT_SETTINGS, GizmoSettings
from .axes import Axis, GizmoKind, TransformMode
from .camera import Camera
from .modes import resolve_axis_direction
from .projection import project_axis
from .scene import SceneNodeRef, Vector


def _frozen(values: Vector) -> Vector:
    arr = np.array(values, dtype=float, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class DragBaseline:
    """Snapshot taken once at drag start; never recomputed mid-drag."""

    pointer: Vector
    position: Vector
    orientation: Vector
    scale: Vector
    gizmo_size: float
    mode: TransformMode

    @classmethod
    def capture(
        cls,
        node: SceneNodeRef,
        pointer: Vector,
        gizmo_size: float,
        mode: TransformMode,
    ) -> "DragBaseline":
        return cls(
            pointer=_frozen(np.asarray(pointer, dtype=float).reshape(2)),
            position=_frozen(node.world_position()),
            orientation=_frozen(node.world_orientation()),
            scale=_frozen(node.world_scale()),
            gizmo_size=float(gizmo_size),
            mode=TransformMode(mode),
        )

    def value_for(self, kind: GizmoKind) -> Vector:
        if kind == GizmoKind.ROTATION:
            return self.orientation
        if kind == GizmoKind.SCALE:
            return self.scale
        return self.position


@dataclass(frozen=True)
class DragSample:
    camera: Camera
    position: Vector
    orientation: Vector


class DragTracker:
    identity = 0.0

    def __init__(
        self,
        axis: Axis,
        baseline: DragBaseline,
        camera: Camera,
        settings: GizmoSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.axis = axis
        self.baseline = baseline
        self.settings = settings
        self._last = self.identity

    @property
    def last(self) -> float:
        return self._last

    def update(self, pointer: Vector, sample: DragSample) -> float:
        raise NotImplementedError


class TranslationTracker(DragTracker):
    def update(self, pointer: Vector, sample: DragSample) -> float:
        direction = resolve_axis_direction(self.axis, self.baseline.mode, sample.orientation)
        if direction is None:
            return self._last
        # Re-projected every sample: the controller may already have moved the node.
        projected = project_axis(sample.camera, sample.position, direction, axis=self.axis, settings=self.settings)
        if projected.degenerate or projected.pixels_per_unit <= 0.0:
            return self._last
        offset = np.asarray(pointer, dtype=float).reshape(2) - self.baseline.pointer
        delta_pixels = float(np.dot(offset, projected.direction))
        self._last = delta_pixels / projected.pixels_per_unit
        return self._last


class RotationTracker(DragTracker):
    """Accumulates the unwrapped angle swept around the projected node origin."""

    def __init__(
        self,
        axis: Axis,
        baseline: DragBaseline,
        camera: Camera,
        settings: GizmoSettings = DEFAULT_SETTINGS,
    ) -> None:
        super().__init__(axis, baseline, camera, settings)
        self._total_screen_deg = 0.0
        self.start_vector = np.zeros(2, dtype=float)
        self._prev_vec = np.zeros(2, dtype=float)
        origin = camera.project(baseline.position)
        if origin is not None:
            self._prev_vec = baseline.pointer - origin
            self.start_vector = self._prev_vec.copy()
        direction = resolve_axis_direction(axis, baseline.mode, baseline.orientation)
        facing = 1.0
        if direction is not None:
            facing = float(np.dot(direction, camera.direction_to_camera(baseline.position)))
        # Screen y points down, so a clockwise sweep is positive in pixel space.
        self._sign = -1.0 if facing >= 0.0 else 1.0

    @property
    def screen_sweep_deg(self) -> float:
        """Counter-clockwise sweep as seen on screen."""
        return -self._total_screen_deg

    def update(self, pointer: Vector, sample: DragSample) -> float:
        origin = sample.camera.project(sample.position)
        if origin is None:
            return self._last
        curr_vec = np.asarray(pointer, dtype=float).reshape(2) - origin
        eps = self.settings.pointer_epsilon_px
        if np.hypot(curr_vec[0], curr_vec[1]) <= eps:
            return self._last
        if np.hypot(self._prev_vec[0], self._prev_vec[1]) <= eps:
            self._prev_vec = curr_vec
            self.start_vector = curr_vec.copy()
            return self._last
        prev_norm = self._prev_vec / np.hypot(self._prev_vec[0], self._prev_vec[1])
        curr_norm = curr_vec / np.hypot(curr_vec[0], curr_vec[1])
        cross = prev_norm[0] * curr_norm[1] - prev_norm[1] * curr_norm[0]
        dot = prev_norm[0] * curr_norm[0] + prev_norm[1] * curr_norm[1]
        step = float(np.degrees(np.arctan2(cross, dot)))
        if step <= -180.0:
            step += 360.0
        self._total_screen_deg += step
        self._prev_vec = curr_vec
        self._last = self._sign * self._total_screen_deg
        return self._last


class ScaleTracker(DragTracker):
    identity = 1.0

    def __init__(
        self,
        axis: Axis,
        baseline: DragBaseline,
        camera: Camera,
        settings: GizmoSettings = DEFAULT_SETTINGS,
    ) -> None:
        super().__init__(axis, baseline, camera, settings)
        self._span = max(baseline.gizmo_size, 1e-6)
        self._screen_dir = self._uniform_direction()
        if axis != Axis.UNIFORM:
            direction = resolve_axis_direction(axis, baseline.mode, baseline.orientation)
            if direction is not None:
                projected = project_axis(camera, baseline.position, direction, axis=axis, settings=settings)
                if not projected.degenerate:
                    self._screen_dir = projected.direction

    def _uniform_direction(self) -> Vector:
        vec = np.asarray(self.settings.uniform_drag_direction, dtype=float).reshape(2)
        return vec / max(float(np.hypot(vec[0], vec[1])), 1e-12)

    def update(self, pointer: Vector, sample: DragSample) -> float:
        offset = np.asarray(pointer, dtype=float).reshape(2) - self.baseline.pointer
        factor = 1.0 + float(np.dot(offset, self._screen_dir)) / self._span
        self._last = max(self.settings.scale_floor, factor)
        return self._last


_TRACKERS = {
    GizmoKind.TRANSLATION: TranslationTracker,
    GizmoKind.ROTATION: RotationTracker,
    GizmoKind.SCALE: ScaleTracker,
}


def create_tracker(
    kind: GizmoKind,
    axis: Axis,
    baseline: DragBaseline,
    camera: Camera,
    settings: GizmoSettings = DEFAULT_SETTINGS,
) -> DragTracker:
    tracker_cls = _TRACKERS.get(GizmoKind(kind))
    if tracker_cls is None:
        raise ValueError(f"Unsupported gizmo kind: {kind}")
    return tracker_cls(axis, baseline, camera, settings)
