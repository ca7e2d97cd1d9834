from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np

from ..config import DEFAULT_SETTINGS, GizmoSettings
from .axes import Axis, GizmoKind, TransformMode
from .camera import Camera
from .modes import resolve_axis_frame
from .scene import Vector

_PROBE_FRACTION = 0.01


@dataclass(frozen=True)
class ProjectedAxis:
    axis: Axis
    origin: Vector
    direction: Vector
    pixels_per_unit: float
    foreshortening: float
    degenerate: bool

    @classmethod
    def degenerate_at(cls, axis: Axis, origin: Vector | None) -> "ProjectedAxis":
        point = np.zeros(2, dtype=float) if origin is None else origin
        return cls(
            axis=axis,
            origin=point,
            direction=np.zeros(2, dtype=float),
            pixels_per_unit=0.0,
            foreshortening=0.0,
            degenerate=True,
        )

    def handle_length(self, gizmo_size: float) -> float:
        return float(gizmo_size) * min(1.0, self.foreshortening)

    def segment(self, gizmo_size: float, start_ratio: float = 0.0, end_ratio: float = 1.0) -> np.ndarray:
        length = self.handle_length(gizmo_size)
        start = self.origin + self.direction * length * start_ratio
        end = self.origin + self.direction * length * end_ratio
        return np.vstack([start, end])


def _probe_length(camera: Camera, position: Vector) -> float:
    distance = float(np.linalg.norm(camera.eye - position))
    return max(distance * _PROBE_FRACTION, 1e-6)


def reference_pixels_per_unit(camera: Camera, position: Vector) -> float:
    """Pixels per world unit for a vector lying in the view plane at ``position``."""
    origin = camera.project(position)
    probe = _probe_length(camera, position)
    end = camera.project(position + camera.right * probe)
    if origin is None or end is None:
        return 0.0
    return float(np.linalg.norm(end - origin)) / probe


def project_axis(
    camera: Camera,
    position: Vector,
    direction: Vector,
    *,
    axis: Axis = Axis.NONE,
    settings: GizmoSettings = DEFAULT_SETTINGS,
) -> ProjectedAxis:
    pos = np.asarray(position, dtype=float).reshape(3)
    axis_dir = np.asarray(direction, dtype=float).reshape(3)
    origin = camera.project(pos)
    if origin is None:
        return ProjectedAxis.degenerate_at(axis, None)
    probe = _probe_length(camera, pos)
    end = camera.project(pos + axis_dir * probe)
    ref_end = camera.project(pos + camera.right * probe)
    if end is None or ref_end is None:
        return ProjectedAxis.degenerate_at(axis, origin)
    screen_vec = end - origin
    pixel_len = float(np.hypot(screen_vec[0], screen_vec[1]))
    ref_len = float(np.linalg.norm(ref_end - origin))
    if ref_len <= 1e-12:
        return ProjectedAxis.degenerate_at(axis, origin)
    foreshortening = pixel_len / ref_len
    if foreshortening < settings.degenerate_epsilon:
        return ProjectedAxis.degenerate_at(axis, origin)
    return ProjectedAxis(
        axis=axis,
        origin=origin,
        direction=screen_vec / pixel_len,
        pixels_per_unit=pixel_len / probe,
        foreshortening=foreshortening,
        degenerate=False,
    )


def project_ring(
    camera: Camera,
    position: Vector,
    normal: Vector,
    radius_px: float,
    *,
    segments: int = DEFAULT_SETTINGS.ring_segments,
) -> np.ndarray | None:
    pos = np.asarray(position, dtype=float).reshape(3)
    ppu = reference_pixels_per_unit(camera, pos)
    if ppu <= 1e-12:
        return None
    radius = float(radius_px) / ppu
    n = np.asarray(normal, dtype=float).reshape(3)
    n = n / max(float(np.linalg.norm(n)), 1e-12)
    helper = np.array([0.0, 0.0, 1.0]) if abs(float(n[2])) < 0.9 else np.array([1.0, 0.0, 0.0])
    u = np.cross(n, helper)
    u = u / max(float(np.linalg.norm(u)), 1e-12)
    v = np.cross(n, u)
    angles = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    points: List[Vector] = []
    for angle in angles:
        world = pos + radius * (np.cos(angle) * u + np.sin(angle) * v)
        screen = camera.project(world)
        if screen is None:
            return None
        points.append(screen)
    return np.vstack(points)


def distance_to_segment(p: Vector, a: Vector, b: Vector) -> float:
    ax, ay = float(a[0]), float(a[1])
    bx, by = float(b[0]), float(b[1])
    px, py = float(p[0]), float(p[1])
    dx = bx - ax
    dy = by - ay
    if abs(dx) < 1e-6 and abs(dy) < 1e-6:
        return float(np.hypot(px - ax, py - ay))
    t = ((px - ax) * dx + (py - ay) * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))
    proj_x = ax + t * dx
    proj_y = ay + t * dy
    return float(np.hypot(px - proj_x, py - proj_y))


def distance_to_polyline(p: Vector, points: Sequence[Vector], closed: bool = True) -> float:
    if len(points) < 2:
        return float("inf")
    min_dist = float("inf")
    for idx in range(len(points) - 1):
        dist = distance_to_segment(p, points[idx], points[idx + 1])
        if dist < min_dist:
            min_dist = dist
    if closed:
        min_dist = min(min_dist, distance_to_segment(p, points[-1], points[0]))
    return min_dist


@dataclass(frozen=True)
class AxisHandle:
    """Screen-space pick/draw geometry for one axis of a gizmo."""

    axis: Axis
    points: np.ndarray
    closed: bool = False
    half_size: float = 0.0
    projected: ProjectedAxis | None = None

    def distance(self, pointer: Vector) -> float:
        p = np.asarray(pointer, dtype=float).reshape(2)
        if len(self.points) == 1:
            dx, dy = np.abs(p - self.points[0])
            return max(0.0, float(max(dx, dy)) - self.half_size)
        if len(self.points) == 2 and not self.closed:
            return distance_to_segment(p, self.points[0], self.points[1])
        return distance_to_polyline(p, self.points, closed=self.closed)


def build_handles(
    kind: GizmoKind,
    camera: Camera,
    position: Vector,
    orientation: Vector,
    mode: TransformMode,
    gizmo_size: float,
    *,
    arrow_start_ratio: float = 0.0,
    arrow_end_ratio: float = 1.0,
    settings: GizmoSettings = DEFAULT_SETTINGS,
) -> List[AxisHandle]:
    """Screen geometry for every pickable axis, in tie-break priority order.

    View-parallel axes are left out for arrow handles; rings are always kept.
    """
    handles: List[AxisHandle] = []
    frame = resolve_axis_frame(mode, orientation)
    for axis in kind.axes:
        if axis == Axis.UNIFORM:
            origin = camera.project(position)
            if origin is not None:
                handles.append(
                    AxisHandle(axis=axis, points=origin.reshape(1, 2), half_size=settings.uniform_handle_size * 0.5)
                )
            continue
        direction = frame[axis]
        if kind == GizmoKind.ROTATION:
            ring = project_ring(camera, position, direction, gizmo_size, segments=settings.ring_segments)
            if ring is not None:
                handles.append(AxisHandle(axis=axis, points=ring, closed=True))
            continue
        projected = project_axis(camera, position, direction, axis=axis, settings=settings)
        if projected.degenerate:
            continue
        if kind == GizmoKind.SCALE:
            points = projected.segment(gizmo_size, arrow_start_ratio, arrow_end_ratio)
        else:
            points = projected.segment(gizmo_size)
        handles.append(AxisHandle(axis=axis, points=points, projected=projected))
    return handles


def hit_test(
    pointer: Vector,
    handles: Iterable[AxisHandle],
    tolerance: float = DEFAULT_SETTINGS.hit_tolerance_px,
) -> Axis:
    best_axis = Axis.NONE
    best_dist = float("inf")
    for handle in sorted(handles, key=lambda h: int(h.axis)):
        dist = handle.distance(pointer)
        if dist < best_dist:
            best_dist = dist
            best_axis = handle.axis
    if best_dist <= tolerance:
        return best_axis
    return Axis.NONE
