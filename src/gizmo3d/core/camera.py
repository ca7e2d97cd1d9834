from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from .scene import Vector, to_vector


def _normalized(vec: Vector) -> Vector:
    return vec / max(float(np.linalg.norm(vec)), 1e-12)


def look_at_matrix(eye: Vector, target: Vector, up: Vector) -> np.ndarray:
    forward = _normalized(np.asarray(target, dtype=float) - np.asarray(eye, dtype=float))
    side = np.cross(forward, np.asarray(up, dtype=float))
    if float(np.linalg.norm(side)) <= 1e-9:
        raise ValueError("Camera up vector must not be parallel to the view direction")
    side = _normalized(side)
    true_up = np.cross(side, forward)
    view = np.eye(4, dtype=float)
    view[0, :3] = side
    view[1, :3] = true_up
    view[2, :3] = -forward
    view[0, 3] = -float(np.dot(side, eye))
    view[1, 3] = -float(np.dot(true_up, eye))
    view[2, 3] = float(np.dot(forward, eye))
    return view


def perspective_matrix(fov_deg: float, aspect: float, near: float, far: float) -> np.ndarray:
    if near <= 0 or far <= near:
        raise ValueError("Perspective requires 0 < near < far")
    f = 1.0 / np.tan(np.deg2rad(fov_deg) * 0.5)
    return np.array(
        [
            [f / aspect, 0.0, 0.0, 0.0],
            [0.0, f, 0.0, 0.0],
            [0.0, 0.0, (far + near) / (near - far), 2.0 * far * near / (near - far)],
            [0.0, 0.0, -1.0, 0.0],
        ],
        dtype=float,
    )


def orthographic_matrix(height: float, aspect: float, near: float, far: float) -> np.ndarray:
    if height <= 0 or far <= near:
        raise ValueError("Orthographic projection requires a positive height and near < far")
    width = height * aspect
    return np.array(
        [
            [2.0 / width, 0.0, 0.0, 0.0],
            [0.0, 2.0 / height, 0.0, 0.0],
            [0.0, 0.0, -2.0 / (far - near), -(far + near) / (far - near)],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=float,
    )


@dataclass
class Camera:
    """View/projection pair plus the pixel viewport it maps onto.

    Screen coordinates follow the widget convention: origin at the top-left,
    x to the right, y downwards.
    """

    view: np.ndarray = field(default_factory=lambda: np.eye(4, dtype=float))
    projection: np.ndarray = field(default_factory=lambda: np.eye(4, dtype=float))
    viewport: tuple[float, float] = (1.0, 1.0)

    def __post_init__(self) -> None:
        self.view = np.asarray(self.view, dtype=float)
        self.projection = np.asarray(self.projection, dtype=float)
        if self.view.shape != (4, 4) or self.projection.shape != (4, 4):
            raise ValueError("Camera matrices must be 4x4")
        width, height = (float(v) for v in self.viewport)
        if width <= 0 or height <= 0:
            raise ValueError("Viewport must have a positive size")
        self.viewport = (width, height)

    @classmethod
    def look_at(
        cls,
        eye: Iterable[float],
        target: Iterable[float],
        up: Iterable[float] = (0.0, 1.0, 0.0),
        *,
        fov_deg: float = 60.0,
        viewport: tuple[float, float] = (800.0, 600.0),
        near: float = 0.1,
        far: float = 1000.0,
    ) -> "Camera":
        eye_vec = to_vector(eye, length=3)
        view = look_at_matrix(eye_vec, to_vector(target, length=3), to_vector(up, length=3))
        aspect = float(viewport[0]) / float(viewport[1])
        return cls(view=view, projection=perspective_matrix(fov_deg, aspect, near, far), viewport=viewport)

    @classmethod
    def orthographic(
        cls,
        eye: Iterable[float],
        target: Iterable[float],
        up: Iterable[float] = (0.0, 1.0, 0.0),
        *,
        height: float = 10.0,
        viewport: tuple[float, float] = (800.0, 600.0),
        near: float = 0.1,
        far: float = 1000.0,
    ) -> "Camera":
        eye_vec = to_vector(eye, length=3)
        view = look_at_matrix(eye_vec, to_vector(target, length=3), to_vector(up, length=3))
        aspect = float(viewport[0]) / float(viewport[1])
        return cls(view=view, projection=orthographic_matrix(height, aspect, near, far), viewport=viewport)

    @property
    def view_projection(self) -> np.ndarray:
        return self.projection @ self.view

    @property
    def eye(self) -> Vector:
        return np.linalg.inv(self.view)[:3, 3]

    @property
    def right(self) -> Vector:
        return _normalized(self.view[0, :3].copy())

    @property
    def forward(self) -> Vector:
        return _normalized(-self.view[2, :3].copy())

    def is_orthographic(self) -> bool:
        return abs(float(self.projection[3, 3]) - 1.0) < 1e-12 and abs(float(self.projection[3, 2])) < 1e-12

    def direction_to_camera(self, point: Vector) -> Vector:
        if self.is_orthographic():
            return -self.forward
        return _normalized(self.eye - np.asarray(point, dtype=float))

    def project(self, point: Vector) -> Vector | None:
        pos = np.asarray(point, dtype=float).reshape(3)
        clip = self.view_projection @ np.array([pos[0], pos[1], pos[2], 1.0], dtype=float)
        if clip[3] <= 1e-9:
            return None
        ndc_x = clip[0] / clip[3]
        ndc_y = clip[1] / clip[3]
        width, height = self.viewport
        screen_x = (ndc_x + 1.0) * 0.5 * width
        screen_y = (1.0 - ndc_y) * 0.5 * height
        return np.array([screen_x, screen_y], dtype=float)
