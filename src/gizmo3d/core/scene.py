from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol

import numpy as np

Vector = np.ndarray
IDENTITY_QUATERNION = (1.0, 0.0, 0.0, 0.0)


def to_vector(values: Iterable[float], *, length: int | None = None) -> Vector:
    arr = np.asarray(list(values), dtype=float)
    if arr.ndim != 1:
        raise ValueError("Vector must be 1D")
    if length is not None and arr.size != length:
        raise ValueError(f"Vector must have length {length}")
    return arr


def to_scale_vector(values: object) -> Vector:
    if np.isscalar(values):
        scale = float(values)  # type: ignore[arg-type]
        return np.array([scale, scale, scale], dtype=float)
    return to_vector(values, length=3)  # type: ignore[arg-type]


def normalize_quaternion(q: Vector) -> Vector:
    q_arr = np.asarray(q, dtype=float).reshape(4)
    norm = float(np.linalg.norm(q_arr))
    if norm <= 0.0:
        raise ValueError("Quaternion must be non-zero")
    return q_arr / norm


def quat_multiply(q_left: Vector, q_right: Vector) -> Vector:
    w1, x1, y1, z1 = np.asarray(q_left, dtype=float).reshape(4)
    w2, x2, y2, z2 = np.asarray(q_right, dtype=float).reshape(4)
    return np.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ],
        dtype=float,
    )


def quat_to_matrix(q: Vector) -> np.ndarray:
    w, x, y, z = normalize_quaternion(q)
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
            [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
        ],
        dtype=float,
    )


def quat_from_axis_angle(axis: Vector, angle_deg: float) -> Vector:
    axis_arr = np.asarray(axis, dtype=float).reshape(3)
    norm = float(np.linalg.norm(axis_arr))
    if norm <= 1e-12:
        return np.array(IDENTITY_QUATERNION, dtype=float)
    axis_arr = axis_arr / norm
    half = 0.5 * np.deg2rad(angle_deg)
    return np.array(
        [np.cos(half), axis_arr[0] * np.sin(half), axis_arr[1] * np.sin(half), axis_arr[2] * np.sin(half)],
        dtype=float,
    )


class SceneNodeRef(Protocol):
    """Read-only view of a host scene node.

    Implementations are looked up fresh on every call; the gizmo never caches
    the returned arrays and never writes back through this interface.
    """

    def world_position(self) -> Vector:
        ...

    def world_orientation(self) -> Vector:
        ...

    def world_scale(self) -> Vector:
        ...

    def is_valid(self) -> bool:
        ...


@dataclass(eq=False)
class SceneNode:
    name: str = "node"
    position: Vector = field(default_factory=lambda: np.zeros(3, dtype=float))
    orientation: Vector = field(default_factory=lambda: np.array(IDENTITY_QUATERNION, dtype=float))
    scale: Vector = field(default_factory=lambda: np.ones(3, dtype=float))
    _released: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        self.position = to_vector(self.position, length=3)
        self.orientation = normalize_quaternion(to_vector(self.orientation, length=4))
        self.scale = to_scale_vector(self.scale)

    def world_position(self) -> Vector:
        return self.position.copy()

    def world_orientation(self) -> Vector:
        return self.orientation.copy()

    def world_scale(self) -> Vector:
        return self.scale.copy()

    def rotation_matrix(self) -> np.ndarray:
        return quat_to_matrix(self.orientation)

    def is_valid(self) -> bool:
        return not self._released

    def release(self) -> None:
        self._released = True


def node_is_valid(node: SceneNodeRef | None) -> bool:
    if node is None:
        return False
    check = getattr(node, "is_valid", None)
    if check is None:
        return True
    return bool(check())
