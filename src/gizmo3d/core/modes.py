from __future__ import annotations

import numpy as np

from .axes import Axis, TransformMode
from .scene import Vector, quat_to_matrix

_WORLD_BASIS = {
    Axis.X: np.array([1.0, 0.0, 0.0], dtype=float),
    Axis.Y: np.array([0.0, 1.0, 0.0], dtype=float),
    Axis.Z: np.array([0.0, 0.0, 1.0], dtype=float),
}


def world_basis(axis: Axis) -> Vector | None:
    basis = _WORLD_BASIS.get(Axis(axis))
    if basis is None:
        return None
    return basis.copy()


def resolve_axis_direction(axis: Axis, mode: TransformMode, orientation: Vector | None = None) -> Vector | None:
    """Unit world-space direction of ``axis`` under ``mode``.

    Local mode rotates the basis vector by the node orientation (w, x, y, z).
    ``Axis.UNIFORM`` and ``Axis.NONE`` have no single direction and return None.
    """
    basis = world_basis(axis)
    if basis is None:
        return None
    if TransformMode(mode) == TransformMode.WORLD or orientation is None:
        return basis
    direction = quat_to_matrix(orientation) @ basis
    return direction / max(float(np.linalg.norm(direction)), 1e-12)


def resolve_axis_frame(mode: TransformMode, orientation: Vector | None = None) -> dict[Axis, Vector]:
    frame: dict[Axis, Vector] = {}
    for axis in (Axis.X, Axis.Y, Axis.Z):
        direction = resolve_axis_direction(axis, mode, orientation)
        if direction is not None:
            frame[axis] = direction
    return frame
