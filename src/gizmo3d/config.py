from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class GizmoSettings:
    hit_tolerance_px: float = 12.0
    degenerate_epsilon: float = 1e-3
    scale_floor: float = 1e-3
    uniform_drag_direction: tuple[float, float] = (1.0, -1.0)
    uniform_handle_size: float = 12.0
    ring_segments: int = 64
    pointer_epsilon_px: float = 1e-6


DEFAULT_SETTINGS = GizmoSettings()


def debug_enabled() -> bool:
    return os.getenv("GIZMO3D_DEBUG", "").lower() in {"1", "true", "yes", "on"}
