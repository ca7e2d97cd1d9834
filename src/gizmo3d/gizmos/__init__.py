from .base import GizmoBase
from .rotation import RotationGizmo
from .scale import ScaleGizmo
from .translation import TranslationGizmo

__all__ = [
    "GizmoBase",
    "RotationGizmo",
    "ScaleGizmo",
    "TranslationGizmo",
]
