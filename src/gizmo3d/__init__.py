from .core import (
    Axis,
    Camera,
    GizmoDelta,
    GizmoEnded,
    GizmoKind,
    GizmoStarted,
    GizmoStateMachine,
    SceneNode,
    SceneNodeRef,
    SnapConfig,
    TransformMode,
)

__all__ = [
    "Axis",
    "Camera",
    "GizmoDelta",
    "GizmoEnded",
    "GizmoKind",
    "GizmoStarted",
    "GizmoStateMachine",
    "SceneNode",
    "SceneNodeRef",
    "SnapConfig",
    "TransformMode",
]
