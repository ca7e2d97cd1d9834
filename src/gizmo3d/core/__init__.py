from .axes import Axis, GizmoKind, TransformMode
from .camera import Camera
from .drag import DragBaseline, DragSample, RotationTracker, ScaleTracker, TranslationTracker, create_tracker
from .events import GizmoDelta, GizmoEnded, GizmoEvent, GizmoEventHandler, GizmoStarted
from .modes import resolve_axis_direction, world_basis
from .projection import AxisHandle, ProjectedAxis, build_handles, hit_test, project_axis, project_ring
from .scene import SceneNode, SceneNodeRef, Vector, quat_from_axis_angle, quat_multiply, quat_to_matrix
from .snap import SnapAccumulator, SnapConfig, snap_value
from .state import DEFAULT_GIZMO_SIZE, DEFAULT_SNAP, GizmoInteractionState, GizmoStateMachine

__all__ = [
    "Axis",
    "AxisHandle",
    "Camera",
    "create_tracker",
    "DEFAULT_GIZMO_SIZE",
    "DEFAULT_SNAP",
    "DragBaseline",
    "DragSample",
    "GizmoDelta",
    "GizmoEnded",
    "GizmoEvent",
    "GizmoEventHandler",
    "GizmoInteractionState",
    "GizmoKind",
    "GizmoStarted",
    "GizmoStateMachine",
    "build_handles",
    "hit_test",
    "ProjectedAxis",
    "project_axis",
    "project_ring",
    "quat_from_axis_angle",
    "quat_multiply",
    "quat_to_matrix",
    "resolve_axis_direction",
    "RotationTracker",
    "ScaleTracker",
    "SceneNode",
    "SceneNodeRef",
    "SnapAccumulator",
    "SnapConfig",
    "snap_value",
    "TransformMode",
    "TranslationTracker",
    "Vector",
    "world_basis",
]
