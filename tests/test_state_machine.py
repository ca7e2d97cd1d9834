import logging
from typing import List

import numpy as np
import pytest

from gizmo3d.core import (
    Axis,
    Camera,
    GizmoDelta,
    GizmoEnded,
    GizmoEvent,
    GizmoKind,
    GizmoStarted,
    GizmoStateMachine,
    SceneNode,
    SnapConfig,
    TransformMode,
)
from gizmo3d.core.scene import quat_from_axis_angle


def _machine(kind: GizmoKind, camera: Camera, node: SceneNode) -> tuple[GizmoStateMachine, List[GizmoEvent]]:
    events: List[GizmoEvent] = []
    machine = GizmoStateMachine(kind, events.append)
    machine.camera = camera
    machine.set_target_node(node)
    return machine, events


def test_translation_drag_lifecycle(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.TRANSLATION, ortho_camera, node)

    assert machine.pointer_down(np.array([450.0, 300.0]))
    assert machine.dragging
    assert machine.active_axis == Axis.X
    machine.pointer_move(np.array([510.0, 300.0]))
    machine.pointer_move(np.array([570.0, 300.0]))
    assert machine.pointer_up(np.array([570.0, 300.0]))

    assert [type(event) for event in events] == [GizmoStarted, GizmoDelta, GizmoDelta, GizmoEnded]
    assert events[0] == GizmoStarted(kind=GizmoKind.TRANSLATION, axis=Axis.X)
    assert events[1].value == pytest.approx(1.0)
    # Deltas are totals since drag start, not increments.
    assert events[2].value == pytest.approx(2.0)
    assert events[2].mode == TransformMode.WORLD
    assert not events[2].snap_active
    assert events[3] == GizmoEnded(kind=GizmoKind.TRANSLATION, axis=Axis.X, cancelled=False)
    assert not machine.dragging
    assert machine.active_axis == Axis.NONE


def test_press_that_misses_starts_nothing(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.TRANSLATION, ortho_camera, node)
    assert not machine.pointer_down(np.array([700.0, 500.0]))
    assert not machine.pointer_move(np.array([710.0, 500.0]))
    assert not machine.pointer_up()
    assert events == []


def test_no_drag_without_camera_or_target(ortho_camera: Camera, node: SceneNode) -> None:
    events: List[GizmoEvent] = []
    machine = GizmoStateMachine(GizmoKind.TRANSLATION, events.append)
    machine.set_target_node(node)
    assert not machine.pointer_down(np.array([450.0, 300.0]))
    machine.camera = ortho_camera
    machine.set_target_node(None)
    assert not machine.pointer_down(np.array([450.0, 300.0]))
    assert events == []


def test_rotation_and_translation_never_pick_uniform(ortho_camera: Camera, node: SceneNode) -> None:
    for kind in (GizmoKind.TRANSLATION, GizmoKind.ROTATION):
        machine, _ = _machine(kind, ortho_camera, node)
        assert machine.hit_test(np.array([400.0, 300.0])) != Axis.UNIFORM
    scale, _ = _machine(GizmoKind.SCALE, ortho_camera, node)
    assert scale.hit_test(np.array([400.0, 300.0])) == Axis.UNIFORM


def test_rotation_drag_with_absolute_snap(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.ROTATION, ortho_camera, node)
    machine.snap = SnapConfig(enabled=True, increment=15.0, to_absolute=True)
    assert machine.pointer_down(np.array([470.71067812, 229.28932188]))
    assert machine.active_axis == Axis.Z
    theta = np.radians(45.0 + 44.0)
    machine.pointer_move(np.array([400.0 + 100.0 * np.cos(theta), 300.0 - 100.0 * np.sin(theta)]))
    delta = events[-1]
    assert isinstance(delta, GizmoDelta)
    assert delta.value == pytest.approx(45.0)
    assert delta.snap_active


def test_snap_with_invalid_increment_reports_inactive(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.TRANSLATION, ortho_camera, node)
    machine.snap = SnapConfig(enabled=True, increment=0.0)
    machine.pointer_down(np.array([450.0, 300.0]))
    machine.pointer_move(np.array([530.0, 300.0]))
    assert events[-1].value == pytest.approx(80.0 / 60.0)
    assert not events[-1].snap_active


def test_local_mode_follows_node_orientation(ortho_camera: Camera, node: SceneNode) -> None:
    node.orientation = quat_from_axis_angle(np.array([0.0, 0.0, 1.0]), 90.0)
    machine, events = _machine(GizmoKind.TRANSLATION, ortho_camera, node)
    machine.transform_mode = TransformMode.LOCAL
    assert machine.pointer_down(np.array([400.0, 250.0]))
    assert machine.active_axis == Axis.X
    machine.pointer_move(np.array([400.0, 130.0]))
    assert events[-1].value == pytest.approx(2.0)
    assert events[-1].mode == TransformMode.LOCAL


def test_mode_change_mid_drag_keeps_captured_mode(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.TRANSLATION, ortho_camera, node)
    machine.pointer_down(np.array([450.0, 300.0]))
    machine.transform_mode = TransformMode.LOCAL
    machine.pointer_move(np.array([570.0, 300.0]))
    assert events[-1].mode == TransformMode.WORLD


def test_cancel_emits_single_end(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.SCALE, ortho_camera, node)
    machine.pointer_down(np.array([480.0, 300.0]))
    assert machine.cancel()
    assert not machine.cancel()
    assert not machine.pointer_up()
    assert events[-1] == GizmoEnded(kind=GizmoKind.SCALE, axis=Axis.X, cancelled=True)
    assert sum(isinstance(event, GizmoEnded) for event in events) == 1


def test_rebinding_target_mid_drag_cancels(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.TRANSLATION, ortho_camera, node)
    assert not machine.set_target_node(node)
    machine.pointer_down(np.array([450.0, 300.0]))
    assert machine.set_target_node(SceneNode("other"))
    assert not machine.dragging
    assert isinstance(events[-1], GizmoEnded)
    assert events[-1].cancelled


def test_released_target_cancels_on_next_move(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.TRANSLATION, ortho_camera, node)
    machine.pointer_down(np.array([450.0, 300.0]))
    node.release()
    assert machine.pointer_move(np.array([500.0, 300.0]))
    assert [type(event) for event in events] == [GizmoStarted, GizmoEnded]
    assert machine.handles() == []


def test_gizmo_size_change_mid_drag_does_not_rescale(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.SCALE, ortho_camera, node)
    machine.pointer_down(np.array([480.0, 300.0]))
    machine.gizmo_size = 200.0
    machine.pointer_move(np.array([580.0, 300.0]))
    assert events[-1].value == pytest.approx(2.0)


def test_handler_reentrancy_sees_settled_state(ortho_camera: Camera, node: SceneNode) -> None:
    seen = []
    machine = GizmoStateMachine(GizmoKind.TRANSLATION)

    def handler(event: GizmoEvent) -> None:
        seen.append((type(event).__name__, machine.dragging))
        if isinstance(event, GizmoEnded):
            # Re-entrant calls from the end handler must be no-ops.
            assert not machine.cancel()

    machine.set_handler(handler)
    machine.camera = ortho_camera
    machine.set_target_node(node)
    machine.pointer_down(np.array([450.0, 300.0]))
    machine.pointer_up()
    assert seen == [("GizmoStarted", True), ("GizmoEnded", False)]


def test_dispose_ends_drag_and_drops_target(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.ROTATION, ortho_camera, node)
    machine.pointer_down(np.array([500.0, 300.0]))
    machine.dispose()
    assert machine.target_node is None
    assert isinstance(events[-1], GizmoEnded)
    assert events[-1].cancelled


def test_relative_snap_drag_reports_true_total(ortho_camera: Camera, node: SceneNode) -> None:
    machine, events = _machine(GizmoKind.TRANSLATION, ortho_camera, node)
    machine.snap = SnapConfig(enabled=True, increment=1.0, to_absolute=False)
    machine.pointer_down(np.array([450.0, 300.0]))
    # Half a world unit per sample, three units in total.
    for step in range(1, 7):
        machine.pointer_move(np.array([450.0 + 30.0 * step, 300.0]))
    assert events[-1].value == pytest.approx(3.0)
    assert events[-1].snap_active


def test_unbound_machine_is_inert(ortho_camera: Camera) -> None:
    events: List[GizmoEvent] = []
    machine = GizmoStateMachine(GizmoKind.SCALE, events.append)
    machine.camera = ortho_camera
    assert machine.handles() == []
    assert machine.hit_test(np.array([400.0, 300.0])) == Axis.NONE
    assert not machine.pointer_down(np.array([400.0, 300.0]))
    assert not machine.pointer_move(np.array([420.0, 300.0]))
    assert events == []


def test_cancel_logs_without_debug_env(
    ortho_camera: Camera, node: SceneNode, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.delenv("GIZMO3D_DEBUG", raising=False)
    machine, _ = _machine(GizmoKind.TRANSLATION, ortho_camera, node)
    machine.pointer_down(np.array([450.0, 300.0]))
    with caplog.at_level(logging.DEBUG, logger="gizmo3d.core.state"):
        assert machine.cancel()
    assert "translation drag cancelled" in caplog.messages
