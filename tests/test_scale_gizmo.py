import numpy as np
import pytest

from gizmo3d.app.transform_controller import TransformController
from gizmo3d.core import Axis, Camera, SceneNode
from gizmo3d.gizmos import ScaleGizmo

UNIFORM_OFFSET = 50.0 / np.sqrt(2.0)


@pytest.fixture
def gizmo(qapp, ortho_camera: Camera, node: SceneNode) -> ScaleGizmo:
    gizmo = ScaleGizmo()
    gizmo.set_camera(ortho_camera)
    gizmo.set_target_node(node)
    return gizmo


def test_scale_defaults(qapp) -> None:
    gizmo = ScaleGizmo()
    assert gizmo.snapEnabled is False
    assert gizmo.snapIncrement == pytest.approx(0.1)
    assert gizmo.snapToAbsolute is True
    assert gizmo.arrowStartRatio == pytest.approx(0.2)
    assert gizmo.arrowEndRatio == pytest.approx(1.0)


def test_arrow_ratio_round_trip(gizmo: ScaleGizmo) -> None:
    fired = []
    gizmo.arrowStartRatioChanged.connect(lambda: fired.append("start"))
    gizmo.arrowEndRatioChanged.connect(lambda: fired.append("end"))
    gizmo.arrowStartRatio = 0.3
    gizmo.arrowEndRatio = 0.9
    assert gizmo.arrowStartRatio == pytest.approx(0.3)
    assert gizmo.arrowEndRatio == pytest.approx(0.9)
    assert fired == ["start", "end"]


def test_uniform_handle_at_origin(gizmo: ScaleGizmo) -> None:
    assert gizmo.hover_axis((400.0, 300.0)) == Axis.UNIFORM
    gizmo.activeAxis = int(Axis.UNIFORM)
    assert gizmo.activeAxis == int(Axis.UNIFORM)


def test_axis_scale_signals(gizmo: ScaleGizmo) -> None:
    received = []
    gizmo.scaleStarted.connect(lambda axis: received.append(("started", axis)))
    gizmo.scaleDelta.connect(lambda *args: received.append(("delta",) + args))
    gizmo.scaleEnded.connect(lambda axis: received.append(("ended", axis)))

    assert gizmo.handle_press((480.0, 300.0))
    gizmo.handle_move((580.0, 300.0))
    gizmo.handle_release()

    assert received[0] == ("started", 1)
    assert received[1][1:3] == (1, 0)
    assert received[1][3] == pytest.approx(2.0)
    assert received[-1] == ("ended", 1)


def test_scale_factor_stays_positive(gizmo: ScaleGizmo) -> None:
    deltas = []
    gizmo.scaleDelta.connect(lambda *args: deltas.append(args))
    gizmo.handle_press((480.0, 300.0))
    gizmo.handle_move((0.0, 300.0))
    assert deltas[-1][2] > 0.0


def test_gizmo_size_change_mid_drag(gizmo: ScaleGizmo) -> None:
    deltas = []
    gizmo.scaleDelta.connect(lambda *args: deltas.append(args))
    gizmo.handle_press((480.0, 300.0))
    gizmo.gizmoSize = 250.0
    gizmo.handle_move((580.0, 300.0))
    assert deltas[-1][2] == pytest.approx(2.0)


def test_release_of_target_mid_drag(gizmo: ScaleGizmo, node: SceneNode) -> None:
    ended = []
    gizmo.scaleEnded.connect(ended.append)
    gizmo.handle_press((400.0, 300.0))
    node.release()
    gizmo.handle_move((420.0, 280.0))
    assert ended == [int(Axis.UNIFORM)]


def test_sequential_drags_compose(gizmo: ScaleGizmo, node: SceneNode) -> None:
    controller = TransformController(node)
    controller.attach(gizmo)

    gizmo.handle_press((480.0, 300.0))
    gizmo.handle_move((580.0, 300.0))
    gizmo.handle_release()
    np.testing.assert_allclose(node.scale, [2.0, 1.0, 1.0])

    gizmo.handle_press((400.0, 300.0))
    gizmo.handle_move((400.0 - UNIFORM_OFFSET, 300.0 + UNIFORM_OFFSET))
    gizmo.handle_release()
    np.testing.assert_allclose(node.scale, [1.0, 0.5, 0.5])
