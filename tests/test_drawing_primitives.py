import math

import pytest
from PySide6 import QtCore, QtGui

from gizmo3d.drawing import (
    ArrowPrimitive,
    ArrowStyle,
    CircleDrawOptions,
    CirclePrimitive,
    CircleStyle,
    PlanePrimitive,
    PlaneStyle,
    SquareHandlePrimitive,
    SquareHandleStyle,
    to_qcolor,
)


@pytest.fixture
def canvas(qapp):
    image = QtGui.QImage(200, 200, QtGui.QImage.Format.Format_ARGB32)
    image.fill(QtCore.Qt.GlobalColor.transparent)
    painter = QtGui.QPainter(image)
    yield image, painter
    if painter.isActive():
        painter.end()


def _ring(cx: float = 100.0, cy: float = 100.0, radius: float = 50.0, count: int = 64):
    return [
        (cx + radius * math.cos(2.0 * math.pi * i / count), cy - radius * math.sin(2.0 * math.pi * i / count))
        for i in range(count)
    ]


def test_style_defaults() -> None:
    assert ArrowStyle().head_length == 15.0
    assert ArrowStyle().head_angle == pytest.approx(math.pi / 6.0)
    assert ArrowStyle().line_cap == "round"
    assert CircleStyle().fill_alpha == 0.5
    assert CircleDrawOptions().arc_range == pytest.approx(2.0 * math.pi)
    assert not CircleDrawOptions().filled
    assert PlaneStyle().inactive_alpha == 0.3
    assert PlaneStyle().active_line_width == 3
    assert SquareHandleStyle().default_size == 12.0


def test_color_conversion(qapp) -> None:
    assert to_qcolor("#ff0000").red() == 255
    assert to_qcolor((0, 255, 0)).green() == 255
    assert to_qcolor("#ff0000", alpha=0.5).alphaF() == pytest.approx(0.5, abs=0.01)
    assert to_qcolor(None) is None


def test_missing_context_is_a_no_op(qapp) -> None:
    ArrowPrimitive().draw(None, (0, 0), (10, 10), "#ff0000")
    CirclePrimitive().draw(None, _ring(), (100, 100), "#00ff00", 2.0, CircleDrawOptions(filled=True, arc_end=1.0))
    PlanePrimitive().draw(None, [(0, 0), (10, 0), (10, 10)], "#0000ff")
    SquareHandlePrimitive().draw(None, (5, 5), "#ffffff")


def test_invalid_geometry_is_skipped(canvas) -> None:
    image, painter = canvas
    ArrowPrimitive().draw(painter, (10, 10), (10, 10), "#ff0000")
    ArrowPrimitive().draw(painter, (float("nan"), 0), (10, 10), "#ff0000")
    CirclePrimitive().draw_circle(painter, [(0, 0), (1, 1)], "#ff0000")
    SquareHandlePrimitive().draw(painter, (50, 50), "#ff0000", size=-4.0)
    painter.end()
    assert image.pixelColor(10, 10).alpha() == 0
    assert image.pixelColor(50, 50).alpha() == 0


def test_arrow_draws_shaft(canvas) -> None:
    image, painter = canvas
    ArrowPrimitive().draw(painter, (20, 100), (180, 100), "#ff0000", 3.0)
    painter.end()
    assert image.pixelColor(100, 100).red() == 255
    assert image.pixelColor(100, 150).alpha() == 0


def test_filled_wedge_covers_swept_sector(canvas) -> None:
    image, painter = canvas
    options = CircleDrawOptions(filled=True, arc_start=0.0, arc_end=math.pi / 2.0)
    CirclePrimitive().draw(painter, _ring(), (100, 100), "#00ff00", 2.0, options)
    painter.end()
    # Upper-right quadrant is swept, lower-left is not.
    assert image.pixelColor(120, 80).alpha() > 0
    assert image.pixelColor(80, 120).alpha() == 0


def test_partial_arc_only_draws_range(canvas) -> None:
    image, painter = canvas
    options = CircleDrawOptions(partial_arc=True, arc_center=0.0, arc_range=math.pi / 2.0)
    CirclePrimitive().draw(painter, _ring(), (100, 100), "#0000ff", 3.0, options)
    painter.end()
    assert image.pixelColor(150, 100).alpha() > 0
    assert image.pixelColor(50, 100).alpha() == 0


def test_square_and_plane(canvas) -> None:
    image, painter = canvas
    PlanePrimitive().draw(painter, [(20, 20), (60, 20), (60, 60), (20, 60)], "#ffffff", active=True)
    SquareHandlePrimitive().draw(painter, (150, 150), "#ffff00")
    painter.end()
    assert 0 < image.pixelColor(40, 40).alpha() < 255
    assert image.pixelColor(150, 150).alpha() == 255
