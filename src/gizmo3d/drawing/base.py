from __future__ import annotations

import functools
import logging
import math
from typing import Iterable, List, Sequence

import pyqtgraph as pg
from PySide6 import QtCore, QtGui

_LOG = logging.getLogger(__name__)

_CAP_STYLES = {
    "round": QtCore.Qt.PenCapStyle.RoundCap,
    "square": QtCore.Qt.PenCapStyle.SquareCap,
    "butt": QtCore.Qt.PenCapStyle.FlatCap,
    "flat": QtCore.Qt.PenCapStyle.FlatCap,
}
_JOIN_STYLES = {
    "round": QtCore.Qt.PenJoinStyle.RoundJoin,
    "miter": QtCore.Qt.PenJoinStyle.MiterJoin,
    "bevel": QtCore.Qt.PenJoinStyle.BevelJoin,
}


def painter_ready(ctx: object) -> bool:
    return isinstance(ctx, QtGui.QPainter) and ctx.isActive()


def to_qcolor(color: object, alpha: float | None = None) -> QtGui.QColor | None:
    if color is None:
        return None
    if isinstance(color, QtGui.QColor):
        qcolor = QtGui.QColor(color)
    else:
        qcolor = None
        if isinstance(color, str):
            named = QtGui.QColor(color)
            if named.isValid():
                qcolor = named
        if qcolor is None:
            try:
                qcolor = pg.mkColor(color)
            except Exception:
                return None
    if not qcolor.isValid():
        return None
    if alpha is not None:
        qcolor.setAlphaF(max(0.0, min(1.0, float(alpha))))
    return qcolor


def make_pen(color: QtGui.QColor, width: float, cap: str = "round", join: str = "round") -> QtGui.QPen:
    pen = pg.mkPen(color=color, width=float(width))
    pen.setCapStyle(_CAP_STYLES.get(cap, QtCore.Qt.PenCapStyle.RoundCap))
    pen.setJoinStyle(_JOIN_STYLES.get(join, QtCore.Qt.PenJoinStyle.RoundJoin))
    return pen


def to_point(value: object) -> QtCore.QPointF | None:
    if isinstance(value, QtCore.QPointF):
        x, y = value.x(), value.y()
    elif isinstance(value, QtCore.QPoint):
        x, y = float(value.x()), float(value.y())
    else:
        try:
            x, y = (float(v) for v in value)  # type: ignore[union-attr]
        except (TypeError, ValueError):
            return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return QtCore.QPointF(x, y)


def to_points(values: Iterable[object] | None, minimum: int = 1) -> List[QtCore.QPointF] | None:
    if values is None:
        return None
    try:
        raw: Sequence[object] = list(values)
    except TypeError:
        return None
    points: List[QtCore.QPointF] = []
    for value in raw:
        point = to_point(value)
        if point is None:
            return None
        points.append(point)
    if len(points) < minimum:
        return None
    return points


def guarded(draw):
    """Keep drawing failures on this side of the drawing boundary."""

    @functools.wraps(draw)
    def wrapper(*args, **kwargs) -> None:
        try:
            draw(*args, **kwargs)
        except Exception:
            _LOG.debug("draw call %s failed", draw.__qualname__, exc_info=True)

    return wrapper
