from __future__ import annotations

import math
from dataclasses import dataclass, field

from PySide6 import QtCore, QtGui

from .base import guarded, make_pen, painter_ready, to_point, to_points, to_qcolor


@dataclass(frozen=True)
class ArrowStyle:
    head_length: float = 15.0
    head_angle: float = math.pi / 6.0
    line_cap: str = "round"


@dataclass(frozen=True)
class CircleStyle:
    fill_alpha: float = 0.5
    line_cap: str = "round"
    line_join: str = "round"


@dataclass(frozen=True)
class CircleDrawOptions:
    filled: bool = False
    arc_start: float = 0.0
    arc_end: float = 0.0
    geometry_name: str = ""
    partial_arc: bool = False
    arc_center: float = 0.0
    arc_range: float = 2.0 * math.pi


@dataclass(frozen=True)
class PlaneStyle:
    inactive_alpha: float = 0.3
    active_alpha: float = 0.5
    inactive_line_width: int = 2
    active_line_width: int = 3


@dataclass(frozen=True)
class SquareHandleStyle:
    default_size: float = 12.0
    line_width: int = 1


def _wrap_angle(angle: float) -> float:
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


@dataclass
class ArrowPrimitive:
    style: ArrowStyle = field(default_factory=ArrowStyle)

    def head_points(self, start: QtCore.QPointF, end: QtCore.QPointF) -> tuple[QtCore.QPointF, QtCore.QPointF] | None:
        dx = end.x() - start.x()
        dy = end.y() - start.y()
        if math.hypot(dx, dy) < 1e-6:
            return None
        angle = math.atan2(dy, dx)
        length = self.style.head_length
        left = QtCore.QPointF(
            end.x() - length * math.cos(angle - self.style.head_angle),
            end.y() - length * math.sin(angle - self.style.head_angle),
        )
        right = QtCore.QPointF(
            end.x() - length * math.cos(angle + self.style.head_angle),
            end.y() - length * math.sin(angle + self.style.head_angle),
        )
        return left, right

    @guarded
    def draw(self, ctx, start, end, color, line_width: float = 2.0) -> None:
        p0 = to_point(start)
        p1 = to_point(end)
        qcolor = to_qcolor(color)
        if not painter_ready(ctx) or p0 is None or p1 is None or qcolor is None:
            return
        head = self.head_points(p0, p1)
        if head is None:
            return
        ctx.save()
        ctx.setPen(make_pen(qcolor, line_width, cap=self.style.line_cap))
        ctx.drawLine(p0, p1)
        ctx.setBrush(QtGui.QBrush(qcolor))
        ctx.drawPolygon(QtGui.QPolygonF([p1, head[0], head[1]]))
        ctx.restore()

    @guarded
    def draw_with_square(self, ctx, start, end, color, line_width: float = 2.0, square_size: float = 12.0) -> None:
        p0 = to_point(start)
        p1 = to_point(end)
        qcolor = to_qcolor(color)
        if not painter_ready(ctx) or p0 is None or p1 is None or qcolor is None:
            return
        half = max(float(square_size), 0.0) * 0.5
        ctx.save()
        ctx.setPen(make_pen(qcolor, line_width, cap=self.style.line_cap))
        ctx.drawLine(p0, p1)
        ctx.setBrush(QtGui.QBrush(qcolor))
        ctx.drawRect(QtCore.QRectF(p1.x() - half, p1.y() - half, half * 2.0, half * 2.0))
        ctx.restore()


@dataclass
class CirclePrimitive:
    style: CircleStyle = field(default_factory=CircleStyle)

    def _pen(self, color: QtGui.QColor, line_width: float) -> QtGui.QPen:
        return make_pen(color, line_width, cap=self.style.line_cap, join=self.style.line_join)

    @guarded
    def draw_circle(self, ctx, points, color, line_width: float = 2.0) -> None:
        pts = to_points(points, minimum=3)
        qcolor = to_qcolor(color)
        if not painter_ready(ctx) or pts is None or qcolor is None:
            return
        ctx.save()
        ctx.setPen(self._pen(qcolor, line_width))
        ctx.setBrush(QtCore.Qt.BrushStyle.NoBrush)
        ctx.drawPolygon(QtGui.QPolygonF(pts))
        ctx.restore()

    @guarded
    def draw_arc(self, ctx, points, arc_center: float, arc_range: float, color, line_width: float = 2.0) -> None:
        """Draw the samples of an evenly sampled ring within ``arc_center`` +/- ``arc_range`` / 2."""
        pts = to_points(points, minimum=2)
        qcolor = to_qcolor(color)
        if not painter_ready(ctx) or pts is None or qcolor is None:
            return
        half_range = abs(float(arc_range)) * 0.5
        count = len(pts)
        runs: list[list[QtCore.QPointF]] = [[]]
        for idx, point in enumerate(pts):
            angle = 2.0 * math.pi * idx / count
            if abs(_wrap_angle(angle - float(arc_center))) <= half_range:
                runs[-1].append(point)
            elif runs[-1]:
                runs.append([])
        if len(runs) > 1 and runs[0] and runs[-1] and half_range < math.pi:
            runs[0] = runs.pop() + runs[0]
        ctx.save()
        ctx.setPen(self._pen(qcolor, line_width))
        for run in runs:
            if len(run) >= 2:
                ctx.drawPolyline(QtGui.QPolygonF(run))
        ctx.restore()

    @guarded
    def draw_filled_wedge(self, ctx, points, center, arc_start: float, arc_end: float, color) -> None:
        pts = to_points(points, minimum=1)
        origin = to_point(center)
        qcolor = to_qcolor(color, alpha=self.style.fill_alpha)
        if not painter_ready(ctx) or pts is None or origin is None or qcolor is None:
            return
        radius = sum(math.hypot(p.x() - origin.x(), p.y() - origin.y()) for p in pts) / len(pts)
        sweep = float(arc_end) - float(arc_start)
        if radius < 1e-6 or abs(sweep) < 1e-9:
            return
        steps = max(2, int(abs(sweep) / (math.pi / 36.0)) + 1)
        polygon = [origin]
        for step in range(steps + 1):
            angle = float(arc_start) + sweep * step / steps
            polygon.append(QtCore.QPointF(origin.x() + radius * math.cos(angle), origin.y() - radius * math.sin(angle)))
        ctx.save()
        ctx.setPen(QtCore.Qt.PenStyle.NoPen)
        ctx.setBrush(QtGui.QBrush(qcolor))
        ctx.drawPolygon(QtGui.QPolygonF(polygon))
        ctx.restore()

    def draw(self, ctx, points, center, color, line_width: float = 2.0, options: CircleDrawOptions | None = None) -> None:
        opts = options or CircleDrawOptions()
        if opts.partial_arc:
            self.draw_arc(ctx, points, opts.arc_center, opts.arc_range, color, line_width)
        else:
            self.draw_circle(ctx, points, color, line_width)
        if opts.filled:
            self.draw_filled_wedge(ctx, points, center, opts.arc_start, opts.arc_end, color)


@dataclass
class PlanePrimitive:
    style: PlaneStyle = field(default_factory=PlaneStyle)

    @guarded
    def draw(self, ctx, corners, color, active: bool = False) -> None:
        pts = to_points(corners, minimum=3)
        alpha = self.style.active_alpha if active else self.style.inactive_alpha
        fill = to_qcolor(color, alpha=alpha)
        outline = to_qcolor(color)
        if not painter_ready(ctx) or pts is None or fill is None or outline is None:
            return
        width = self.style.active_line_width if active else self.style.inactive_line_width
        ctx.save()
        ctx.setPen(make_pen(outline, width, join="miter"))
        ctx.setBrush(QtGui.QBrush(fill))
        ctx.drawPolygon(QtGui.QPolygonF(pts))
        ctx.restore()


@dataclass
class SquareHandlePrimitive:
    style: SquareHandleStyle = field(default_factory=SquareHandleStyle)

    @guarded
    def draw(self, ctx, center, color, size: float | None = None) -> None:
        origin = to_point(center)
        qcolor = to_qcolor(color)
        if not painter_ready(ctx) or origin is None or qcolor is None:
            return
        side = self.style.default_size if size is None else float(size)
        if not math.isfinite(side) or side <= 0.0:
            return
        half = side * 0.5
        ctx.save()
        ctx.setPen(make_pen(qcolor.darker(150), self.style.line_width, join="miter"))
        ctx.setBrush(QtGui.QBrush(qcolor))
        ctx.drawRect(QtCore.QRectF(origin.x() - half, origin.y() - half, side, side))
        ctx.restore()
