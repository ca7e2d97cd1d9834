from .base import painter_ready, to_qcolor
from .primitives import (
    ArrowPrimitive,
    ArrowStyle,
    CircleDrawOptions,
    CirclePrimitive,
    CircleStyle,
    PlanePrimitive,
    PlaneStyle,
    SquareHandlePrimitive,
    SquareHandleStyle,
)

__all__ = [
    "ArrowPrimitive",
    "ArrowStyle",
    "CircleDrawOptions",
    "CirclePrimitive",
    "CircleStyle",
    "painter_ready",
    "PlanePrimitive",
    "PlaneStyle",
    "SquareHandlePrimitive",
    "SquareHandleStyle",
    "to_qcolor",
]
