from __future__ import annotations

import math

from domain.models import Bounds, ElementBase, EllipseElement, Point, Shape, ShapeElement

SHAPE_PAD_X = 14.0
SHAPE_PAD_Y = 10.0
CORNER_RADIUS_MAX = 12.0
ARROWHEAD_SIZE = 12.0
ARROWHEAD_SPREAD = math.pi * 0.82

# Share of the padded interior that is usable for text.
INTERIOR_FACTORS = {
    "rectangle": 1.0,
    "ellipse": 0.7,
    "diamond": 0.5,
}


def bounds_of(element: ElementBase) -> Bounds:
    """Bounding box of an element; elements without a size get a zero box at x/y."""
    if isinstance(element, EllipseElement):
        return Bounds(
            x=element.x - element.width / 2,
            y=element.y - element.height / 2,
            w=element.width,
            h=element.height,
        )
    if isinstance(element, ShapeElement):
        return Bounds(x=element.x, y=element.y, w=element.width, h=element.height)
    x = getattr(element, "x", None) or 0.0
    y = getattr(element, "y", None) or 0.0
    return Bounds(x=x, y=y, w=0.0, h=0.0)


def center_of(element: ElementBase) -> Point:
    return bounds_of(element).center


def side_midpoint(element: ElementBase, side: str) -> Point:
    return bounds_of(element).side_midpoint(side)


def inner_text_width(shape: Shape) -> float:
    raw_width = bounds_of(shape).w - SHAPE_PAD_X * 2
    return raw_width * INTERIOR_FACTORS.get(shape.type, 1.0)


def inner_text_height(shape: Shape) -> float:
    raw_height = bounds_of(shape).h - SHAPE_PAD_Y * 2
    return raw_height * INTERIOR_FACTORS.get(shape.type, 1.0)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def diamond_points(bounds: Bounds) -> list[tuple[float, float]]:
    cx, cy = bounds.center.x, bounds.center.y
    return [
        (cx, bounds.y),
        (bounds.x + bounds.w, cy),
        (cx, bounds.y + bounds.h),
        (bounds.x, cy),
    ]


def corner_radius(bounds: Bounds) -> float:
    return min(CORNER_RADIUS_MAX, bounds.w / 4, bounds.h / 4)


def rounded_rect_path(bounds: Bounds) -> str:
    """Closed path with quadratic quarter-corner curves, never native ``rx``/``ry``."""
    x, y, w, h = bounds.x, bounds.y, bounds.w, bounds.h
    r = corner_radius(bounds)
    return (
        f"M {_fmt(x + r)} {_fmt(y)} "
        f"L {_fmt(x + w - r)} {_fmt(y)} "
        f"Q {_fmt(x + w)} {_fmt(y)} {_fmt(x + w)} {_fmt(y + r)} "
        f"L {_fmt(x + w)} {_fmt(y + h - r)} "
        f"Q {_fmt(x + w)} {_fmt(y + h)} {_fmt(x + w - r)} {_fmt(y + h)} "
        f"L {_fmt(x + r)} {_fmt(y + h)} "
        f"Q {_fmt(x)} {_fmt(y + h)} {_fmt(x)} {_fmt(y + h - r)} "
        f"L {_fmt(x)} {_fmt(y + r)} "
        f"Q {_fmt(x)} {_fmt(y)} {_fmt(x + r)} {_fmt(y)} Z"
    )


def arrowhead_points(
    start: Point, end: Point, size: float = ARROWHEAD_SIZE
) -> list[tuple[float, float]]:
    angle = math.atan2(end.y - start.y, end.x - start.x)
    left = angle + ARROWHEAD_SPREAD
    right = angle - ARROWHEAD_SPREAD
    return [
        (end.x, end.y),
        (end.x + size * math.cos(left), end.y + size * math.sin(left)),
        (end.x + size * math.cos(right), end.y + size * math.sin(right)),
    ]


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"
