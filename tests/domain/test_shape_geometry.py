from __future__ import annotations

import pytest

from domain.models import (
    Bounds,
    DiamondElement,
    EllipseElement,
    Point,
    RectangleElement,
)
from domain.services.shape_geometry import (
    arrowhead_points,
    bounds_of,
    center_of,
    corner_radius,
    diamond_points,
    inner_text_height,
    inner_text_width,
    rounded_rect_path,
    side_midpoint,
)


def test_ellipse_bounds_are_converted_from_center() -> None:
    ellipse = EllipseElement(x=100, y=100, width=80, height=40)

    assert bounds_of(ellipse) == Bounds(x=60, y=80, w=80, h=40)
    assert center_of(ellipse) == Point(100, 100)


def test_rectangle_and_diamond_are_top_left_anchored() -> None:
    rect = RectangleElement(x=10, y=20, width=100, height=50)
    diamond = DiamondElement(x=10, y=20, width=100, height=50)

    assert bounds_of(rect) == bounds_of(diamond) == Bounds(x=10, y=20, w=100, h=50)


def test_side_midpoints() -> None:
    rect = RectangleElement(x=0, y=0, width=100, height=50)

    assert side_midpoint(rect, "top") == Point(50, 0)
    assert side_midpoint(rect, "bottom") == Point(50, 50)
    assert side_midpoint(rect, "left") == Point(0, 25)
    assert side_midpoint(rect, "right") == Point(100, 25)
    with pytest.raises(ValueError):
        side_midpoint(rect, "middle")


def test_inner_text_area_shrinks_for_curved_and_pointed_shapes() -> None:
    common = {"x": 0, "y": 0, "width": 120, "height": 80}

    assert inner_text_width(RectangleElement(**common)) == pytest.approx(92)
    assert inner_text_width(EllipseElement(**common)) == pytest.approx(64.4)
    assert inner_text_width(DiamondElement(**common)) == pytest.approx(46)
    assert inner_text_height(RectangleElement(**common)) == pytest.approx(60)
    assert inner_text_height(EllipseElement(**common)) == pytest.approx(42)
    assert inner_text_height(DiamondElement(**common)) == pytest.approx(30)


def test_diamond_points_touch_side_midpoints() -> None:
    bounds = Bounds(x=0, y=0, w=120, h=80)

    assert diamond_points(bounds) == [(60, 0), (120, 40), (60, 80), (0, 40)]


def test_rounded_rect_path_uses_capped_corner_radius() -> None:
    small = Bounds(x=0, y=0, w=100, h=40)
    large = Bounds(x=0, y=0, w=400, h=200)

    assert corner_radius(small) == 10
    assert corner_radius(large) == 12
    path = rounded_rect_path(small)
    assert path.startswith("M 10 0 L 90 0 Q 100 0 100 10")
    assert path.endswith("Q 0 0 10 0 Z")
    assert path.count("Q") == 4


def test_arrowhead_points_sit_behind_the_tip() -> None:
    points = arrowhead_points(Point(0, 0), Point(100, 0))

    assert points[0] == (100, 0)
    assert all(x < 100 for x, _ in points[1:])
    assert points[1][1] == pytest.approx(-points[2][1])
