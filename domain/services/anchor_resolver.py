from __future__ import annotations

from domain.models import SIDES, ArrowElement, ElementBase, Point, SidePair
from domain.services.shape_geometry import bounds_of, distance


def best_sides(from_element: ElementBase, to_element: ElementBase) -> SidePair:
    """Side pair whose midpoints are closest; first minimum in SIDES order wins."""
    from_bounds = bounds_of(from_element)
    to_bounds = bounds_of(to_element)
    best: SidePair | None = None
    best_distance = float("inf")
    for from_side in SIDES:
        for to_side in SIDES:
            current = distance(
                from_bounds.side_midpoint(from_side), to_bounds.side_midpoint(to_side)
            )
            if current < best_distance:
                best_distance = current
                best = SidePair(from_side=from_side, to_side=to_side)
    # NaN geometry never beats inf; fall back to the first combination.
    return best or SidePair(from_side=SIDES[0], to_side=SIDES[0])


def resolve_sides(arrow: ArrowElement, from_element: ElementBase, to_element: ElementBase) -> SidePair:
    if arrow.from_side and arrow.to_side:
        return SidePair(from_side=arrow.from_side, to_side=arrow.to_side)
    return best_sides(from_element, to_element)


def connector_endpoints(
    arrow: ArrowElement, from_element: ElementBase, to_element: ElementBase
) -> tuple[Point, Point, SidePair]:
    sides = resolve_sides(arrow, from_element, to_element)
    start = bounds_of(from_element).side_midpoint(sides.from_side)
    end = bounds_of(to_element).side_midpoint(sides.to_side)
    return start, end, sides
