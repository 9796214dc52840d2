from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from domain.models import Bounds, Point, Shape, TextElement, TextRun
from domain.services.shape_geometry import bounds_of, inner_text_height, inner_text_width
from domain.services.text_metrics import (
    block_height,
    line_height,
    measure_width,
    wrap_text,
)

TEXT_COLOR = "#1e1e1e"
MUTED_TEXT_COLOR = "#868e96"
ARROW_LABEL_COLOR = "#555"

LABEL_SIZE = 18.0
ANNOTATION_MIN_SIZE = 13.0
LABEL_ANNO_GAP = 6.0
SECTION_INSET_X = 10.0
SECTION_INSET_Y = 8.0
SECTION_BASELINE_RATIO = 0.7

ARROW_LABEL_SIZE = 14.0
ARROW_LABEL_OFFSET = 18.0
ARROW_LABEL_WRAP_WIDTH = 180.0
ARROW_LABEL_BOX_PAD_X = 10.0
ARROW_LABEL_BOX_HEIGHT_RATIO = 1.8

TEXT_SIZE = 16.0
TITLE_MIN_SIZE = 20.0
TITLE_SUB_GAP = 6.0
SUBTITLE_SIZE_RATIO = 0.55
TEXT_MARGIN = 80.0
SUBTITLE_MARGIN = 120.0

ELLIPSIS = "…"


def stack_lines(
    x: float,
    start_y: float,
    lines: Sequence[str],
    font_size: float,
    *,
    color: str = TEXT_COLOR,
    mono: bool = False,
    anchor: str = "middle",
    font_weight: str | None = None,
) -> list[TextRun]:
    step = line_height(font_size)
    return [
        TextRun(
            x=x,
            y=start_y + index * step,
            text=line,
            font_size=font_size,
            color=color,
            mono=mono,
            anchor=anchor,
            font_weight=font_weight,
        )
        for index, line in enumerate(lines)
    ]


def centered_block_start(center_y: float, line_count: int, font_size: float) -> float:
    """Y of the first line so that ``line_count`` lines centre on ``center_y``."""
    return center_y - block_height(line_count, font_size) / 2 + line_height(font_size) / 2


def layout_section_label(shape: Shape) -> list[TextRun]:
    if not shape.section_label:
        return []
    bounds = bounds_of(shape)
    size = shape.section_label_size
    lines = wrap_text(shape.section_label, size, bounds.w - SECTION_INSET_X * 2)
    start_y = bounds.y + SECTION_INSET_Y + size * SECTION_BASELINE_RATIO
    return stack_lines(
        bounds.x + SECTION_INSET_X,
        start_y,
        lines,
        size,
        color=shape.section_label_color,
        anchor="start",
        font_weight="bold",
    )


def truncate_annotation(
    annotation_lines: list[str],
    annotation_size: float,
    label_height: float,
    max_height: float,
) -> list[str]:
    """Drop trailing annotation lines that do not fit below the label.

    At least one line is always kept. When lines are dropped the last kept
    line ends with an ellipsis, unless it is too short to carry one.
    """
    total = label_height + LABEL_ANNO_GAP + block_height(len(annotation_lines), annotation_size)
    if total <= max_height or len(annotation_lines) <= 1:
        return list(annotation_lines)
    step = line_height(annotation_size)
    available = max(step, max_height - label_height - LABEL_ANNO_GAP)
    keep = max(1, math.floor(available / step))
    kept = list(annotation_lines[:keep])
    if len(kept) < len(annotation_lines):
        last = kept[-1]
        if len(last) > 3:
            kept[-1] = last[:-3] + ELLIPSIS
    return kept


def layout_shape_labels(shape: Shape, text_color: str = TEXT_COLOR) -> list[TextRun]:
    runs = layout_section_label(shape)
    if not shape.label:
        return runs

    bounds = bounds_of(shape)
    center_x = bounds.center.x
    center_y = bounds.center.y
    max_width = inner_text_width(shape)
    max_height = inner_text_height(shape)

    label_size = shape.font_size or LABEL_SIZE
    label_lines = wrap_text(shape.label, label_size, max_width)
    label_height = block_height(len(label_lines), label_size)

    if not shape.annotation:
        start_y = centered_block_start(center_y, len(label_lines), label_size)
        runs.extend(stack_lines(center_x, start_y, label_lines, label_size, color=text_color))
        return runs

    annotation_size = max(ANNOTATION_MIN_SIZE, shape.annotation_size or ANNOTATION_MIN_SIZE)
    annotation_lines = wrap_text(shape.annotation, annotation_size, max_width, mono=True)
    shown = truncate_annotation(annotation_lines, annotation_size, label_height, max_height)

    combined = label_height + LABEL_ANNO_GAP + block_height(len(shown), annotation_size)
    top_y = center_y - combined / 2
    runs.extend(
        stack_lines(
            center_x,
            top_y + line_height(label_size) / 2,
            label_lines,
            label_size,
            color=text_color,
        )
    )
    runs.extend(
        stack_lines(
            center_x,
            top_y + label_height + LABEL_ANNO_GAP + line_height(annotation_size) / 2,
            shown,
            annotation_size,
            color=MUTED_TEXT_COLOR,
            mono=True,
        )
    )
    return runs


@dataclass(frozen=True)
class ArrowLabelPlacement:
    position: Point
    offset: float
    box: Bounds
    collides: bool


def arrow_label_offsets() -> tuple[float, ...]:
    return (
        ARROW_LABEL_OFFSET,
        -ARROW_LABEL_OFFSET,
        ARROW_LABEL_OFFSET * 2,
        -ARROW_LABEL_OFFSET * 2,
    )


def arrow_label_box(center: Point, label: str, font_size: float) -> Bounds:
    width = measure_width(label, font_size, mono=True) + ARROW_LABEL_BOX_PAD_X
    height = font_size * ARROW_LABEL_BOX_HEIGHT_RATIO
    return Bounds(x=center.x - width / 2, y=center.y - height / 2, w=width, h=height)


def place_arrow_label(
    start: Point,
    end: Point,
    label: str,
    font_size: float,
    obstacles: Sequence[Bounds],
) -> ArrowLabelPlacement:
    """Pick the first perpendicular offset whose label box misses every obstacle.

    Falls back to the primary offset when every candidate collides.
    """
    mid_x = (start.x + end.x) / 2
    mid_y = (start.y + end.y) / 2
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy) or 1.0
    normal_x = -dy / length
    normal_y = dx / length

    def candidate(offset: float) -> tuple[Point, Bounds]:
        position = Point(mid_x + normal_x * offset, mid_y + normal_y * offset)
        return position, arrow_label_box(position, label, font_size)

    for offset in arrow_label_offsets():
        position, box = candidate(offset)
        if not any(box.overlaps(obstacle) for obstacle in obstacles):
            return ArrowLabelPlacement(position=position, offset=offset, box=box, collides=False)

    position, box = candidate(ARROW_LABEL_OFFSET)
    return ArrowLabelPlacement(
        position=position, offset=ARROW_LABEL_OFFSET, box=box, collides=True
    )


def layout_arrow_label(
    start: Point,
    end: Point,
    label: str,
    font_size: float,
    obstacles: Sequence[Bounds],
) -> tuple[ArrowLabelPlacement, list[TextRun]]:
    placement = place_arrow_label(start, end, label, font_size, obstacles)
    lines = wrap_text(label, font_size, ARROW_LABEL_WRAP_WIDTH, mono=True)
    start_y = centered_block_start(placement.position.y, len(lines), font_size)
    runs = stack_lines(
        placement.position.x,
        start_y,
        lines,
        font_size,
        color=ARROW_LABEL_COLOR,
        mono=True,
    )
    return placement, runs


def layout_text_element(
    element: TextElement, scene_width: float, text_color: str = TEXT_COLOR
) -> list[TextRun]:
    font_size = element.font_size or TEXT_SIZE
    is_title = font_size >= TITLE_MIN_SIZE
    max_width = element.max_width or scene_width - TEXT_MARGIN
    lines = wrap_text(element.text, font_size, max_width)
    step = line_height(font_size)
    start_y = element.y - (len(lines) - 1) * step / 2

    runs = stack_lines(
        element.x,
        start_y,
        lines,
        font_size,
        color=element.color or text_color,
        anchor=element.align,
        font_weight=element.font_weight or ("bold" if is_title else "normal"),
    )
    if not element.subtitle:
        return runs

    last_line_y = start_y + (len(lines) - 1) * step
    subtitle_size = element.subtitle_size or max(
        ANNOTATION_MIN_SIZE, float(math.floor(font_size * SUBTITLE_SIZE_RATIO + 0.5))
    )
    subtitle_lines = wrap_text(
        element.subtitle, subtitle_size, element.max_width or scene_width - SUBTITLE_MARGIN
    )
    subtitle_y = last_line_y + step / 2 + TITLE_SUB_GAP + line_height(subtitle_size) / 2
    runs.extend(
        stack_lines(
            element.x,
            subtitle_y,
            subtitle_lines,
            subtitle_size,
            color=element.subtitle_color or MUTED_TEXT_COLOR,
            anchor=element.align,
        )
    )
    return runs
