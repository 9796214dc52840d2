from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from domain.models import (
    SHAPE_TYPES,
    ArrowElement,
    Bounds,
    DiamondElement,
    DrawingPlan,
    DrawInstruction,
    Element,
    ElementBase,
    EllipseElement,
    LineElement,
    RectangleElement,
    Scene,
    ShapeInstruction,
    SkippedElement,
    TextElement,
    UnsupportedElement,
)
from domain.services.anchor_resolver import connector_endpoints
from domain.services.label_layout import (
    ARROW_LABEL_SIZE,
    layout_arrow_label,
    layout_shape_labels,
    layout_text_element,
)
from domain.services.shape_geometry import (
    arrowhead_points,
    bounds_of,
    diamond_points,
    rounded_rect_path,
)
from domain.services.stroke_styles import (
    StyleDefaults,
    arrow_line_style,
    arrowhead_style,
    resolve_style,
    segment_style,
)

logger = logging.getLogger(__name__)


@dataclass
class _WalkState:
    scene: Scene
    elements_by_id: dict[str, ElementBase]
    obstacles: tuple[Bounds, ...]
    instructions: list[DrawInstruction] = field(default_factory=list)
    skipped: list[SkippedElement] = field(default_factory=list)

    def skip(self, index: int, element_type: str | None, reason: str) -> None:
        logger.warning("Skipping element #%d (%s): %s", index, element_type, reason)
        self.skipped.append(
            SkippedElement(index=index, element_type=element_type, reason=reason)
        )


class SceneWalker:
    """Turns a scene into an ordered list of drawing instructions."""

    def __init__(self, defaults: StyleDefaults | None = None) -> None:
        self.defaults = defaults or StyleDefaults()
        self._handlers: dict[str, Callable[[_WalkState, int, Element], None]] = {
            "rectangle": self._draw_rectangle,
            "ellipse": self._draw_ellipse,
            "diamond": self._draw_diamond,
            "arrow": self._draw_arrow,
            "line": self._draw_line,
            "text": self._draw_text,
            "unsupported": self._skip_unsupported,
        }

    def walk(self, scene: Scene) -> DrawingPlan:
        state = _WalkState(
            scene=scene,
            elements_by_id=self._index_elements(scene),
            obstacles=tuple(
                bounds_of(element) for element in scene.elements if element.type in SHAPE_TYPES
            ),
        )
        for index, element in enumerate(scene.elements):
            self._handlers[element.type](state, index, element)
        return DrawingPlan(
            width=scene.width,
            height=scene.height,
            background=scene.background,
            slug=scene.slug,
            instructions=state.instructions,
            skipped=state.skipped,
        )

    def _index_elements(self, scene: Scene) -> dict[str, ElementBase]:
        index: dict[str, ElementBase] = {}
        for element in scene.elements:
            if isinstance(element, ElementBase) and element.id:
                index[element.id] = element
        return index

    def _draw_rectangle(self, state: _WalkState, index: int, element: RectangleElement) -> None:
        bounds = bounds_of(element)
        style = resolve_style(element, self.defaults)
        if element.rounded:
            instruction = ShapeInstruction(
                primitive="path", style=style, bounds=bounds, path=rounded_rect_path(bounds)
            )
        else:
            instruction = ShapeInstruction(primitive="rectangle", style=style, bounds=bounds)
        state.instructions.append(instruction)
        state.instructions.extend(layout_shape_labels(element, self.defaults.stroke))

    def _draw_ellipse(self, state: _WalkState, index: int, element: EllipseElement) -> None:
        state.instructions.append(
            ShapeInstruction(
                primitive="ellipse",
                style=resolve_style(element, self.defaults),
                bounds=bounds_of(element),
            )
        )
        state.instructions.extend(layout_shape_labels(element, self.defaults.stroke))

    def _draw_diamond(self, state: _WalkState, index: int, element: DiamondElement) -> None:
        bounds = bounds_of(element)
        state.instructions.append(
            ShapeInstruction(
                primitive="polygon",
                style=resolve_style(element, self.defaults),
                bounds=bounds,
                points=tuple(diamond_points(bounds)),
            )
        )
        state.instructions.extend(layout_shape_labels(element, self.defaults.stroke))

    def _draw_arrow(self, state: _WalkState, index: int, element: ArrowElement) -> None:
        source = state.elements_by_id.get(element.from_id or "")
        target = state.elements_by_id.get(element.to_id or "")
        if source is None or target is None:
            state.skip(
                index,
                element.type,
                f"arrow references missing element: from={element.from_id} to={element.to_id}",
            )
            return

        start, end, _ = connector_endpoints(element, source, target)
        state.instructions.append(
            ShapeInstruction(
                primitive="line",
                style=arrow_line_style(element, self.defaults),
                points=((start.x, start.y), (end.x, end.y)),
            )
        )
        state.instructions.append(
            ShapeInstruction(
                primitive="polygon",
                style=arrowhead_style(element, self.defaults),
                points=tuple(arrowhead_points(start, end)),
            )
        )
        if element.label:
            _, runs = layout_arrow_label(
                start,
                end,
                element.label,
                element.font_size or ARROW_LABEL_SIZE,
                state.obstacles,
            )
            state.instructions.extend(runs)

    def _draw_line(self, state: _WalkState, index: int, element: LineElement) -> None:
        points = element.resolved_points()
        if len(points) < 2:
            state.skip(index, element.type, "line needs at least two points")
            return
        style = resolve_style(element, self.defaults)
        for segment, (first, second) in enumerate(zip(points, points[1:])):
            state.instructions.append(
                ShapeInstruction(
                    primitive="line",
                    style=segment_style(style, segment),
                    points=(first, second),
                )
            )

    def _draw_text(self, state: _WalkState, index: int, element: TextElement) -> None:
        state.instructions.extend(
            layout_text_element(element, state.scene.width, self.defaults.stroke)
        )

    def _skip_unsupported(
        self, state: _WalkState, index: int, element: UnsupportedElement
    ) -> None:
        state.skip(index, element.original_type, element.reason)


def build_drawing_plan(scene: Scene, defaults: StyleDefaults | None = None) -> DrawingPlan:
    return SceneWalker(defaults).walk(scene)
