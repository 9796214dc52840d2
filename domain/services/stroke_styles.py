from __future__ import annotations

from dataclasses import dataclass, replace

from domain.models import ElementBase, StrokeStyle

ARROW_ROUGHNESS_RATIO = 0.6
ARROW_SEED_OFFSET = 100
ARROWHEAD_SEED_OFFSET = 200
ARROWHEAD_ROUGHNESS = 0.4


@dataclass(frozen=True)
class StyleDefaults:
    stroke: str = "#1e1e1e"
    stroke_width: float = 1.5
    fill_style: str = "solid"
    roughness: float = 1.2
    seed: int = 42


def resolve_style(
    element: ElementBase,
    defaults: StyleDefaults,
    *,
    roughness: float | None = None,
    seed: int | None = None,
) -> StrokeStyle:
    """Merge per-element overrides onto the defaults.

    ``roughness`` and ``seed`` replace the configured defaults for this
    element kind; explicit element values still win, including zero.
    """
    return StrokeStyle(
        stroke=element.stroke or defaults.stroke,
        stroke_width=element.stroke_width or defaults.stroke_width,
        fill=element.fill or None,
        fill_style=element.fill_style or defaults.fill_style,
        roughness=_first_set(element.roughness, roughness, defaults.roughness),
        seed=int(_first_set(element.seed, seed, defaults.seed)),
    )


def arrow_line_style(element: ElementBase, defaults: StyleDefaults) -> StrokeStyle:
    style = resolve_style(
        element,
        defaults,
        roughness=defaults.roughness * ARROW_ROUGHNESS_RATIO,
        seed=defaults.seed + ARROW_SEED_OFFSET,
    )
    return replace(style, fill=None)


def arrowhead_style(element: ElementBase, defaults: StyleDefaults) -> StrokeStyle:
    stroke = element.stroke or defaults.stroke
    return StrokeStyle(
        stroke=stroke,
        stroke_width=element.stroke_width or defaults.stroke_width,
        fill=stroke,
        fill_style="solid",
        roughness=ARROWHEAD_ROUGHNESS,
        seed=int(_first_set(element.seed, defaults.seed + ARROWHEAD_SEED_OFFSET)),
    )


def segment_style(style: StrokeStyle, index: int) -> StrokeStyle:
    return replace(style, fill=None, seed=style.seed + index)


def _first_set(*values: float | int | None) -> float:
    for value in values:
        if value is not None:
            return value
    return 0.0
