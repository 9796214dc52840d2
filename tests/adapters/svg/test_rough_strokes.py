from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from adapters.svg.rough_strokes import RoughSvgStrokeRenderer, fmt, svg_tag
from domain.models import Bounds, StrokeStyle


def _style(**overrides: object) -> StrokeStyle:
    values: dict[str, object] = {
        "stroke": "#1e1e1e",
        "stroke_width": 1.5,
        "fill": None,
        "fill_style": "solid",
        "roughness": 1.2,
        "seed": 42,
    }
    values.update(overrides)
    return StrokeStyle(**values)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("value", "text"),
    [(1.0, "1"), (2.5, "2.5"), (0.126, "0.13"), (-0.001, "0"), (1000000.0, "1000000")],
)
def test_fmt_trims_trailing_zeros(value: float, text: str) -> None:
    assert fmt(value) == text


def test_same_seed_gives_identical_markup() -> None:
    bounds = Bounds(x=10, y=10, w=120, h=60)

    first = ET.tostring(RoughSvgStrokeRenderer().rectangle(bounds, _style()))
    second = ET.tostring(RoughSvgStrokeRenderer().rectangle(bounds, _style()))
    other_seed = ET.tostring(RoughSvgStrokeRenderer().rectangle(bounds, _style(seed=7)))

    assert first == second
    assert first != other_seed


def test_zero_roughness_traces_exact_corners() -> None:
    group = RoughSvgStrokeRenderer().rectangle(
        Bounds(x=0, y=0, w=100, h=50), _style(roughness=0)
    )

    (stroke,) = group.findall(svg_tag("path"))
    assert stroke.get("d", "").startswith("M 0 0 C")
    assert stroke.get("fill") == "none"
    assert stroke.get("stroke-width") == "1.5"


def test_solid_fill_precedes_stroke() -> None:
    group = RoughSvgStrokeRenderer().ellipse(
        Bounds(x=0, y=0, w=80, h=40), _style(fill="#a5d8ff")
    )

    fill, stroke = group.findall(svg_tag("path"))
    assert fill.get("fill") == "#a5d8ff"
    assert fill.get("stroke") == "none"
    assert stroke.get("stroke") == "#1e1e1e"


@pytest.mark.parametrize(("fill_style", "hatch_lines"), [("hachure", 1), ("cross-hatch", 2)])
def test_hatched_fill_uses_pattern(fill_style: str, hatch_lines: int) -> None:
    group = RoughSvgStrokeRenderer().polygon(
        [(0, 0), (40, 0), (20, 30)], _style(fill="#ffc9c9", fill_style=fill_style)
    )

    pattern = group.find(f"{svg_tag('defs')}/{svg_tag('pattern')}")
    assert pattern is not None
    assert pattern.get("id") == "hatch-42-1"
    assert len(pattern.findall(svg_tag("line"))) == hatch_lines
    fill = group.findall(svg_tag("path"))[0]
    assert fill.get("fill") == "url(#hatch-42-1)"


def test_line_is_single_stroke_path() -> None:
    node = RoughSvgStrokeRenderer().line([(0, 0), (10, 0), (10, 10)], _style())

    assert node.tag == svg_tag("path")
    assert node.get("d", "").count("M ") == 4


def test_path_follows_quadratic_commands() -> None:
    group = RoughSvgStrokeRenderer().path(
        "M 10 0 L 90 0 Q 100 0 100 10 Z", _style(roughness=0)
    )

    (stroke,) = group.findall(svg_tag("path"))
    d = stroke.get("d", "")
    assert "Q 100 0 100 10" in d
    assert d.count("C ") == 4


def test_path_rejects_unknown_commands() -> None:
    with pytest.raises(ValueError, match="Unsupported path command: A"):
        RoughSvgStrokeRenderer().path("M 0 0 A 5 5 0 0 1 10 10", _style())
