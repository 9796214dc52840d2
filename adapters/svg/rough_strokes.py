from __future__ import annotations

import math
import random
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from domain.models import Bounds, StrokeStyle
from domain.ports.rendering import PointList, StrokeRenderer

SVG_NS = "http://www.w3.org/2000/svg"
HATCHURE_FILL_STYLES = {"hachure", "cross-hatch"}
ELLIPSE_SAMPLES = 16

_PATH_TOKEN = re.compile(r"[A-Z]|-?\d+(?:\.\d+)?(?:e[-+]?\d+)?", re.IGNORECASE)


def svg_tag(name: str) -> str:
    return f"{{{SVG_NS}}}{name}"


def fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


@dataclass(frozen=True)
class RoughOptions:
    max_offset: float = 2.0
    bowing: float = 1.0
    hachure_gap: float = 8.0
    hachure_angle: float = -41.0


class RoughSvgStrokeRenderer(StrokeRenderer):
    """Hand-drawn style strokes as SVG paths.

    Every outline is drawn twice with seeded jitter, so identical geometry and
    seed always produce identical markup.
    """

    def __init__(self, options: RoughOptions | None = None) -> None:
        self.options = options or RoughOptions()
        self._pattern_count = 0

    def rectangle(self, bounds: Bounds, style: StrokeStyle) -> ET.Element:
        corners = [
            (bounds.x, bounds.y),
            (bounds.x + bounds.w, bounds.y),
            (bounds.x + bounds.w, bounds.y + bounds.h),
            (bounds.x, bounds.y + bounds.h),
        ]
        return self.polygon(corners, style)

    def polygon(self, points: PointList, style: StrokeStyle) -> ET.Element:
        rng = random.Random(style.seed)
        group = ET.Element(svg_tag("g"))
        outline = "M " + " L ".join(f"{fmt(x)} {fmt(y)}" for x, y in points) + " Z"
        self._append_fill(group, outline, style)
        closed = [*points, points[0]] if points else []
        segments = [
            self._rough_segment(rng, start, end, style.roughness)
            for start, end in zip(closed, closed[1:])
        ]
        group.append(self._stroke_path(" ".join(segments), style))
        return group

    def ellipse(self, bounds: Bounds, style: StrokeStyle) -> ET.Element:
        rng = random.Random(style.seed)
        group = ET.Element(svg_tag("g"))
        center = bounds.center
        rx, ry = bounds.w / 2, bounds.h / 2
        group_fill = (
            f"M {fmt(center.x - rx)} {fmt(center.y)} "
            f"A {fmt(rx)} {fmt(ry)} 0 1 0 {fmt(center.x + rx)} {fmt(center.y)} "
            f"A {fmt(rx)} {fmt(ry)} 0 1 0 {fmt(center.x - rx)} {fmt(center.y)} Z"
        )
        self._append_fill(group, group_fill, style)
        passes = []
        for _ in range(2):
            offset = self._offset(min(rx, ry) * 2, style.roughness)
            start_angle = rng.uniform(0, math.pi / 8)
            samples = []
            for index in range(ELLIPSE_SAMPLES):
                angle = start_angle + 2 * math.pi * index / ELLIPSE_SAMPLES
                wobble_x = rx + rng.uniform(-offset, offset)
                wobble_y = ry + rng.uniform(-offset, offset)
                samples.append(
                    (center.x + wobble_x * math.cos(angle), center.y + wobble_y * math.sin(angle))
                )
            passes.append(_closed_curve(samples))
        group.append(self._stroke_path(" ".join(passes), style))
        return group

    def line(self, points: PointList, style: StrokeStyle) -> ET.Element:
        rng = random.Random(style.seed)
        segments = [
            self._rough_segment(rng, start, end, style.roughness)
            for start, end in zip(points, points[1:])
        ]
        return self._stroke_path(" ".join(segments), style)

    def path(self, commands: str, style: StrokeStyle) -> ET.Element:
        """Sketch an absolute ``M``/``L``/``Q``/``Z`` path."""
        rng = random.Random(style.seed)
        group = ET.Element(svg_tag("g"))
        self._append_fill(group, commands, style)
        pieces: list[str] = []
        for command, args, current, start in _walk_path(commands):
            if command == "L":
                pieces.append(self._rough_segment(rng, current, args[0], style.roughness))
            elif command == "Q":
                pieces.append(self._rough_quadratic(rng, current, args[0], args[1], style))
            elif command == "Z" and current != start:
                pieces.append(self._rough_segment(rng, current, start, style.roughness))
        group.append(self._stroke_path(" ".join(pieces), style))
        return group

    def _append_fill(self, group: ET.Element, outline: str, style: StrokeStyle) -> None:
        if not style.fill:
            return
        fill_ref = style.fill
        if style.fill_style in HATCHURE_FILL_STYLES:
            fill_ref = f"url(#{self._append_hatch_pattern(group, style)})"
        group.append(
            ET.Element(
                svg_tag("path"),
                {"d": outline, "fill": fill_ref, "stroke": "none"},
            )
        )

    def _append_hatch_pattern(self, group: ET.Element, style: StrokeStyle) -> str:
        self._pattern_count += 1
        pattern_id = f"hatch-{style.seed}-{self._pattern_count}"
        gap = self.options.hachure_gap
        defs = ET.SubElement(group, svg_tag("defs"))
        pattern = ET.SubElement(
            defs,
            svg_tag("pattern"),
            {
                "id": pattern_id,
                "patternUnits": "userSpaceOnUse",
                "width": fmt(gap),
                "height": fmt(gap),
                "patternTransform": f"rotate({fmt(self.options.hachure_angle)})",
            },
        )
        hatch_width = fmt(max(0.5, style.stroke_width / 2))
        ET.SubElement(
            pattern,
            svg_tag("line"),
            {
                "x1": "0",
                "y1": "0",
                "x2": "0",
                "y2": fmt(gap),
                "stroke": style.fill or "none",
                "stroke-width": hatch_width,
            },
        )
        if style.fill_style == "cross-hatch":
            ET.SubElement(
                pattern,
                svg_tag("line"),
                {
                    "x1": "0",
                    "y1": "0",
                    "x2": fmt(gap),
                    "y2": "0",
                    "stroke": style.fill or "none",
                    "stroke-width": hatch_width,
                },
            )
        return pattern_id

    def _stroke_path(self, d: str, style: StrokeStyle) -> ET.Element:
        return ET.Element(
            svg_tag("path"),
            {
                "d": d,
                "fill": "none",
                "stroke": style.stroke,
                "stroke-width": fmt(style.stroke_width),
                "stroke-linecap": "round",
                "stroke-linejoin": "round",
            },
        )

    def _offset(self, length: float, roughness: float) -> float:
        return min(self.options.max_offset, length / 10) * roughness

    def _rough_segment(
        self,
        rng: random.Random,
        start: tuple[float, float],
        end: tuple[float, float],
        roughness: float,
    ) -> str:
        (x1, y1), (x2, y2) = start, end
        length = math.hypot(x2 - x1, y2 - y1)
        offset = self._offset(length, roughness)
        bow = self.options.bowing * roughness * length / 200
        strokes = []
        for pass_index in range(2):
            spread = offset if pass_index == 0 else offset / 2

            def jitter() -> float:
                return rng.uniform(-spread, spread) if spread > 0 else 0.0

            mid_bow_x = (y2 - y1) / (length or 1.0) * bow * rng.uniform(-1, 1)
            mid_bow_y = (x1 - x2) / (length or 1.0) * bow * rng.uniform(-1, 1)
            c1 = (
                x1 + (x2 - x1) * rng.uniform(0.2, 0.4) + mid_bow_x + jitter(),
                y1 + (y2 - y1) * rng.uniform(0.2, 0.4) + mid_bow_y + jitter(),
            )
            c2 = (
                x1 + (x2 - x1) * rng.uniform(0.6, 0.8) + mid_bow_x + jitter(),
                y1 + (y2 - y1) * rng.uniform(0.6, 0.8) + mid_bow_y + jitter(),
            )
            strokes.append(
                f"M {fmt(x1 + jitter())} {fmt(y1 + jitter())} "
                f"C {fmt(c1[0])} {fmt(c1[1])} {fmt(c2[0])} {fmt(c2[1])} "
                f"{fmt(x2 + jitter())} {fmt(y2 + jitter())}"
            )
        return " ".join(strokes)

    def _rough_quadratic(
        self,
        rng: random.Random,
        start: tuple[float, float],
        control: tuple[float, float],
        end: tuple[float, float],
        style: StrokeStyle,
    ) -> str:
        span = math.hypot(end[0] - start[0], end[1] - start[1])
        offset = self._offset(span, style.roughness)
        strokes = []
        for _ in range(2):
            def jitter() -> float:
                return rng.uniform(-offset, offset) if offset > 0 else 0.0

            strokes.append(
                f"M {fmt(start[0] + jitter())} {fmt(start[1] + jitter())} "
                f"Q {fmt(control[0] + jitter())} {fmt(control[1] + jitter())} "
                f"{fmt(end[0] + jitter())} {fmt(end[1] + jitter())}"
            )
        return " ".join(strokes)


def _closed_curve(points: Sequence[tuple[float, float]]) -> str:
    """Catmull-Rom spline through ``points`` as closed cubic segments."""
    count = len(points)
    if count < 3:
        return ""
    parts = [f"M {fmt(points[0][0])} {fmt(points[0][1])}"]
    for index in range(count):
        p0 = points[index - 1]
        p1 = points[index]
        p2 = points[(index + 1) % count]
        p3 = points[(index + 2) % count]
        c1 = (p1[0] + (p2[0] - p0[0]) / 6, p1[1] + (p2[1] - p0[1]) / 6)
        c2 = (p2[0] - (p3[0] - p1[0]) / 6, p2[1] - (p3[1] - p1[1]) / 6)
        parts.append(
            f"C {fmt(c1[0])} {fmt(c1[1])} {fmt(c2[0])} {fmt(c2[1])} {fmt(p2[0])} {fmt(p2[1])}"
        )
    return " ".join(parts)


def _walk_path(
    commands: str,
) -> Iterator[tuple[str, list[tuple[float, float]], tuple[float, float], tuple[float, float]]]:
    """Yield ``(command, points, current, subpath_start)`` for an absolute path."""
    tokens = _PATH_TOKEN.findall(commands)
    current = (0.0, 0.0)
    start = current
    index = 0
    while index < len(tokens):
        command = tokens[index].upper()
        index += 1
        if command == "Z":
            yield "Z", [], current, start
            current = start
            continue
        arity = {"M": 1, "L": 1, "Q": 2}.get(command)
        if arity is None:
            msg = f"Unsupported path command: {command}"
            raise ValueError(msg)
        coords = [float(value) for value in tokens[index : index + arity * 2]]
        index += arity * 2
        points = [(coords[i], coords[i + 1]) for i in range(0, len(coords), 2)]
        if command == "M":
            current = start = points[0]
            continue
        yield command, points, current, start
        current = points[-1]
