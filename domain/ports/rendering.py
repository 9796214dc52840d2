from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from typing import Protocol

from domain.models import Bounds, DrawingPlan, StrokeStyle

PointList = Sequence[tuple[float, float]]


class StrokeRenderer(Protocol):
    def rectangle(self, bounds: Bounds, style: StrokeStyle) -> ET.Element: ...

    def ellipse(self, bounds: Bounds, style: StrokeStyle) -> ET.Element: ...

    def polygon(self, points: PointList, style: StrokeStyle) -> ET.Element: ...

    def line(self, points: PointList, style: StrokeStyle) -> ET.Element: ...

    def path(self, commands: str, style: StrokeStyle) -> ET.Element: ...


class DocumentRenderer(Protocol):
    def render(self, plan: DrawingPlan) -> bytes: ...


class Rasterizer(Protocol):
    def rasterize(
        self, svg: bytes, width: int, background: str, fonts: Mapping[str, bytes]
    ) -> bytes:
        """PNG bytes for ``svg`` scaled to ``width``; ``fonts`` maps family to font file bytes."""
        ...
