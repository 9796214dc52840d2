from __future__ import annotations

import xml.etree.ElementTree as ET

from adapters.svg.fonts import HAND_FONT_STACK, MONO_FONT_STACK, FontResources
from adapters.svg.rough_strokes import SVG_NS, RoughSvgStrokeRenderer, fmt, svg_tag
from domain.models import DrawingPlan, ShapeInstruction, TextRun
from domain.ports.rendering import DocumentRenderer, StrokeRenderer

ET.register_namespace("", SVG_NS)


class SvgDocumentRenderer(DocumentRenderer):
    def __init__(
        self,
        stroke_renderer: StrokeRenderer | None = None,
        fonts: FontResources | None = None,
    ) -> None:
        self.stroke_renderer = stroke_renderer or RoughSvgStrokeRenderer()
        self.fonts = fonts or FontResources()

    def render(self, plan: DrawingPlan) -> bytes:
        root = self.build(plan)
        return ET.tostring(root, encoding="utf-8", xml_declaration=False)

    def build(self, plan: DrawingPlan) -> ET.Element:
        width = fmt(plan.width)
        height = fmt(plan.height)
        root = ET.Element(
            svg_tag("svg"),
            {"width": width, "height": height, "viewBox": f"0 0 {width} {height}"},
        )
        css = self.fonts.font_face_css()
        if css:
            defs = ET.SubElement(root, svg_tag("defs"))
            style = ET.SubElement(defs, svg_tag("style"))
            style.text = css
        ET.SubElement(
            root,
            svg_tag("rect"),
            {"width": width, "height": height, "fill": plan.background},
        )
        for instruction in plan.instructions:
            if isinstance(instruction, TextRun):
                root.append(self._text(instruction))
            else:
                root.append(self._shape(instruction))
        return root

    def _shape(self, instruction: ShapeInstruction) -> ET.Element:
        renderer = self.stroke_renderer
        style = instruction.style
        if instruction.primitive == "rectangle" and instruction.bounds is not None:
            return renderer.rectangle(instruction.bounds, style)
        if instruction.primitive == "ellipse" and instruction.bounds is not None:
            return renderer.ellipse(instruction.bounds, style)
        if instruction.primitive == "polygon":
            return renderer.polygon(instruction.points, style)
        if instruction.primitive == "line":
            return renderer.line(instruction.points, style)
        if instruction.primitive == "path" and instruction.path:
            return renderer.path(instruction.path, style)
        msg = f"Incomplete {instruction.primitive} instruction"
        raise ValueError(msg)

    def _text(self, run: TextRun) -> ET.Element:
        attrs = {
            "x": fmt(run.x),
            "y": fmt(run.y),
            "text-anchor": run.anchor,
            "dominant-baseline": "central",
            "font-family": MONO_FONT_STACK if run.mono else HAND_FONT_STACK,
            "font-size": fmt(run.font_size),
            "fill": run.color,
        }
        if run.font_weight:
            attrs["font-weight"] = run.font_weight
        node = ET.Element(svg_tag("text"), attrs)
        node.text = run.text
        return node
