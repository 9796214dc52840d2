from __future__ import annotations

import logging
from collections.abc import Mapping

import cairosvg

from adapters.raster.font_registry import FontRegistry
from domain.ports.rendering import Rasterizer

logger = logging.getLogger(__name__)

_SHARED_REGISTRY = FontRegistry()


class CairoSvgRasterizer(Rasterizer):
    """PNG output through cairosvg.

    cairosvg ignores ``@font-face`` rules, so the font bytes are registered
    with fontconfig before drawing and text resolves to them by family name.
    """

    def __init__(self, font_registry: FontRegistry | None = None) -> None:
        self.font_registry = font_registry or _SHARED_REGISTRY

    def rasterize(
        self, svg: bytes, width: int, background: str, fonts: Mapping[str, bytes]
    ) -> bytes:
        self.font_registry.register(fonts)
        logger.debug("Rasterizing %d bytes of SVG at width %d", len(svg), width)
        png = cairosvg.svg2png(
            bytestring=svg,
            output_width=width,
            background_color=background,
        )
        return png or b""
