from __future__ import annotations

from adapters.svg.document import SvgDocumentRenderer
from adapters.svg.fonts import FontResources
from adapters.svg.rough_strokes import RoughSvgStrokeRenderer
from app.config import AppSettings
from domain.ports.rendering import Rasterizer
from domain.services.render_scene import SceneRenderer


def build_rasterizer(settings: AppSettings) -> Rasterizer | None:
    if not settings.render.write_png:
        return None
    # cairosvg loads libcairo at import time.
    from adapters.raster.cairosvg_rasterizer import CairoSvgRasterizer

    return CairoSvgRasterizer()


def build_scene_renderer(settings: AppSettings) -> SceneRenderer:
    fonts = FontResources.from_directory(settings.render.fonts_dir)
    document_renderer = SvgDocumentRenderer(RoughSvgStrokeRenderer(), fonts)
    return SceneRenderer(
        document_renderer,
        rasterizer=build_rasterizer(settings),
        defaults=settings.style.to_defaults(),
        raster_scale=settings.render.raster_scale,
        fonts=fonts.fonts,
    )
