from __future__ import annotations

import logging
import math
from collections.abc import Mapping

from domain.models import DrawingPlan, RenderedScene, Scene
from domain.ports.rendering import DocumentRenderer, Rasterizer
from domain.services.scene_walker import SceneWalker
from domain.services.stroke_styles import StyleDefaults

logger = logging.getLogger(__name__)

DEFAULT_RASTER_SCALE = 2.0


class SceneRenderer:
    def __init__(
        self,
        document_renderer: DocumentRenderer,
        rasterizer: Rasterizer | None = None,
        defaults: StyleDefaults | None = None,
        raster_scale: float = DEFAULT_RASTER_SCALE,
        fonts: Mapping[str, bytes] | None = None,
    ) -> None:
        self.document_renderer = document_renderer
        self.rasterizer = rasterizer
        self.walker = SceneWalker(defaults)
        self.raster_scale = raster_scale
        self.fonts = dict(fonts or {})

    def plan(self, scene: Scene) -> DrawingPlan:
        return self.walker.walk(scene)

    def render(self, scene: Scene) -> RenderedScene:
        plan = self.plan(scene)
        if plan.skipped:
            logger.warning(
                "Rendered %s with %d skipped element(s)", plan.slug, len(plan.skipped)
            )
        svg = self.document_renderer.render(plan)
        png = None
        if self.rasterizer is not None:
            png = self.rasterizer.rasterize(
                svg, self.raster_width(plan), plan.background, self.fonts
            )
        return RenderedScene(slug=plan.slug, svg=svg, png=png)

    def raster_width(self, plan: DrawingPlan) -> int:
        return max(1, math.ceil(plan.width * self.raster_scale))
