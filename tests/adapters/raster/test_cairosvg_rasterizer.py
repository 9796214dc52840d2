from __future__ import annotations

from pathlib import Path

import pytest

try:
    import cairosvg  # noqa: F401
except (ImportError, OSError):
    pytest.skip("cairosvg or libcairo is not available", allow_module_level=True)

from adapters.raster.cairosvg_rasterizer import CairoSvgRasterizer
from adapters.raster.font_registry import FontRegistry

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
SVG = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="50" height="20" viewBox="0 0 50 20">'
    b'<path d="M 0 0 L 50 20" stroke="#1e1e1e" fill="none"/></svg>'
)


class RecordingRegistry(FontRegistry):
    def __init__(self, cache_dir: Path) -> None:
        super().__init__(cache_dir=cache_dir)
        self.requests: list[dict[str, bytes]] = []

    def register(self, fonts: dict[str, bytes]) -> list[Path]:  # type: ignore[override]
        self.requests.append(dict(fonts))
        return []


def test_rasterize_scales_to_requested_width(tmp_path: Path) -> None:
    registry = RecordingRegistry(tmp_path)

    png = CairoSvgRasterizer(registry).rasterize(SVG, 100, "#FAF8F5", {"Virgil": b"wOF2"})

    assert png.startswith(PNG_SIGNATURE)
    width = int.from_bytes(png[16:20], "big")
    height = int.from_bytes(png[20:24], "big")
    assert (width, height) == (100, 40)
    assert registry.requests == [{"Virgil": b"wOF2"}]
