from __future__ import annotations

from pathlib import Path
from typing import Protocol

from domain.models import RenderedScene, Scene


class SceneRepository(Protocol):
    def load(self, path: Path) -> Scene: ...


class RenderOutputRepository(Protocol):
    def save(self, rendered: RenderedScene, directory: Path) -> list[Path]: ...
