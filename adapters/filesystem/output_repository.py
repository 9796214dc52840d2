from __future__ import annotations

from pathlib import Path

from filelock import FileLock

from adapters.filesystem.json_utils import write_bytes_atomic
from domain.models import RenderedScene
from domain.ports.repositories import RenderOutputRepository


class FileSystemRenderOutputRepository(RenderOutputRepository):
    def save(self, rendered: RenderedScene, directory: Path) -> list[Path]:
        directory.mkdir(parents=True, exist_ok=True)
        outputs = [(directory / f"{rendered.slug}.svg", rendered.svg)]
        if rendered.png is not None:
            outputs.append((directory / f"{rendered.slug}.png", rendered.png))
        for path, payload in outputs:
            lock_path = path.with_suffix(f"{path.suffix}.lock")
            with FileLock(str(lock_path)):
                write_bytes_atomic(path, payload)
        return [path for path, _ in outputs]
