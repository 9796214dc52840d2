from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from adapters.filesystem.json_utils import load_json_object
from domain.models import Scene, SceneFormatError
from domain.ports.repositories import SceneRepository


class FileSystemSceneRepository(SceneRepository):
    def load(self, path: Path) -> Scene:
        payload = load_json_object(path)
        try:
            return Scene.model_validate(payload)
        except ValidationError as exc:
            msg = f"Invalid scene in {path}: {exc}"
            raise SceneFormatError(msg) from exc
