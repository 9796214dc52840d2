from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from domain.models import SceneFormatError


def load_json_object(path: Path) -> dict[str, Any]:
    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise SceneFormatError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Scene root must be a JSON object: {path}"
        raise SceneFormatError(msg)
    return data


def write_bytes_atomic(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(payload)
    tmp_path.replace(path)
