from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
import pytest

from adapters.filesystem.json_utils import load_json_object, write_bytes_atomic
from adapters.filesystem.output_repository import FileSystemRenderOutputRepository
from adapters.filesystem.scene_repository import FileSystemSceneRepository
from domain.models import RectangleElement, RenderedScene, SceneFormatError


def test_load_scene_from_json(tmp_path: Path, two_box_payload: dict[str, Any]) -> None:
    path = tmp_path / "scene.json"
    path.write_bytes(orjson.dumps(two_box_payload))

    scene = FileSystemSceneRepository().load(path)

    assert scene.title == "Two Boxes"
    assert isinstance(scene.elements[0], RectangleElement)
    assert len(scene.elements) == 3


@pytest.mark.parametrize(
    ("content", "message"),
    [
        (b"{not json", "Invalid JSON"),
        (b"[1, 2, 3]", "must be a JSON object"),
    ],
)
def test_unreadable_documents_raise_scene_format_error(
    tmp_path: Path, content: bytes, message: str
) -> None:
    path = tmp_path / "scene.json"
    path.write_bytes(content)

    with pytest.raises(SceneFormatError, match=message):
        load_json_object(path)


def test_invalid_scene_fields_raise_scene_format_error(tmp_path: Path) -> None:
    path = tmp_path / "scene.json"
    path.write_bytes(orjson.dumps({"width": -5}))

    with pytest.raises(SceneFormatError, match="Invalid scene"):
        FileSystemSceneRepository().load(path)


def test_atomic_write_replaces_content(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "out.svg"

    write_bytes_atomic(target, b"first")
    write_bytes_atomic(target, b"second")

    assert target.read_bytes() == b"second"
    assert not (tmp_path / "nested" / "out.svg.tmp").exists()


def test_output_repository_writes_svg_and_png(tmp_path: Path) -> None:
    rendered = RenderedScene(slug="flow", svg=b"<svg/>", png=b"\x89PNG")

    written = FileSystemRenderOutputRepository().save(rendered, tmp_path / "out")

    assert written == [tmp_path / "out" / "flow.svg", tmp_path / "out" / "flow.png"]
    assert written[0].read_bytes() == b"<svg/>"
    assert written[1].read_bytes() == b"\x89PNG"


def test_output_repository_skips_missing_png(tmp_path: Path) -> None:
    rendered = RenderedScene(slug="flow", svg=b"<svg/>", png=None)

    written = FileSystemRenderOutputRepository().save(rendered, tmp_path)

    assert written == [tmp_path / "flow.svg"]
    assert not (tmp_path / "flow.png").exists()
