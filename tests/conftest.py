from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest

from domain.models import Scene


def _clear_sketch_env() -> None:
    for key in list(os.environ):
        if key.startswith("SKETCH_"):
            os.environ.pop(key, None)


_clear_sketch_env()


@pytest.fixture(autouse=True)
def clear_sketch_env() -> Generator[None, None, None]:
    _clear_sketch_env()
    yield
    _clear_sketch_env()


@pytest.fixture
def scene_factory() -> Callable[..., Scene]:
    def _factory(*elements: dict[str, Any], **overrides: Any) -> Scene:
        payload: dict[str, Any] = {"title": "Test Scene", "elements": list(elements)}
        payload.update(overrides)
        return Scene.model_validate(payload)

    return _factory


@pytest.fixture
def two_box_payload() -> dict[str, Any]:
    return {
        "title": "Two Boxes",
        "width": 500,
        "height": 200,
        "elements": [
            {"type": "rectangle", "id": "a", "x": 0, "y": 0, "width": 100, "height": 50},
            {"type": "rectangle", "id": "b", "x": 300, "y": 0, "width": 100, "height": 50},
            {"type": "arrow", "from": "a", "to": "b"},
        ],
    }
