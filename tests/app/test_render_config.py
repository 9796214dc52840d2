from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from app.config import DEFAULT_FONTS_DIR, load_settings, resolve_config_path
from app.render_wiring import build_rasterizer, build_scene_renderer


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def test_defaults_without_config() -> None:
    settings = load_settings()

    assert settings.render.fonts_dir == DEFAULT_FONTS_DIR
    assert DEFAULT_FONTS_DIR.is_absolute()
    assert settings.render.raster_scale == 2.0
    assert settings.render.write_png is True
    assert settings.render.log_level == "INFO"
    assert settings.style.to_defaults().seed == 42


def test_yaml_file_is_loaded(tmp_path: Path) -> None:
    config_path = tmp_path / "sketch.yaml"
    config_path.write_text(
        "render:\n  raster_scale: 3\n  log_level: debug\nstyle:\n  roughness: 0.5\n"
    )

    settings = load_settings(config_path)

    assert settings.render.raster_scale == 3
    assert settings.render.log_level == "DEBUG"
    assert settings.style.roughness == 0.5


def test_default_config_path_is_used(tmp_path: Path) -> None:
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "sketch.yaml").write_text("style:\n  seed: 3\n")

    assert load_settings().style.seed == 3


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "sketch.yaml"
    config_path.write_text("style:\n  seed: 3\n")
    monkeypatch.setenv("SKETCH_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("SKETCH_STYLE__SEED", "9")

    assert load_settings().style.seed == 9


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found") as excinfo:
        load_settings(tmp_path / "missing.yaml")

    assert excinfo.value.filename == str(tmp_path / "missing.yaml")


def test_missing_env_config_path_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SKETCH_CONFIG_PATH", str(tmp_path / "gone.yaml"))

    with pytest.raises(FileNotFoundError):
        load_settings()


def test_explicit_config_path_wins_over_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("style:\n  seed: 5\n")
    monkeypatch.setenv("SKETCH_CONFIG_PATH", str(tmp_path / "gone.yaml"))

    assert resolve_config_path(explicit) == explicit
    assert load_settings(explicit).style.seed == 5


def test_invalid_log_level_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SKETCH_RENDER__LOG_LEVEL", "chatty")

    with pytest.raises(ValidationError, match="log_level"):
        load_settings()


def test_wiring_respects_write_png(tmp_path: Path) -> None:
    config_path = tmp_path / "sketch.yaml"
    config_path.write_text("render:\n  write_png: false\n  raster_scale: 1.5\n")
    settings = load_settings(config_path)

    renderer = build_scene_renderer(settings)

    assert build_rasterizer(settings) is None
    assert renderer.rasterizer is None
    assert renderer.raster_scale == 1.5


def test_wiring_hands_fonts_to_renderer(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "Virgil.woff2").write_bytes(b"wOF2virgil")
    monkeypatch.setenv("SKETCH_RENDER__FONTS_DIR", str(tmp_path))
    monkeypatch.setenv("SKETCH_RENDER__WRITE_PNG", "false")

    renderer = build_scene_renderer(load_settings())

    assert renderer.fonts == {"Virgil": b"wOF2virgil"}
