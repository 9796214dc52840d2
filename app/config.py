from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.services.stroke_styles import StyleDefaults

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = Path("config/sketch.yaml")
DEFAULT_FONTS_DIR = PROJECT_ROOT / "fonts"
LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class RenderSettings(BaseModel):
    fonts_dir: Path = DEFAULT_FONTS_DIR
    raster_scale: float = Field(default=2.0, gt=0)
    write_png: bool = True
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            msg = f"render.log_level must be one of {sorted(LOG_LEVELS)}"
            raise ValueError(msg)
        return level


class StyleSettings(BaseModel):
    stroke: str = "#1e1e1e"
    stroke_width: float = Field(default=1.5, gt=0)
    fill_style: str = "solid"
    roughness: float = Field(default=1.2, ge=0)
    seed: int = 42

    def to_defaults(self) -> StyleDefaults:
        return StyleDefaults(
            stroke=self.stroke,
            stroke_width=self.stroke_width,
            fill_style=self.fill_style,
            roughness=self.roughness,
            seed=self.seed,
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SKETCH_", env_nested_delimiter="__")

    render: RenderSettings = RenderSettings()
    style: StyleSettings = StyleSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    """Explicit path, then ``SKETCH_CONFIG_PATH``, then ``config/sketch.yaml`` if present."""
    if config_path is not None:
        candidate = config_path
    elif os.getenv("SKETCH_CONFIG_PATH"):
        candidate = Path(os.environ["SKETCH_CONFIG_PATH"])
    elif DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    else:
        return None
    if not candidate.is_file():
        raise FileNotFoundError(errno.ENOENT, "Config file not found", str(candidate))
    return candidate


def load_settings(config_path: Path | None = None) -> AppSettings:
    previous = AppSettings._yaml_path
    AppSettings._yaml_path = resolve_config_path(config_path)
    try:
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
