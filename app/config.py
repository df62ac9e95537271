from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.hierarchical import LayoutConfig
from domain.models import DEFAULT_ORIENTATION, ORIENTATIONS, Orientation, is_valid_orientation

DEFAULT_CONFIG_PATH = Path("config/blocks_graph.yaml")
CONFIG_PATH_ENV = "BLOCKS_GRAPH_CONFIG_PATH"

logger = logging.getLogger(__name__)


class LayoutSettings(BaseModel):
    node_width: float = Field(default=200.0, gt=0)
    node_height: float = Field(default=80.0, gt=0)
    horizontal_spacing: float = Field(default=80.0, ge=0)
    vertical_spacing: float = Field(default=100.0, ge=0)
    orientation: Orientation = DEFAULT_ORIENTATION
    max_nodes_per_level: int | None = None

    @field_validator("orientation", mode="before")
    @classmethod
    def normalize_orientation(cls, value: object) -> str:
        if value is None or value == "":
            return DEFAULT_ORIENTATION
        normalized = str(value).strip().lower()
        if not is_valid_orientation(normalized):
            logger.warning(
                'Invalid orientation "%s". Using default "%s". Valid values: %s',
                value,
                DEFAULT_ORIENTATION,
                ", ".join(ORIENTATIONS),
            )
            return DEFAULT_ORIENTATION
        return normalized

    @field_validator("max_nodes_per_level", mode="before")
    @classmethod
    def normalize_max_nodes_per_level(cls, value: object) -> int | None:
        return parse_max_nodes_per_level(value)

    def to_layout_config(self) -> LayoutConfig:
        return LayoutConfig(
            node_width=self.node_width,
            node_height=self.node_height,
            horizontal_spacing=self.horizontal_spacing,
            vertical_spacing=self.vertical_spacing,
            orientation=self.orientation,
            max_nodes_per_level=self.max_nodes_per_level,
        )


class RenderSettings(BaseModel):
    transitive_reduction: bool = True


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BLOCKS_GRAPH_", env_nested_delimiter="__")

    layout: LayoutSettings = LayoutSettings()
    render: RenderSettings = RenderSettings()

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


def parse_max_nodes_per_level(value: object) -> int | None:
    if value is None or value == "":
        return None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        parsed = 0
    if parsed < 1:
        logger.warning(
            'Invalid max_nodes_per_level "%s". Must be a positive integer. Using unlimited.',
            value,
        )
        return None
    return parsed


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    env_value = os.getenv(CONFIG_PATH_ENV)
    if config_path is not None:
        candidate = config_path
    elif env_value:
        candidate = Path(env_value)
    elif DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    else:
        return None
    if not candidate.is_file():
        raise FileNotFoundError(f"Config file not found: {candidate}")
    return candidate


def load_settings(config_path: Path | None = None) -> AppSettings:
    yaml_path = resolve_config_path(config_path)
    saved_path = AppSettings._yaml_path
    AppSettings._yaml_path = yaml_path
    try:
        settings = AppSettings()
    finally:
        AppSettings._yaml_path = saved_path
    logger.debug("Loaded settings from %s", yaml_path or "environment")
    return settings
