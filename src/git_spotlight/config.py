"""Pydantic settings with env var support.

Precedence (highest to lowest):
1. Direct kwargs to ``load_settings()``
2. Environment variables (``GIT_SPOTLIGHT__SECTION__KEY``)
3. Built-in defaults (this file)

Examples:
    GIT_SPOTLIGHT__DURATION=14d
    GIT_SPOTLIGHT__HIGHLIGHT__COLOR_OPACITY=0.4
    GIT_SPOTLIGHT__CACHE__CAPACITY=100
    GIT_SPOTLIGHT__LOGGING__LEVEL=DEBUG
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from git_spotlight.errors import ConfigError
from git_spotlight.models import HeatmapConfig
from git_spotlight.timeparse import is_valid_duration

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class HighlightSettings(BaseModel):
    """Colors and tone used by the classifier.

    Env vars:
        GIT_SPOTLIGHT__HIGHLIGHT__ENABLE_UNCOMMITTED_HIGHLIGHT
        GIT_SPOTLIGHT__HIGHLIGHT__COLOR_SATURATION / _LIGHTNESS / _OPACITY
    """

    enable_uncommitted_highlight: bool = Field(
        default=True,
        description="Report uncommitted lines as their own layer in age, author, commit and heatmap modes.",
    )
    age_highlight_color: str = "rgba(70,130,180,0.3)"
    uncommitted_highlight_color: str = "rgba(180,80,80,0.25)"
    uncommitted_underline_color: str = Field(
        default="rgba(180,80,80,0.6)",
        description="Underline for uncommitted lines, carried on the uncommitted group.",
    )
    selected_highlight_color: str = "rgba(64,224,208,0.3)"
    review_highlight_color: str = "rgba(218,165,32,0.3)"
    color_saturation: float = Field(default=55.0, ge=0.0, le=100.0)
    color_lightness: float = Field(default=45.0, ge=0.0, le=100.0)
    color_opacity: float = Field(default=0.28, ge=0.0, le=1.0)
    distinct_palette: bool = Field(
        default=False,
        description="Use the hand-picked palette for author/commit groups when there are 10 or fewer.",
    )


class HeatmapSettings(BaseModel):
    """Gradient endpoints only; saturation, lightness and opacity come from ``highlight``.

    Env vars: GIT_SPOTLIGHT__HEATMAP__COLD_HUE, GIT_SPOTLIGHT__HEATMAP__HOT_HUE
    """

    model_config = ConfigDict(extra="forbid")

    cold_hue: float = Field(default=240.0, description="Hue for the oldest line.")
    hot_hue: float = Field(default=160.0, description="Hue for the newest line.")


class CacheSettings(BaseModel):
    """Env vars: GIT_SPOTLIGHT__CACHE__CAPACITY"""

    capacity: int = Field(default=50, ge=1, description="Maximum number of files kept in the blame cache.")


class LoggingConfig(BaseModel):
    """Env vars: GIT_SPOTLIGHT__LOGGING__LEVEL, GIT_SPOTLIGHT__LOGGING__JSON_FORMAT"""

    level: LogLevel = "INFO"
    json_format: bool = False


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(
        env_prefix="GIT_SPOTLIGHT__",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    duration: str = Field(default="30d", description='Age-mode window, e.g. "7d", "3m" or an ISO date.')
    highlight: HighlightSettings = HighlightSettings()
    heatmap: HeatmapSettings = HeatmapSettings()
    cache: CacheSettings = CacheSettings()
    logging: LoggingConfig = LoggingConfig()

    @field_validator("duration")
    @classmethod
    def _check_duration(cls, value: str) -> str:
        if not is_valid_duration(value):
            raise ValueError(f"not a duration: {value!r}")
        return value.strip()

    def heatmap_tone(self) -> HeatmapConfig:
        """Heatmap hues from ``heatmap`` combined with the shared highlight tone."""
        return HeatmapConfig(
            cold_hue=self.heatmap.cold_hue,
            hot_hue=self.heatmap.hot_hue,
            saturation=self.highlight.color_saturation,
            lightness=self.highlight.color_lightness,
            opacity=self.highlight.color_opacity,
        )


def load_settings(**kwargs: Any) -> Settings:
    """Load settings: defaults < env vars < kwargs.

    Raises:
        ConfigError: When any value fails validation.
    """
    try:
        return Settings(**kwargs)
    except ValidationError as exc:
        err = exc.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError(field, err.get("input"), err["msg"]) from exc
