"""herald configuration system — typed settings loaded from .env."""

import logging

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_config_instance: "HeraldConfig | None" = None


class HeraldConfig(BaseSettings):
    """All herald settings, loaded from environment variables with HERALD_ prefix.

    Immutable once constructed.
    """

    # Heads-up policy
    navigation_headsup_enabled: bool = True
    trusted_packages: list[str] = ["android", "com.android.systemui"]

    # Heads-up timing (milliseconds)
    headsup_duration_ms: int = 8000
    min_display_duration_ms: int = 3000
    snooze_duration_ms: int = 60_000

    # Animation durations (milliseconds), handed to the rendering surface
    enter_animation_duration_ms: int = 650
    alpha_enter_animation_duration_ms: int = 500
    exit_animation_duration_ms: int = 300

    # Alert sound
    beep_enabled: bool = True
    beep_volume: float = 0.3
    beep_sample_rate: int = 22050

    # System
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="HERALD_",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="after")
    def _check_durations(self) -> "HeraldConfig":
        durations = {
            "headsup_duration_ms": self.headsup_duration_ms,
            "min_display_duration_ms": self.min_display_duration_ms,
            "snooze_duration_ms": self.snooze_duration_ms,
            "enter_animation_duration_ms": self.enter_animation_duration_ms,
            "alpha_enter_animation_duration_ms": self.alpha_enter_animation_duration_ms,
            "exit_animation_duration_ms": self.exit_animation_duration_ms,
        }
        negative = [name for name, value in durations.items() if value < 0]
        if negative:
            raise ValueError(f"Durations must be non-negative: {', '.join(negative)}")
        return self


def get_config() -> HeraldConfig:
    """Get the cached HeraldConfig instance.

    Returns:
        The shared HeraldConfig loaded from environment.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = HeraldConfig()
        logger.debug("Loaded configuration: %s", _config_instance)
    return _config_instance
