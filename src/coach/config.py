from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    default_calorie_target: int = 2000
    weight_trend_window_days: int = 30
    log_level: str = "INFO"

    class Config:
        env_prefix = "COACH_"
        env_file = ".env"
        env_file_encoding = "utf-8"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def resolve_calorie_target(
    target_calories: Optional[int],
    settings: Optional[Settings] = None,
) -> int:
    """
    Resolve a user's daily calorie target once, at the call boundary.

    Profiles with no target (None or 0) fall back to the configured default so
    the nutrition analyzers can always assume a positive target.
    """
    if target_calories is not None and target_calories > 0:
        return int(target_calories)
    return (settings or get_settings()).default_calorie_target
