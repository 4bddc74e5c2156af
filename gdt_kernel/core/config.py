"""Runtime settings for the GD&T kernel.

Only display precision defaults and logging are configurable; tolerance
formulas and constants are fixed in code.
"""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Display precision (decimal places) per unit
    DEFAULT_PRECISION_MM: int = 3
    DEFAULT_PRECISION_INCH: int = 4

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }


_settings_cache: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = Settings()
    return _settings_cache


def reset_settings_cache() -> None:
    global _settings_cache
    _settings_cache = None
