import os
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggerSettings(BaseSettings):
    """
    Logger-specific settings, loaded from a .logger.env file.

    Attributes:
        log_level (str): The minimum level for log messages. Defaults to "INFO".
        log_json (bool): Whether to output logs in JSON format. Defaults to False.
        model_config (SettingsConfigDict): Pydantic settings configuration.
    """

    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(__file__), ".logger.env")
    )


@lru_cache()
def get_logger_settings() -> LoggerSettings:
    """
    Get the cached LoggerSettings instance.

    Returns:
        LoggerSettings: The logger settings.
    """
    return LoggerSettings()
