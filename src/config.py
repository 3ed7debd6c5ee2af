import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.config import get_logger_settings, LoggerSettings
from src.variates.config import get_harness_settings, HarnessSettings


class ServiceSettings(BaseSettings):
    """
    Service-specific settings, loaded from a .service.env file.

    Attributes:
        env (Literal["dev", "prod"]): The environment the tools run in. Defaults to "dev".
        service_name (str): Name attached to every log event. Defaults to "variates".
        model_config (SettingsConfigDict): Pydantic settings configuration.
    """

    env: Literal["dev", "prod"] = "dev"
    service_name: str = "variates"

    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(__file__), ".service.env")
    )

    @property
    def debug(self) -> bool:
        """
        Determine if debug output is enabled based on the environment.

        Returns:
            bool: True if the environment is "dev", False otherwise.
        """

        return self.env == "dev"


@lru_cache()
def get_service_settings() -> ServiceSettings:
    """
    Get the cached ServiceSettings instance.

    Returns:
        ServiceSettings: The service settings.
    """
    return ServiceSettings()


class Settings(BaseSettings):
    """
    Aggregate all application settings.

    Attributes:
        service (ServiceSettings): Service-specific settings.
        logger_settings (LoggerSettings): Logger-specific settings.
        harness (HarnessSettings): Sampling harness settings.
    """

    service: ServiceSettings = Field(default_factory=get_service_settings)
    logger_settings: LoggerSettings = Field(default_factory=get_logger_settings)
    harness: HarnessSettings = Field(default_factory=get_harness_settings)


@lru_cache
def get_settings() -> Settings:
    """
    Get the cached Settings instance.

    Returns:
        Settings: The aggregated application settings.
    """

    return Settings()
