import numpy as np
import pytest

import src.config
import src.core.logging
from src.config import (
    HarnessSettings,
    LoggerSettings,
    ServiceSettings,
    Settings,
)


@pytest.fixture(scope="session", autouse=True)
def mock_settings():
    """
    Override the get_settings function for the entire test session.

    This fixture manually patches the settings so that values from a local
    environment or .env files never leak into the tests. It uses a session
    scope to ensure the patch is active before any tests run.
    """
    original_get_settings = src.config.get_settings

    settings = Settings(
        service=ServiceSettings(env="dev", service_name="variates-test"),
        logger_settings=LoggerSettings(log_level="DEBUG", log_json=False),
        harness=HarnessSettings(sample_count=10_000, seed=1234),
    )

    def get_mock_settings():
        """This function will replace the real get_settings()."""
        return settings

    try:
        src.config.get_settings = get_mock_settings
        src.core.logging.get_settings = get_mock_settings
        yield
    finally:
        src.config.get_settings = original_get_settings
        src.core.logging.get_settings = original_get_settings


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible sampling."""
    return np.random.default_rng(20240601)
