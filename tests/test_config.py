import logging

import pytest

from shoot_scheduler.core.config import Settings, get_settings
from shoot_scheduler.core.logging import LOGGER_NAME, configure_logging


def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.max_daily_minutes == 480
    assert settings.max_weekly_minutes == 2880
    assert settings.rest_day_interval == 6
    assert settings.cast_key_policy == "sorted"
    assert settings.schedule_strategy == "greedy"


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOOT_MAX_DAILY_MINUTES", "600")
    monkeypatch.setenv("SHOOT_CAST_KEY_POLICY", "ordered")

    settings = Settings()

    assert settings.max_daily_minutes == 600
    assert settings.cast_key_policy == "ordered"


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_configure_logging_adds_single_handler() -> None:
    logger = configure_logging("debug")
    configure_logging("INFO")

    marked = [handler for handler in logger.handlers if getattr(handler, "_shoot_scheduler", False)]
    assert logger.name == LOGGER_NAME
    assert len(marked) == 1
    assert logger.level == logging.INFO
