import logging

import pytest

from shoot_scheduler.core.errors import ConfigurationError
from shoot_scheduler.services.fingerprint import fingerprint
from shoot_scheduler.services.planner import plan_schedule
from shoot_scheduler.services.scheduler import SchedulingConfig

from .factories import build_units


def test_plan_schedule_computes_without_stored_fingerprint() -> None:
    units = build_units([120, 120])

    outcome = plan_schedule(units)

    assert outcome.recomputed
    assert outcome.fingerprint == fingerprint(units)
    assert outcome.schedule is not None
    assert outcome.schedule.content_fingerprint == outcome.fingerprint


def test_plan_schedule_reuses_matching_fingerprint(caplog: pytest.LogCaptureFixture) -> None:
    units = build_units([120, 120])

    with caplog.at_level(logging.INFO, logger="shoot_scheduler"):
        outcome = plan_schedule(units, stored_fingerprint=fingerprint(units))

    assert not outcome.recomputed
    assert outcome.schedule is None
    assert "reusing stored schedule" in caplog.text


def test_plan_schedule_recomputes_after_change() -> None:
    stored = fingerprint(build_units([120, 120]))

    outcome = plan_schedule(build_units([120, 90]), stored_fingerprint=stored)

    assert outcome.recomputed
    assert outcome.fingerprint != stored
    assert outcome.schedule.total_duration_minutes == 210


def test_plan_schedule_rejects_invalid_config_before_work() -> None:
    config = SchedulingConfig()
    object.__setattr__(config, "max_daily_minutes", -1)

    with pytest.raises(ConfigurationError):
        plan_schedule(build_units([10]), config)
