"""Entry point that gates schedule recomputation on the content fingerprint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from shoot_scheduler.services.fingerprint import fingerprint, should_recompute
from shoot_scheduler.services.scheduler import Schedule, SchedulingConfig, build_schedule
from shoot_scheduler.services.units import ProductionUnit
from shoot_scheduler.services.weights import DEFAULT_MULTIPLIERS, WeightMultipliers

logger = logging.getLogger(__name__)


@dataclass
class PlanOutcome:
    fingerprint: str
    recomputed: bool
    schedule: Schedule | None = None


def plan_schedule(
    units: Sequence[ProductionUnit],
    config: SchedulingConfig | None = None,
    *,
    stored_fingerprint: str | None = None,
    multipliers: WeightMultipliers = DEFAULT_MULTIPLIERS,
) -> PlanOutcome:
    """
    Build a schedule unless *units* match the fingerprint already stored.

    When the fingerprints match, ``schedule`` is None and the caller keeps
    the schedule it stored alongside *stored_fingerprint*.
    """

    if config is None:
        config = SchedulingConfig()
    config.validate()

    current = fingerprint(units)
    if not should_recompute(current, stored_fingerprint):
        logger.info("scene set unchanged (%s); reusing stored schedule", current[:12])
        return PlanOutcome(fingerprint=current, recomputed=False)

    schedule = build_schedule(units, config, multipliers=multipliers, content_fingerprint=current)
    logger.info(
        "recomputed schedule %s: %s scenes over %s days",
        current[:12],
        schedule.total_scenes,
        schedule.total_days,
    )
    return PlanOutcome(fingerprint=current, recomputed=True, schedule=schedule)
