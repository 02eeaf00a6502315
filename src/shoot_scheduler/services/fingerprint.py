"""Content fingerprints that tell whether a scene set needs rescheduling."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Sequence

from shoot_scheduler.services.units import ProductionUnit


def canonical_projection(unit: ProductionUnit) -> list[Any]:
    """Tracked fields of *unit* in a fixed order."""

    keywords = unit.keywords
    return [
        unit.scene_number,
        unit.title,
        unit.estimated_duration_minutes,
        unit.time_of_day.value,
        keywords.location,
        keywords.date,
        keywords.equipment,
        list(keywords.cast),
        list(keywords.props),
        list(keywords.special_requirements),
        list(unit.weights.as_tuple()),
    ]


def fingerprint(units: Sequence[ProductionUnit]) -> str:
    """SHA-256 over the canonical projection of *units*, in input order."""

    payload = json.dumps(
        [canonical_projection(unit) for unit in units],
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def should_recompute(new_fingerprint: str, stored_fingerprint: str | None) -> bool:
    return not stored_fingerprint or new_fingerprint != stored_fingerprint
