from dataclasses import replace

import pytest

from shoot_scheduler.services.fingerprint import fingerprint, should_recompute
from shoot_scheduler.services.units import normalize_unit

from .factories import build_scene, build_unit


def test_fingerprint_is_stable_for_equal_content() -> None:
    first = [build_unit(1), build_unit(2)]
    second = [build_unit(1), build_unit(2)]

    assert fingerprint(first) == fingerprint(second)
    assert len(fingerprint(first)) == 64


def test_fingerprint_ignores_ids_and_owner() -> None:
    unit = build_unit(1)

    assert fingerprint([unit]) == fingerprint([replace(unit, id="other", user_id="someone")])


@pytest.mark.parametrize(
    "overrides",
    [
        {"sceneNumber": 2},
        {"title": "Retitled"},
        {"estimatedDuration": 61},
        {"timeOfDay": "night"},
        {"keywords": {"location": "Rooftop"}},
        {"keywords": {"date": "2026-11-03"}},
        {"keywords": {"equipment": "Crane"}},
        {"keywords": {"cast": ["Kim"]}},
        {"keywords": {"cast": ["Lee", "Kim"]}},
        {"keywords": {"props": ["Hat"]}},
        {"keywords": {"specialRequirements": ["Rain"]}},
        {"weights": {"locationPriority": 2}},
        {"weights": {"equipmentPriority": 2}},
        {"weights": {"castPriority": 2}},
        {"weights": {"timePriority": 2}},
        {"weights": {"complexity": 2}},
    ],
)
def test_fingerprint_changes_with_each_tracked_field(overrides) -> None:
    baseline = fingerprint([build_unit(1)])

    assert fingerprint([build_unit(1, **overrides)]) != baseline


def test_fingerprint_is_order_sensitive() -> None:
    first, second = build_unit(1), build_unit(2)

    assert fingerprint([first, second]) != fingerprint([second, first])


def test_fingerprint_sees_through_equivalent_raw_values() -> None:
    a = normalize_unit(build_scene(estimatedDuration="60분"))
    b = normalize_unit(build_scene(estimatedDuration=60))

    assert fingerprint([a]) == fingerprint([b])


def test_should_recompute() -> None:
    assert should_recompute("abc", None)
    assert should_recompute("abc", "")
    assert should_recompute("abc", "def")
    assert not should_recompute("abc", "abc")
