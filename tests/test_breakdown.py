from shoot_scheduler.services.breakdown import BREAKDOWN_CATEGORIES, aggregate, build_breakdown_index

from .factories import build_unit


def test_cast_is_union_without_duplicates() -> None:
    units = [
        build_unit(1, keywords={"cast": ["Kim", "Lee"]}),
        build_unit(2, keywords={"cast": ["Lee", "Park"]}),
        build_unit(3, keywords={"cast": ["Kim"]}),
    ]

    assert aggregate(units).cast == {"Kim", "Lee", "Park"}


def test_empty_location_and_equipment_are_kept() -> None:
    units = [
        build_unit(1, keywords={"location": "", "equipment": ""}),
        build_unit(2, keywords={"location": "Cafe", "equipment": "Crane"}),
    ]

    breakdown = aggregate(units)

    assert breakdown.locations == {"", "Cafe"}
    assert breakdown.equipment == {"", "Crane"}


def test_aggregate_of_no_units_is_empty() -> None:
    breakdown = aggregate([])

    assert breakdown.locations == set()
    assert breakdown.props == set()


def test_breakdown_index_lists_scenes_per_item_in_input_order() -> None:
    units = [
        build_unit(3, keywords={"props": ["Umbrella", "Umbrella"], "specialRequirements": ["Rain"]}),
        build_unit(1, keywords={"props": ["Umbrella"]}),
    ]

    index = build_breakdown_index(units)

    assert set(index) == set(BREAKDOWN_CATEGORIES)
    assert index["props"] == {"Umbrella": [3, 1]}
    assert index["special_requirements"] == {"Rain": [3]}
    assert index["locations"] == {"Studio A": [3, 1]}
    assert index["time_of_day"] == {"morning": [3, 1]}
