import pytest

from shoot_scheduler.services.grouping import (
    CastKeyPolicy,
    RelationshipKey,
    cast_key,
    group_by,
    group_index,
)

from .factories import build_unit


@pytest.fixture()
def units():
    return [
        build_unit(1, keywords={"location": "Cafe", "cast": ["Kim", "Lee"]}),
        build_unit(2, keywords={"location": "Rooftop", "cast": ["Lee", "Kim"]}),
        build_unit(3, keywords={"location": "Cafe", "cast": ["Park"]}),
        build_unit(4, keywords={"location": "", "cast": []}),
    ]


@pytest.mark.parametrize("relationship", list(RelationshipKey))
def test_groups_partition_units(units, relationship) -> None:
    groups = group_by(units, relationship)

    member_ids = [unit_id for group in groups.values() for unit_id in group.member_ids]
    assert sorted(member_ids) == sorted(unit.id for unit in units)
    assert len(member_ids) == len(set(member_ids))


def test_same_location_groups_in_first_appearance_order(units) -> None:
    groups = group_by(units, "same-location")

    assert list(groups) == ["Cafe", "Rooftop", ""]
    assert groups["Cafe"].member_ids == ["scene-1", "scene-3"]
    assert groups[""].member_ids == ["scene-4"]


def test_sorted_cast_policy_treats_cast_as_set(units) -> None:
    groups = group_by(units, RelationshipKey.SAME_CAST)

    assert groups["Kim,Lee"].member_ids == ["scene-1", "scene-2"]


def test_ordered_cast_policy_keeps_listed_order(units) -> None:
    groups = group_by(units, RelationshipKey.SAME_CAST, cast_policy=CastKeyPolicy.ORDERED)

    assert groups["Kim,Lee"].member_ids == ["scene-1"]
    assert groups["Lee,Kim"].member_ids == ["scene-2"]


def test_cast_key_of_empty_cast_is_empty_string() -> None:
    assert cast_key([]) == ""
    assert cast_key(["B", "A"], "ordered") == "B,A"


def test_cast_key_accepts_policy_names() -> None:
    assert cast_key(["B", "A"], "sorted") == "A,B"
    assert cast_key(["B", "A"], CastKeyPolicy.SORTED) == "A,B"


def test_cast_key_keeps_names_with_separator_apart() -> None:
    assert cast_key(["A,B"]) != cast_key(["A", "B"])
    assert cast_key(["A\\", "B"]) != cast_key(["A\\,B"])

    units = [
        build_unit(1, keywords={"cast": ["Kim,Lee"]}),
        build_unit(2, keywords={"cast": ["Kim", "Lee"]}),
    ]
    groups = group_by(units, RelationshipKey.SAME_CAST)

    assert [group.member_ids for group in groups.values()] == [["scene-1"], ["scene-2"]]


def test_group_by_other_relationships(units) -> None:
    by_user = group_by(units, "same-user")
    by_time = group_by(units, "same-time-of-day")

    assert list(by_user) == ["user-1"]
    assert list(by_time) == ["morning"]


def test_group_index_maps_keys_to_ids(units) -> None:
    index = group_index(group_by(units, "same-location"))

    assert index == {"Cafe": ["scene-1", "scene-3"], "Rooftop": ["scene-2"], "": ["scene-4"]}


def test_unknown_relationship_is_rejected(units) -> None:
    with pytest.raises(ValueError):
        group_by(units, "same-weather")
