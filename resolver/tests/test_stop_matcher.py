import pytest

from tripsort.canonical_store import parse_route_record
from tripsort.exceptions import AmbiguousDirectionError, BelowMatchThresholdError
from tripsort.matching.stop_matcher import align_direction, choose_entry, match_trip
from tripsort.models.trip_models import DirectionType


def _direction(stops):
    record = {"route_id": 1, "directions": [{"direction": "EAST", "headsign": "Out", "stops": stops}]}
    return parse_route_record(record).direction(DirectionType.EAST.value)


def test_choose_entry_prefers_later_mandatory_when_nothing_mandatory_is_skipped():
    direction = _direction(["A", ["B", "duplicate"], ["C", "alternate"], "B", "D"])
    assert choose_entry(direction, "B", 1) == 3


def test_choose_entry_keeps_nearest_when_a_mandatory_stop_would_be_skipped():
    direction = _direction(["A", ["B", "duplicate"], "X", "B"])
    assert choose_entry(direction, "B", 1) == 1


def test_choose_entry_respects_cursor():
    direction = _direction(["A", "B", "A"])
    assert choose_entry(direction, "A", 0) == 0
    assert choose_entry(direction, "A", 1) == 2
    assert choose_entry(direction, "B", 2) is None
    assert choose_entry(direction, "Z", 0) is None


def test_align_direction_is_order_preserving(make_trip):
    direction = _direction(["A", "B", "C", "D"])
    trip = make_trip("t", ["A", "C", "B", "D"])

    mapping = align_direction(trip.stop_times, direction)

    assert mapping.entry_indices == [0, 2, None, 3]
    assert mapping.mandatory_matches == 3
    assert mapping.matched_positions == [0, 1, 3]


def test_alternate_and_duplicate_matches_do_not_score(store, make_trip):
    north = store.lookup(1).direction(DirectionType.NORTH.value)
    trip = make_trip("t", ["170545", "170427", "170424", "170409"])

    mapping = align_direction(trip.stop_times, north)

    assert mapping.entry_indices == [0, 2, 6, 10]
    assert mapping.mandatory_matches == 2


def test_offset_mapping_reports_absolute_positions(make_trip):
    direction = _direction(["A", "B"])
    trip = make_trip("t", ["X", "X", "A", "B"])

    mapping = align_direction(trip.stop_times[2:], direction, offset=2)

    assert mapping.matched_positions == [2, 3]
    assert mapping.entry_at(3) == 1


def test_match_trip_picks_best_direction(store, make_trip):
    trip = make_trip("t", ["170545", "170509", "170427", "170428", "170409"])

    mapping = match_trip(trip, store.lookup(1))

    assert mapping.direction_id == DirectionType.NORTH.value
    assert mapping.mandatory_matches == 3


def test_match_trip_ambiguous(synthetic_store, make_trip):
    trip = make_trip("loop", ["H", "P", "S", "H"])

    with pytest.raises(AmbiguousDirectionError) as excinfo:
        match_trip(trip, synthetic_store.lookup(99))

    assert excinfo.value.kind == "ambiguous"
    assert excinfo.value.trip_id == "loop"


def test_match_trip_below_threshold_is_reported_before_ties(synthetic_store, make_trip):
    # Both directions score 1: the threshold failure wins over the tie
    trip = make_trip("short", ["a1", "x", "y", "z"])

    with pytest.raises(BelowMatchThresholdError) as excinfo:
        match_trip(trip, synthetic_store.lookup(98))

    assert excinfo.value.kind == "below_threshold"
    assert excinfo.value.route_id == 98


def test_match_trip_threshold_is_configurable(synthetic_store, make_trip):
    trip = make_trip("t", ["a1", "a2", "a3"])

    assert match_trip(trip, synthetic_store.lookup(98), 3).direction_id == DirectionType.NORTH.value
    with pytest.raises(BelowMatchThresholdError):
        match_trip(trip, synthetic_store.lookup(98), 4)
