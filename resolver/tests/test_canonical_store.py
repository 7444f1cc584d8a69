import json

import pytest

from tripsort.canonical_store import CanonicalSequenceStore, parse_route_record
from tripsort.exceptions import ConfigurationGapError
from tripsort.models.trip_models import DirectionType, StopRole


def test_default_store_holds_every_agency_route(store):
    assert store.route_ids == [1, 2, 3, 4, 5, 7, 14, 20]
    assert len(store) == 8
    assert 14 in store
    assert 6 not in store


def test_lookup_returns_both_directions(store):
    route = store.lookup(1)
    north = route.direction(DirectionType.NORTH.value)
    south = route.direction(DirectionType.SOUTH.value)

    assert north.headsign == "Walmart"
    assert south.headsign == "Downtown"
    assert north.stop_ids[0] == "170545"
    assert north.stop_ids[-1] == "170409"
    assert route.other_direction(north.direction_id) is south


def test_lookup_unknown_route_is_none(store):
    assert store.lookup(42) is None


def test_roles_are_parsed(store):
    north = store.lookup(1).direction(DirectionType.NORTH.value)
    roles = [entry.role for entry in north.entries]

    assert roles[0] is StopRole.MANDATORY
    assert roles[2] is StopRole.DUPLICATE
    assert roles[6] is StopRole.ALTERNATE
    assert north.mandatory_count == 3


def test_unknown_direction_raises():
    with pytest.raises(KeyError):
        CanonicalSequenceStore.default().lookup(2).direction(DirectionType.NORTH.value)


def test_entry_forms():
    route = parse_route_record({
        "route_id": "7",
        "directions": [{
            "direction_id": 1,
            "headsign": "Somewhere",
            "stops": ["s1", {"stop_id": "s2", "role": "alternate"}, ["s3", "duplicate"]],
        }],
    })
    direction = route.direction(1)

    assert route.route_id == 7
    assert [e.role for e in direction.entries] == [
        StopRole.MANDATORY, StopRole.ALTERNATE, StopRole.DUPLICATE]
    assert [e.index for e in direction.entries] == [0, 1, 2]
    assert route.other_direction(1) is None


@pytest.mark.parametrize("record", [
    {"directions": [{"direction": "EAST", "stops": ["a"]}]},
    {"route_id": 1, "directions": []},
    {"route_id": 1, "directions": [{"direction": "EAST", "stops": ["a"]}] * 3},
    {"route_id": 1, "directions": [{"direction": "EAST", "stops": ["a"]},
                                   {"direction": "EAST", "stops": ["b"]}]},
    {"route_id": 1, "directions": [{"direction": "UP", "stops": ["a"]}]},
    {"route_id": 1, "directions": [{"direction": "EAST", "stops": []}]},
    {"route_id": 1, "directions": [{"direction": "EAST", "stops": [["a", "optional"]]}]},
    {"route_id": 1, "directions": [{"direction": "EAST", "stops": [["a", "b", "c"]]}]},
])
def test_malformed_records_raise(record):
    with pytest.raises(ConfigurationGapError):
        parse_route_record(record)


def test_route_configured_twice_raises():
    record = {"route_id": 1, "directions": [{"direction": "EAST", "stops": ["a"]}]}
    with pytest.raises(ConfigurationGapError):
        CanonicalSequenceStore.from_records([record, record])


@pytest.mark.parametrize("wrap", [False, True])
def test_from_json(tmp_path, wrap):
    records = [{
        "route_id": 30,
        "directions": [
            {"direction": "EAST", "headsign": "Out", "stops": ["x", ["y", "alternate"], "z"]},
            {"direction": "WEST", "headsign": "Back", "stops": ["z", "y", "x"]},
        ],
    }]
    path = tmp_path / "sequences.json"
    path.write_text(json.dumps({"routes": records} if wrap else records), encoding="utf-8")

    store = CanonicalSequenceStore.from_json(str(path))

    assert store.route_ids == [30]
    assert store.lookup(30).direction(DirectionType.WEST.value).stop_ids == ["z", "y", "x"]
