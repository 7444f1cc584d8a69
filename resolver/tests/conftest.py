import pytest

from tripsort.canonical_store import CanonicalSequenceStore
from tripsort.core_trip_service import TripResolutionService
from tripsort.models.trip_models import RawTrip, StopTime

# Small synthetic routes for cases the agency data cannot produce:
# 98 has long directions so short trips stay below the match threshold,
# 99 is a loop where both directions start and end at the same stop.
SYNTHETIC_RECORDS = [
    {
        "route_id": 98,
        "directions": [
            {"direction": "NORTH", "headsign": "Uptown",
             "stops": ["a1", "a2", "a3", "a4", "a5", "a6"]},
            {"direction": "SOUTH", "headsign": "Downtown",
             "stops": ["a6", "a5", "a4", "a3", "a2", "a1"]},
        ],
    },
    {
        "route_id": 99,
        "directions": [
            {"direction": "EAST", "headsign": "East Loop", "stops": ["H", "P", "Q", "H"]},
            {"direction": "WEST", "headsign": "West Loop", "stops": ["H", "R", "S", "H"]},
        ],
    },
]


def _make_trip(trip_id, stop_ids, headsign=None, direction_id=None, first_sequence=1):
    return RawTrip(
        trip_id=trip_id,
        stop_times=tuple(StopTime(stop_id=s, stop_sequence=first_sequence + i)
                         for i, s in enumerate(stop_ids)),
        headsign=headsign,
        direction_id=direction_id,
    )


@pytest.fixture
def make_trip():
    return _make_trip


@pytest.fixture(scope="session")
def store():
    return CanonicalSequenceStore.default()


@pytest.fixture(scope="session")
def synthetic_store():
    return CanonicalSequenceStore.from_records(SYNTHETIC_RECORDS)


@pytest.fixture
def service(store):
    return TripResolutionService(store=store, min_mandatory_matches=2, workers=1,
                                 agency_id="27", require_sequences=True)


@pytest.fixture
def synthetic_service(synthetic_store):
    return TripResolutionService(store=synthetic_store, min_mandatory_matches=2, workers=1,
                                 agency_id="27", require_sequences=False)
