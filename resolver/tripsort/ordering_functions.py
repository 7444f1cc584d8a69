# Ordering functions for stops of resolved sub-trips.
# Key: canonical index, then observed stop sequence, then stop id.

from functools import cmp_to_key
from typing import Callable, Iterable, List, Tuple

from .models.trip_models import MatchedStop, ResolvedSubTrip, StopTime


def stop_sort_key(stop: MatchedStop) -> Tuple[int, int, str]:
    """Total-order key of a placed stop"""
    return (stop.sort_index, stop.stop_time.stop_sequence, stop.stop_id)


def compare_stops(a: MatchedStop, b: MatchedStop) -> int:
    """cmp-style comparison: negative, zero or positive"""
    key_a, key_b = stop_sort_key(a), stop_sort_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_stops(stops: Iterable[MatchedStop]) -> List[MatchedStop]:
    return sorted(stops, key=stop_sort_key)


def make_stop_comparator(sub_trip: ResolvedSubTrip) -> Callable[[StopTime, StopTime], int]:
    """Create a comparator over the raw stop times of one sub-trip.

    The sub-trip is the explicit context: it knows where every stop time
    was placed, so callers re-sorting stop times (e.g. after merging real-time
    data) never need the canonical store.
    """
    placed = {stop.stop_time: stop for stop in sub_trip.stops}

    def compare(a: StopTime, b: StopTime) -> int:
        try:
            stop_a, stop_b = placed[a], placed[b]
        except KeyError as e:
            raise ValueError(f"{e.args[0]} is not part of sub-trip {sub_trip.sub_trip_id}") from e
        return compare_stops(stop_a, stop_b)

    return compare


def sort_stop_times(sub_trip: ResolvedSubTrip, stop_times: Iterable[StopTime]) -> List[StopTime]:
    return sorted(stop_times, key=cmp_to_key(make_stop_comparator(sub_trip)))
