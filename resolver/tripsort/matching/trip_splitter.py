"""
Trip splitter: cuts a matched raw trip into directional sub-trips.

A trip runs its primary direction between the first and last stop matched on
it. Stops before (head) or after (tail) that run may belong to the other
direction, e.g. a bus arriving downtown and leaving again as the opposite
direction without a new trip id. The shared terminal ends the first sub-trip
and starts the second one.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..exceptions import MultiSegmentUnsupportedError
from ..models.trip_models import (
    Direction,
    MatchedStop,
    PositionMapping,
    RawTrip,
    ResolvedSubTrip,
    RouteTripSpec,
    StopTime,
)
from ..ordering_functions import sort_stops
from .stop_matcher import DEFAULT_MIN_MANDATORY_MATCHES, align_direction

module_logger = logging.getLogger(__name__)


def _qualifying_run(stop_times: Sequence[StopTime], start: int, end: int, direction: Direction,
                    boundary: int, min_mandatory_matches: int) -> Optional[PositionMapping]:
    """Align ``stop_times[start:end]`` on ``direction``; None unless it forms a run.

    A run needs enough mandatory matches and at least one match other than the
    shared boundary stop.
    """
    mapping = align_direction(stop_times[start:end], direction, offset=start)
    if mapping.mandatory_matches < min_mandatory_matches:
        return None
    if not [p for p in mapping.matched_positions if p != boundary]:
        return None
    return mapping


def _resumes(stop_times: Sequence[StopTime], start: int, end: int, direction: Direction,
             min_mandatory_matches: int) -> bool:
    if end - start <= 0:
        return False
    mapping = align_direction(stop_times[start:end], direction, offset=start)
    return mapping.mandatory_matches >= min_mandatory_matches


def _sort_indices(entries: List[Optional[int]]) -> List[int]:
    """Canonical index per stop; unmatched stops take their neighbour's"""
    resolved: List[Optional[int]] = []
    previous = None
    for index in entries:
        if index is not None:
            previous = index
        resolved.append(previous)
    following = None
    for i in range(len(resolved) - 1, -1, -1):
        if entries[i] is not None:
            following = entries[i]
        if resolved[i] is None:
            resolved[i] = following if following is not None else i
    return resolved


def build_sub_trip(raw_trip: RawTrip, route_id: int, direction: Direction, mapping: PositionMapping,
                   start: int, end: int) -> ResolvedSubTrip:
    """Sub-trip holding observed stops ``start``..``end - 1`` on ``direction``"""
    positions = range(start, end)
    entries = [mapping.entry_at(p) for p in positions]
    stops = [
        MatchedStop(
            stop_time=raw_trip.stop_times[p],
            position=p,
            sort_index=sort_index,
            entry_index=entry,
            role=direction.entries[entry].role if entry is not None else None,
        )
        for p, entry, sort_index in zip(positions, entries, _sort_indices(entries))
    ]
    return ResolvedSubTrip(
        sub_trip_id=f"{raw_trip.trip_id}:{direction.direction_id}",
        trip_id=raw_trip.trip_id,
        route_id=route_id,
        direction_id=direction.direction_id,
        headsign=direction.headsign,
        stops=tuple(sort_stops(stops)),
    )


def build_unsplit_sub_trip(raw_trip: RawTrip, route_id: int) -> ResolvedSubTrip:
    """Default handling for routes without canonical sequences: feed order kept"""
    stops = [
        MatchedStop(stop_time=stop_time, position=p, sort_index=p)
        for p, stop_time in enumerate(raw_trip.stop_times)
    ]
    return ResolvedSubTrip(
        sub_trip_id=raw_trip.trip_id,
        trip_id=raw_trip.trip_id,
        route_id=route_id,
        direction_id=raw_trip.direction_id if raw_trip.direction_id is not None else 0,
        headsign=raw_trip.headsign or "",
        stops=tuple(stops),
        split=False,
    )


def split_trip(raw_trip: RawTrip, route: RouteTripSpec, mapping: PositionMapping,
               min_mandatory_matches: int = DEFAULT_MIN_MANDATORY_MATCHES) -> List[ResolvedSubTrip]:
    """Emit one sub-trip per directional run of a matched raw trip.

    Raises:
        MultiSegmentUnsupportedError: the trip changes direction more than once
    """
    stop_times = raw_trip.stop_times
    count = len(stop_times)
    primary = route.direction(mapping.direction_id)
    other = route.other_direction(primary.direction_id)
    matched = mapping.matched_positions
    first, last = matched[0], matched[-1]

    head = tail = None
    if other is not None:
        if first > 0:
            head = _qualifying_run(stop_times, 0, first + 1, other, first, min_mandatory_matches)
        if last < count - 1:
            tail = _qualifying_run(stop_times, last, count, other, last, min_mandatory_matches)

    def unsupported(detail: str) -> MultiSegmentUnsupportedError:
        return MultiSegmentUnsupportedError(
            f"Trip {raw_trip.trip_id} on route {route.route_id} {detail}",
            route_id=route.route_id, trip_id=raw_trip.trip_id)

    if head is not None and tail is not None:
        raise unsupported("enters and leaves its primary direction through the other one")

    segments: List[Tuple[Direction, PositionMapping, int, int]]
    if head is not None:
        head_start = head.matched_positions[0]
        if _resumes(stop_times, 0, head_start, primary, min_mandatory_matches):
            raise unsupported("runs its primary direction before and after the other one")
        segments = [(other, head, 0, first + 1), (primary, mapping, first, count)]
    elif tail is not None:
        tail_end = tail.matched_positions[-1]
        if _resumes(stop_times, tail_end + 1, count, primary, min_mandatory_matches):
            raise unsupported("runs its primary direction before and after the other one")
        segments = [(primary, mapping, 0, last + 1), (other, tail, last, count)]
    else:
        segments = [(primary, mapping, 0, count)]

    sub_trips = [
        build_sub_trip(raw_trip, route.route_id, direction, segment_mapping, start, end)
        for direction, segment_mapping, start, end in segments
    ]
    if len(sub_trips) > 1:
        module_logger.debug(
            f"Trip {raw_trip.trip_id} split at stop {stop_times[segments[1][2]].stop_id} "
            f"into {[s.sub_trip_id for s in sub_trips]}")
    return sub_trips


def rejoin_sub_trips(sub_trips: Sequence[ResolvedSubTrip]) -> List[StopTime]:
    """Observed stop times of consecutive sub-trips, shared boundary stop once"""
    joined: List[StopTime] = []
    last_position = None
    for sub_trip in sub_trips:
        for stop in sub_trip.stops:
            if stop.position == last_position:
                continue
            joined.append(stop.stop_time)
            last_position = stop.position
    return joined
