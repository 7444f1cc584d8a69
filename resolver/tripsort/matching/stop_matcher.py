"""
Stop matcher: aligns a raw trip's observed stops against canonical directions
and picks the direction the trip belongs to.
"""

import logging
from typing import List, Optional, Sequence

from ..exceptions import AmbiguousDirectionError, BelowMatchThresholdError
from ..models.trip_models import Direction, PositionMapping, RawTrip, RouteTripSpec, StopTime

module_logger = logging.getLogger(__name__)

DEFAULT_MIN_MANDATORY_MATCHES = 2


def choose_entry(direction: Direction, stop_id: str, cursor: int) -> Optional[int]:
    """Pick the sequence entry an observed stop maps to, or None.

    Only entries at or after ``cursor`` are reachable. The nearest reachable
    entry wins, except that a later mandatory entry for the same stop is taken
    when reaching it skips no other mandatory entry.
    """
    reachable = [i for i in direction.positions_of(stop_id) if i >= cursor]
    if not reachable:
        return None
    nearest = reachable[0]
    if direction.entries[nearest].is_mandatory:
        return nearest
    for candidate in reachable[1:]:
        if not direction.entries[candidate].is_mandatory:
            continue
        skipped = direction.entries[nearest + 1:candidate]
        if not any(entry.is_mandatory for entry in skipped):
            return candidate
        break
    return nearest


def align_direction(stop_times: Sequence[StopTime], direction: Direction,
                    offset: int = 0) -> PositionMapping:
    """Greedy, order-preserving alignment of observed stops on one direction"""
    cursor = 0
    entry_indices: List[Optional[int]] = []
    mandatory_matches = 0
    for stop_time in stop_times:
        index = choose_entry(direction, stop_time.stop_id, cursor)
        entry_indices.append(index)
        if index is None:
            continue
        cursor = index + 1
        if direction.entries[index].is_mandatory:
            mandatory_matches += 1
    return PositionMapping(
        direction_id=direction.direction_id,
        entry_indices=entry_indices,
        mandatory_matches=mandatory_matches,
        offset=offset,
    )


def match_trip(raw_trip: RawTrip, route: RouteTripSpec,
               min_mandatory_matches: int = DEFAULT_MIN_MANDATORY_MATCHES) -> PositionMapping:
    """Select the primary direction of a raw trip.

    Raises:
        BelowMatchThresholdError: no direction reaches ``min_mandatory_matches``
        AmbiguousDirectionError: the best score is shared by both directions
    """
    mappings = [align_direction(raw_trip.stop_times, direction) for direction in route.directions]
    scores = {m.direction_id: m.mandatory_matches for m in mappings}
    best = max(scores.values())
    module_logger.debug(f"Trip {raw_trip.trip_id} on route {route.route_id}: scores={scores}")

    if best < min_mandatory_matches:
        raise BelowMatchThresholdError(
            f"Trip {raw_trip.trip_id} matched {best} mandatory stops on route {route.route_id}, "
            f"{min_mandatory_matches} required",
            route_id=route.route_id, trip_id=raw_trip.trip_id)

    winners = [m for m in mappings if m.mandatory_matches == best]
    if len(winners) > 1:
        raise AmbiguousDirectionError(
            f"Trip {raw_trip.trip_id} matches directions "
            f"{[m.direction_id for m in winners]} of route {route.route_id} equally ({best})",
            route_id=route.route_id, trip_id=raw_trip.trip_id)
    return winners[0]
