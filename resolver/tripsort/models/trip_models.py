from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class DirectionType(Enum):
    """Logical travel directions (integer values as used by the output format)"""
    EAST = 1
    WEST = 2
    NORTH = 3
    SOUTH = 4


class StopRole(Enum):
    """Role of a stop inside a canonical sequence"""
    MANDATORY = "mandatory"  # firm anchor, counted when scoring a direction
    ALTERNATE = "alternate"  # one of several interchangeable stops
    DUPLICATE = "duplicate"  # stop visited more than once / shared between directions


@dataclass(frozen=True)
class SequenceEntry:
    """One position in a canonical stop sequence"""
    index: int
    stop_id: str
    role: StopRole = StopRole.MANDATORY

    @property
    def is_mandatory(self) -> bool:
        return self.role is StopRole.MANDATORY


@dataclass(frozen=True)
class Direction:
    """A logical direction of a route with its canonical stop sequence"""
    direction_id: int
    headsign: str
    entries: Tuple[SequenceEntry, ...]

    @property
    def stop_ids(self) -> List[str]:
        return [entry.stop_id for entry in self.entries]

    @property
    def mandatory_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_mandatory)

    def positions_of(self, stop_id: str) -> List[int]:
        """Every entry index referencing ``stop_id`` (ascending)"""
        return [entry.index for entry in self.entries if entry.stop_id == stop_id]


@dataclass(frozen=True)
class RouteTripSpec:
    """Canonical configuration of one route: one or two directions"""
    route_id: int
    directions: Tuple[Direction, ...]

    def direction(self, direction_id: int) -> Direction:
        for direction in self.directions:
            if direction.direction_id == direction_id:
                return direction
        raise KeyError(f"Route {self.route_id} has no direction {direction_id}")

    def other_direction(self, direction_id: int) -> Optional[Direction]:
        for direction in self.directions:
            if direction.direction_id != direction_id:
                return direction
        return None


@dataclass(frozen=True)
class StopTime:
    """Observed stop of a raw trip"""
    stop_id: str
    stop_sequence: int


@dataclass(frozen=True)
class RawTrip:
    """A vehicle run as observed in the feed, stop times in feed order"""
    trip_id: str
    stop_times: Tuple[StopTime, ...]
    headsign: Optional[str] = None
    direction_id: Optional[int] = None

    @property
    def stop_ids(self) -> List[str]:
        return [st.stop_id for st in self.stop_times]


@dataclass
class PositionMapping:
    """Alignment of a raw trip's stops against one canonical direction.

    ``entry_indices[i]`` is the sequence entry matched by observed stop ``i``
    (``None`` when unmatched). Positions are relative to ``offset`` when the
    mapping covers only a slice of the trip.
    """
    direction_id: int
    entry_indices: List[Optional[int]]
    mandatory_matches: int = 0
    offset: int = 0

    @property
    def matched_positions(self) -> List[int]:
        """Absolute observed positions that matched an entry"""
        return [self.offset + i for i, idx in enumerate(self.entry_indices) if idx is not None]

    def entry_at(self, position: int) -> Optional[int]:
        return self.entry_indices[position - self.offset]


@dataclass(frozen=True)
class MatchedStop:
    """An observed stop placed in a resolved sub-trip"""
    stop_time: StopTime
    position: int
    sort_index: int
    entry_index: Optional[int] = None
    role: Optional[StopRole] = None

    @property
    def stop_id(self) -> str:
        return self.stop_time.stop_id

    @property
    def matched(self) -> bool:
        return self.entry_index is not None


@dataclass(frozen=True)
class ResolvedSubTrip:
    """Directional slice of a raw trip"""
    sub_trip_id: str
    trip_id: str
    route_id: int
    direction_id: int
    headsign: str
    stops: Tuple[MatchedStop, ...]
    split: bool = True

    @property
    def stop_ids(self) -> List[str]:
        return [stop.stop_id for stop in self.stops]

    @property
    def stop_times(self) -> List[StopTime]:
        return [stop.stop_time for stop in self.stops]


@dataclass(frozen=True)
class TripFailure:
    """Per-trip resolution failure reported alongside successful sub-trips"""
    route_id: int
    trip_id: str
    kind: str
    message: str


@dataclass
class ResolutionResult:
    """Sub-trips and failures produced for a set of raw trips"""
    sub_trips: List[ResolvedSubTrip] = field(default_factory=list)
    failures: List[TripFailure] = field(default_factory=list)

    def extend(self, other: 'ResolutionResult'):
        self.sub_trips.extend(other.sub_trips)
        self.failures.extend(other.failures)

    def by_direction(self) -> Dict[Tuple[int, int, bool], List[ResolvedSubTrip]]:
        """Sub-trips per (route, direction, split).

        Unsplit sub-trips carry the feed direction id, which does not share the
        canonical numbering, so they never group with split ones.
        """
        grouped: Dict[Tuple[int, int, bool], List[ResolvedSubTrip]] = {}
        for sub_trip in self.sub_trips:
            grouped.setdefault((sub_trip.route_id, sub_trip.direction_id, sub_trip.split), []).append(sub_trip)
        return grouped

    def merge_groups(self) -> List[List[ResolvedSubTrip]]:
        """Sub-trips that merge into one stop list each; unsplit ones also per headsign"""
        groups: List[List[ResolvedSubTrip]] = []
        for key, sub_trips in sorted(self.by_direction().items()):
            if key[2]:
                groups.append(sub_trips)
                continue
            by_headsign: Dict[str, List[ResolvedSubTrip]] = {}
            for sub_trip in sub_trips:
                by_headsign.setdefault(sub_trip.headsign, []).append(sub_trip)
            groups.extend(by_headsign[headsign] for headsign in sorted(by_headsign))
        return groups


@dataclass(frozen=True)
class MergedDirection:
    """All sub-trips of one route direction merged into a single stop list"""
    route_id: int
    direction_id: int
    headsign: str
    stop_ids: Tuple[str, ...]
    split: bool = True


@dataclass(frozen=True)
class RouteMetadata:
    """Display metadata of a feed route"""
    route_id: int
    short_name: str
    display_name: str
    color: str
