"""
Canonical Sequence Store: per-route canonical stop sequences, read-only after load.

Records are plain dicts so the same shape can be authored as a Python literal
(see ``tripsort.data.cranbrook``) or loaded from JSON::

    {"route_id": 2,
     "directions": [
        {"direction": "EAST", "headsign": "Highlands",
         "stops": [["170545", "mandatory"], "170524", ["170474", "mandatory"]]},
        ...]}

A bare stop id string is a mandatory entry.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .exceptions import ConfigurationGapError
from .models.trip_models import Direction, DirectionType, RouteTripSpec, SequenceEntry, StopRole

module_logger = logging.getLogger(__name__)


def _parse_entry(index: int, raw, route_id) -> SequenceEntry:
    if isinstance(raw, str):
        return SequenceEntry(index=index, stop_id=raw)
    if isinstance(raw, dict):
        stop_id, role = raw.get('stop_id'), raw.get('role', StopRole.MANDATORY.value)
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        stop_id, role = raw
    else:
        raise ConfigurationGapError(f"Route {route_id}: malformed sequence entry {raw!r}")
    if not stop_id:
        raise ConfigurationGapError(f"Route {route_id}: sequence entry without stop id")
    try:
        role = StopRole(role)
    except ValueError:
        raise ConfigurationGapError(f"Route {route_id}: unknown stop role {role!r} for stop {stop_id}")
    return SequenceEntry(index=index, stop_id=str(stop_id), role=role)


def _parse_direction_id(record: dict, route_id) -> int:
    if 'direction_id' in record:
        return int(record['direction_id'])
    name = str(record.get('direction', '')).upper()
    try:
        return DirectionType[name].value
    except KeyError:
        raise ConfigurationGapError(f"Route {route_id}: unknown direction {record.get('direction')!r}")


def parse_route_record(record: dict) -> RouteTripSpec:
    """Build a RouteTripSpec from one configuration record"""
    if 'route_id' not in record:
        raise ConfigurationGapError(f"Canonical sequence record without route_id: {record!r}")
    route_id = int(record['route_id'])
    raw_directions = record.get('directions') or []
    if not 1 <= len(raw_directions) <= 2:
        raise ConfigurationGapError(
            f"Route {route_id}: expected one or two directions, got {len(raw_directions)}")

    directions: List[Direction] = []
    for raw_direction in raw_directions:
        direction_id = _parse_direction_id(raw_direction, route_id)
        if any(d.direction_id == direction_id for d in directions):
            raise ConfigurationGapError(f"Route {route_id}: direction {direction_id} listed twice")
        stops = raw_direction.get('stops') or []
        if not stops:
            raise ConfigurationGapError(f"Route {route_id}: direction {direction_id} has no stops")
        entries = tuple(_parse_entry(i, raw, route_id) for i, raw in enumerate(stops))
        directions.append(Direction(
            direction_id=direction_id,
            headsign=str(raw_direction.get('headsign', '')),
            entries=entries,
        ))
    return RouteTripSpec(route_id=route_id, directions=tuple(directions))


class CanonicalSequenceStore:
    """Read-only lookup of canonical sequences by route id"""

    def __init__(self, specs: Iterable[RouteTripSpec] = ()):
        self._specs: Dict[int, RouteTripSpec] = {}
        for spec in specs:
            if spec.route_id in self._specs:
                raise ConfigurationGapError(f"Route {spec.route_id} configured twice")
            self._specs[spec.route_id] = spec

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> 'CanonicalSequenceStore':
        return cls(parse_route_record(record) for record in records)

    @classmethod
    def from_json(cls, path: str) -> 'CanonicalSequenceStore':
        """Load records from a JSON file holding a list of route records"""
        with Path(path).open("r", encoding="utf-8") as f:
            records = json.load(f)
        if isinstance(records, dict):
            records = records.get('routes', [])
        store = cls.from_records(records)
        module_logger.info(f"Loaded canonical sequences for {len(store)} routes from {path}")
        return store

    @classmethod
    def default(cls) -> 'CanonicalSequenceStore':
        """Store built from the bundled agency configuration"""
        from .data.cranbrook import ROUTE_TRIP_SPECS
        return cls.from_records(ROUTE_TRIP_SPECS)

    def lookup(self, route_id: int) -> Optional[RouteTripSpec]:
        """Canonical configuration of a route, None for default handling"""
        return self._specs.get(route_id)

    @property
    def route_ids(self) -> List[int]:
        return sorted(self._specs)

    def __contains__(self, route_id) -> bool:
        return route_id in self._specs

    def __len__(self) -> int:
        return len(self._specs)
