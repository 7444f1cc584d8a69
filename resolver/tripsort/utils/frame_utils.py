"""
Tabular adapter between already parsed GTFS tables (pandas DataFrames) and the
resolution engine.
"""

import logging
from typing import Dict, Iterable, List, Optional

import pandas as pd

from ..models.trip_models import RawTrip, ResolvedSubTrip, StopTime, TripFailure
from .route_utils import is_route_included, route_id_from_short_name

module_logger = logging.getLogger(__name__)

SUB_TRIP_COLUMNS = [
    'sub_trip_id', 'trip_id', 'route_id', 'direction_id', 'headsign',
    'stop_id', 'stop_sequence', 'position', 'canonical_index', 'role',
]
FAILURE_COLUMNS = ['route_id', 'trip_id', 'kind', 'message']


def _optional(value):
    return None if pd.isna(value) else value


def route_ids_by_gtfs_id(routes_df: pd.DataFrame, agency_id: Optional[str] = None) -> Dict[str, int]:
    """Map GTFS route_id -> numeric route id, keeping only the included agency"""
    mapping = {}
    for _, row in routes_df.iterrows():
        if agency_id is not None and 'agency_id' in routes_df.columns:
            if not is_route_included(_optional(row['agency_id']), agency_id):
                continue
        mapping[str(row['route_id'])] = route_id_from_short_name(row['route_short_name'])
    return mapping


def feed_routes_from_frame(routes_df: pd.DataFrame) -> List[dict]:
    """Route records in the shape TripResolutionService.validate_routes expects"""
    records = []
    for _, row in routes_df.iterrows():
        records.append({
            'short_name': row['route_short_name'],
            'long_name': _optional(row.get('route_long_name')),
            'color': _optional(row.get('route_color')),
            'agency_id': _optional(row.get('agency_id')),
        })
    return records


def raw_trips_by_route(routes_df: pd.DataFrame, trips_df: pd.DataFrame, stop_times_df: pd.DataFrame,
                       agency_id: Optional[str] = None) -> Dict[int, List[RawTrip]]:
    """Group stop times into raw trips, keyed by numeric route id"""
    route_ids = route_ids_by_gtfs_id(routes_df, agency_id)

    stop_times_df = stop_times_df.assign(
        stop_sequence=pd.to_numeric(stop_times_df['stop_sequence'])
    ).sort_values(['trip_id', 'stop_sequence'])
    stop_times_by_trip = {
        str(trip_id): tuple(
            StopTime(stop_id=str(stop_id), stop_sequence=int(sequence))
            for stop_id, sequence in zip(group['stop_id'], group['stop_sequence'])
        )
        for trip_id, group in stop_times_df.groupby('trip_id', sort=False)
    }

    trips: Dict[int, List[RawTrip]] = {}
    for _, row in trips_df.iterrows():
        gtfs_route_id = str(row['route_id'])
        if gtfs_route_id not in route_ids:
            continue
        trip_id = str(row['trip_id'])
        if trip_id not in stop_times_by_trip:
            module_logger.warning(f"Trip {trip_id} has no stop times, skipping")
            continue
        direction_id = _optional(row.get('direction_id'))
        trips.setdefault(route_ids[gtfs_route_id], []).append(RawTrip(
            trip_id=trip_id,
            stop_times=stop_times_by_trip[trip_id],
            headsign=_optional(row.get('trip_headsign')),
            direction_id=int(direction_id) if direction_id is not None else None,
        ))

    module_logger.info(f"Built {sum(len(t) for t in trips.values())} raw trips for {len(trips)} routes")
    return trips


def sub_trips_to_frame(sub_trips: Iterable[ResolvedSubTrip]) -> pd.DataFrame:
    rows = []
    for sub_trip in sub_trips:
        for stop in sub_trip.stops:
            rows.append({
                'sub_trip_id': sub_trip.sub_trip_id,
                'trip_id': sub_trip.trip_id,
                'route_id': sub_trip.route_id,
                'direction_id': sub_trip.direction_id,
                'headsign': sub_trip.headsign,
                'stop_id': stop.stop_id,
                'stop_sequence': stop.stop_time.stop_sequence,
                'position': stop.position,
                'canonical_index': stop.entry_index,
                'role': stop.role.value if stop.role is not None else None,
            })
    return pd.DataFrame(rows, columns=SUB_TRIP_COLUMNS)


def failures_to_frame(failures: Iterable[TripFailure]) -> pd.DataFrame:
    return pd.DataFrame(
        [{'route_id': f.route_id, 'trip_id': f.trip_id, 'kind': f.kind, 'message': f.message}
         for f in failures],
        columns=FAILURE_COLUMNS,
    )

