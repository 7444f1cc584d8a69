#!/usr/bin/env python3
"""
Resolve every trip of a GTFS feed into directional sub-trips and report
- Sub-trips per route and direction
- Trips split at a shared terminal
- Trips that could not be resolved (ambiguous, below threshold, multi segment)
- Merged stop list per direction (optional)
"""

import argparse
import os
import sys

import pandas as pd

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tripsort.config import config
from tripsort.core_trip_service import TripResolutionService
from tripsort.exceptions import ConfigurationGapError, TripMergeError
from tripsort.utils.frame_utils import (
    failures_to_frame,
    feed_routes_from_frame,
    raw_trips_by_route,
    sub_trips_to_frame,
)


def load_feed(feed_dir):
    """Load routes, trips and stop_times; ids stay strings"""
    tables = {}
    for name in ('routes', 'trips', 'stop_times'):
        path = os.path.join(feed_dir, f'{name}.txt')
        if not os.path.exists(path):
            raise FileNotFoundError(f"{path} not found")
        tables[name] = pd.read_csv(path, dtype=str)
        print(f"Loaded {name}.txt: {len(tables[name])} rows")
    return tables['routes'], tables['trips'], tables['stop_times']


def print_route_report(route_id, sub_trips_df, failures_df):
    route_sub_trips = sub_trips_df[sub_trips_df['route_id'] == route_id]
    route_failures = failures_df[failures_df['route_id'] == route_id]

    trips = route_sub_trips['trip_id'].nunique() + len(route_failures)
    print(f"\nRoute {route_id}: {trips} trips")
    per_direction = route_sub_trips.groupby(['direction_id', 'headsign'])['sub_trip_id'].nunique()
    for (direction_id, headsign), count in per_direction.items():
        print(f"  direction {direction_id} ({headsign}): {count} sub-trips")

    split_trips = route_sub_trips.groupby('trip_id')['sub_trip_id'].nunique()
    split_count = int((split_trips > 1).sum())
    if split_count:
        print(f"  split trips: {split_count}")

    for kind, count in route_failures['kind'].value_counts().items():
        print(f"  failures ({kind}): {count}")


def resolve_feed(feed_dir, output_dir=None, merge=False, workers=None):
    """Main report function"""
    print("RESOLVING FEED TRIPS")
    print("=" * 50)

    routes_df, trips_df, stop_times_df = load_feed(feed_dir)
    service = TripResolutionService(workers=workers)

    try:
        service.validate_routes(feed_routes_from_frame(routes_df))
    except ConfigurationGapError as e:
        print("Configuration is out of date with the feed:")
        for gap in e.gaps:
            print(f"  - {gap}")
        raise

    agency_id = service.agency_id if 'agency_id' in routes_df.columns else None
    trips_by_route = raw_trips_by_route(routes_df, trips_df, stop_times_df, agency_id)
    result = service.resolve_batch(trips_by_route)

    sub_trips_df = sub_trips_to_frame(result.sub_trips)
    failures_df = failures_to_frame(result.failures)
    for route_id in sorted(trips_by_route):
        print_route_report(route_id, sub_trips_df, failures_df)

    if merge:
        print("\nMerged stop lists")
        for sub_trips in result.merge_groups():
            try:
                merged = service.merge_direction(sub_trips)
            except TripMergeError as e:
                print(f"  route {sub_trips[0].route_id} direction {sub_trips[0].direction_id}: {e}")
                continue
            print(f"  route {merged.route_id} direction {merged.direction_id} "
                  f"({merged.headsign}): {' > '.join(merged.stop_ids)}")

    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        sub_trips_df.to_csv(os.path.join(output_dir, 'sub_trips.csv'), index=False)
        failures_df.to_csv(os.path.join(output_dir, 'failures.csv'), index=False)
        print(f"\nSaved sub_trips.csv and failures.csv to {output_dir}")

    print(f"\nResolved {len(result.sub_trips)} sub-trips, {len(result.failures)} failures")
    return result


def main():
    parser = argparse.ArgumentParser(description="Resolve GTFS trips into directional sub-trips")
    parser.add_argument('feed_dir', help="Folder holding routes.txt, trips.txt and stop_times.txt")
    parser.add_argument('--output', help="Folder to write sub_trips.csv and failures.csv to")
    parser.add_argument('--merge', action='store_true', help="Print one merged stop list per direction")
    parser.add_argument('--workers', type=int, default=config.workers, help="Routes resolved in parallel")
    args = parser.parse_args()
    try:
        resolve_feed(args.feed_dir, args.output, args.merge, args.workers)
    except ConfigurationGapError:
        sys.exit(1)


if __name__ == "__main__":
    main()
