"""
Trip Resolution Service: canonical stop-sequence resolution for a whole feed
Combines the stop matcher, trip splitter and direction merge behind one API
Routes are independent, so batches can be resolved on a thread pool
"""

import logging
import time
from multiprocessing.pool import ThreadPool
from typing import Any, Dict, Iterable, List, Optional

from .canonical_store import CanonicalSequenceStore
from .config import config
from .data.cranbrook import ROUTE_COLORS, ROUTE_TYPE_BUS
from .exceptions import BelowMatchThresholdError, ConfigurationGapError, TripResolutionError
from .graph.stop_graph import merge_direction_stops
from .logger import logger
from .matching.stop_matcher import match_trip
from .matching.trip_splitter import build_unsplit_sub_trip, split_trip
from .models.trip_models import (
    DirectionType,
    MergedDirection,
    RawTrip,
    ResolutionResult,
    ResolvedSubTrip,
    RouteMetadata,
    TripFailure,
)
from .utils.route_utils import build_route_metadata, is_route_included


def _direction_name(direction_id: int) -> Optional[str]:
    try:
        return DirectionType(direction_id).name
    except ValueError:
        return None


class TripResolutionService:
    """
    Resolution service that turns raw feed trips into directional sub-trips by:
    1. Looking up the route's canonical sequences (default handling when absent)
    2. Matching each trip to its primary direction
    3. Splitting trips that run both directions at the shared terminal
    4. Collecting per-trip failures without aborting the batch
    5. Merging the sub-trips of a direction into one stop list on demand
    """

    def __init__(self, store: Optional[CanonicalSequenceStore] = None,
                 min_mandatory_matches: Optional[int] = None,
                 workers: Optional[int] = None,
                 agency_id: Optional[str] = None,
                 route_colors: Optional[Dict[int, str]] = None,
                 require_sequences: Optional[bool] = None):
        """Initialize the trip resolution service"""
        self.logger = logging.getLogger(__name__)
        settings = config.get_service_config()

        self.min_mandatory_matches = (min_mandatory_matches if min_mandatory_matches is not None
                                      else settings['min_mandatory_matches'])
        self.workers = workers if workers is not None else settings['workers']
        self.agency_id = agency_id if agency_id is not None else settings['agency_id']
        self.route_colors = ROUTE_COLORS if route_colors is None else route_colors
        self.require_sequences = (require_sequences if require_sequences is not None
                                  else settings['require_sequences'])

        self.store = store if store is not None else self._load_store()
        self.logger.info(f"Trip resolution service ready with canonical sequences for "
                         f"{len(self.store)} routes")

    def _load_store(self) -> CanonicalSequenceStore:
        if config.sequences_file:
            return CanonicalSequenceStore.from_json(config.sequences_file)
        return CanonicalSequenceStore.default()

    # ------------------------------------------------------------------
    #  Per-trip resolution
    # ------------------------------------------------------------------

    def resolve_trip(self, route_id: int, raw_trip: RawTrip) -> List[ResolvedSubTrip]:
        """Resolve one raw trip; raises TripResolutionError subclasses (no fallback)"""
        route = self.store.lookup(route_id)
        if route is None:
            return [build_unsplit_sub_trip(raw_trip, route_id)]
        mapping = match_trip(raw_trip, route, self.min_mandatory_matches)
        return split_trip(raw_trip, route, mapping, self.min_mandatory_matches)

    def resolve_route_trips(self, route_id: int, raw_trips: Iterable[RawTrip]) -> ResolutionResult:
        """Resolve all trips of a route, collecting failures

        Trips below the match threshold get the default unsplit handling.
        """
        start = time.time()
        result = ResolutionResult()
        count = 0
        for raw_trip in raw_trips:
            count += 1
            try:
                result.sub_trips.extend(self.resolve_trip(route_id, raw_trip))
            except BelowMatchThresholdError as e:
                # not part of any configured split
                self.logger.info(f"Route {route_id} trip {raw_trip.trip_id} left unsplit: {e.message}")
                result.sub_trips.append(build_unsplit_sub_trip(raw_trip, route_id))
            except TripResolutionError as e:
                self.logger.warning(f"Route {route_id} trip {raw_trip.trip_id}: {e.kind}: {e.message}")
                result.failures.append(TripFailure(
                    route_id=route_id, trip_id=raw_trip.trip_id, kind=e.kind, message=e.message))

        duration_ms = (time.time() - start) * 1000
        logger.log_resolution(route_id, count, len(result.sub_trips), len(result.failures), duration_ms)
        return result

    def resolve_batch(self, trips_by_route: Dict[int, List[RawTrip]],
                      workers: Optional[int] = None) -> ResolutionResult:
        """Resolve every route of a feed; routes run in parallel when workers > 1"""
        workers = workers if workers is not None else self.workers
        items = sorted(trips_by_route.items())
        if workers > 1 and len(items) > 1:
            with ThreadPool(min(workers, len(items))) as pool:
                results = pool.starmap(self.resolve_route_trips, items)
        else:
            results = [self.resolve_route_trips(route_id, trips) for route_id, trips in items]

        combined = ResolutionResult()
        for result in results:
            combined.extend(result)
        return combined

    # ------------------------------------------------------------------
    #  Direction level helpers
    # ------------------------------------------------------------------

    def merge_direction(self, sub_trips: List[ResolvedSubTrip]) -> MergedDirection:
        return merge_direction_stops(sub_trips, self.logger)

    def merge_all(self, result: ResolutionResult) -> List[MergedDirection]:
        """One merged stop list per (route, direction) of a resolution result.

        Unsplit sub-trips are merged apart from canonical ones, per feed headsign.
        """
        return [self.merge_direction(sub_trips) for sub_trips in result.merge_groups()]

    def describe_route(self, route_id: int) -> Optional[Dict[str, Any]]:
        """Canonical configuration of a route as plain data (None when not configured)"""
        route = self.store.lookup(route_id)
        if route is None:
            return None
        directions = []
        for direction in route.directions:
            directions.append({
                'direction_id': direction.direction_id,
                'direction': _direction_name(direction.direction_id),
                'headsign': direction.headsign,
                'stops': [{'stop_id': e.stop_id, 'role': e.role.value} for e in direction.entries],
            })
        return {
            'route_id': route.route_id,
            'route_type': ROUTE_TYPE_BUS,
            'color': self.route_colors.get(route.route_id),
            'directions': directions,
        }

    # ------------------------------------------------------------------
    #  Startup validation
    # ------------------------------------------------------------------

    def validate_routes(self, feed_routes: Iterable[Dict[str, Any]]) -> List[RouteMetadata]:
        """Check the static configuration against the feed's routes.

        Every included route needs a color, and every route with a configured
        color needs canonical sequences. All gaps are reported at once.

        Raises:
            ConfigurationGapError: the configuration is out of date with the feed
        """
        gaps: List[str] = []
        metadata: List[RouteMetadata] = []
        for route in feed_routes:
            if not is_route_included(route.get('agency_id'), self.agency_id):
                continue
            try:
                meta = build_route_metadata(route.get('short_name'), route.get('long_name'),
                                            route.get('color'), self.route_colors)
            except ConfigurationGapError as e:
                gaps.append(str(e))
                continue
            metadata.append(meta)
            if (self.require_sequences and meta.route_id in self.route_colors
                    and meta.route_id not in self.store):
                gaps.append(f"Route {meta.route_id} has no canonical sequences")

        if gaps:
            self.logger.error(f"Configuration out of date with feed: {gaps}")
            raise ConfigurationGapError(f"{len(gaps)} configuration gap(s): {'; '.join(gaps)}", gaps)
        return metadata
