"""
Custom exceptions for the tripsort resolution engine
"""

class TripSortError(Exception):
    """Base exception for the tripsort resolution engine"""
    pass


class TripResolutionError(TripSortError):
    """Raised when a single raw trip cannot be resolved into sub-trips.

    Per-trip errors never abort a batch: the service collects them next to the
    resolved sub-trips of the other trips.
    """

    kind = "unresolved"

    def __init__(self, message: str, route_id=None, trip_id=None):
        super().__init__(message)
        self.message = message
        self.route_id = route_id
        self.trip_id = trip_id

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'route_id': self.route_id,
            'trip_id': self.trip_id,
            'message': self.message,
        }


class AmbiguousDirectionError(TripResolutionError):
    """Raised when both canonical directions score equally for a trip"""
    kind = "ambiguous"


class BelowMatchThresholdError(TripResolutionError):
    """Raised when no direction matches enough mandatory stops"""
    kind = "below_threshold"


class MultiSegmentUnsupportedError(TripResolutionError):
    """Raised when a trip switches direction more than once"""
    kind = "multi_segment"


class ConfigurationGapError(TripSortError):
    """Raised when the static configuration is out of date with the feed"""

    def __init__(self, message: str, gaps=None):
        super().__init__(message)
        self.gaps = list(gaps or [])


class TripMergeError(TripSortError):
    """Raised when resolved sub-trips cannot be merged into one stop list"""
    pass
