from typing import Dict, Optional

from ..data.cranbrook import AGENCY_ID, ROUTE_COLORS
from ..exceptions import ConfigurationGapError
from ..models.trip_models import RouteMetadata


def route_id_from_short_name(short_name) -> int:
    """
    Derive the numeric route id from a GTFS route short name
    Args:
        short_name: route_short_name as found in routes.txt (e.g. "14")
    Returns:
        Route id (e.g. 14)
    """
    if isinstance(short_name, float) and short_name.is_integer():
        return int(short_name)
    try:
        return int(str(short_name).strip())
    except (TypeError, ValueError):
        raise ConfigurationGapError(f"Route short name {short_name!r} is not numeric")


def get_route_color(route_id: int, feed_color: Optional[str] = None,
                    colors: Optional[Dict[int, str]] = None) -> str:
    """
    Resolve the display color of a route
    Args:
        route_id: numeric route id
        feed_color: route_color from the feed, used when present
        colors: static color table (defaults to the agency table)
    Returns:
        Hex color without the leading '#'
    """
    if isinstance(feed_color, str) and feed_color.strip():
        return feed_color.strip().lstrip('#').upper()
    table = ROUTE_COLORS if colors is None else colors
    if route_id in table:
        return table[route_id]
    raise ConfigurationGapError(f"Unexpected route color for route {route_id}!")


def get_display_name(short_name, long_name: Optional[str] = None) -> str:
    if isinstance(long_name, str) and long_name.strip():
        return long_name.strip()
    return str(short_name).strip()


def is_route_included(agency_id, include_agency_id: str = AGENCY_ID) -> bool:
    """Only routes of the configured agency are processed"""
    if agency_id is None:
        return False
    return str(agency_id).strip() == str(include_agency_id)


def build_route_metadata(short_name, long_name: Optional[str] = None,
                         feed_color: Optional[str] = None,
                         colors: Optional[Dict[int, str]] = None) -> RouteMetadata:
    route_id = route_id_from_short_name(short_name)
    return RouteMetadata(
        route_id=route_id,
        short_name=str(short_name).strip(),
        display_name=get_display_name(short_name, long_name),
        color=get_route_color(route_id, feed_color, colors),
    )
