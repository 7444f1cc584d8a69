from collections import Counter
from typing import Dict, Hashable, Sequence, Tuple

import networkx as nx

from ..exceptions import TripMergeError
from ..models.trip_models import MergedDirection, ResolvedSubTrip
from ..ordering_functions import sort_stops


def _stop_nodes(sub_trip: ResolvedSubTrip):
    """Yield (node, rank) for the stops of a sub-trip in order.

    Split sub-trips key stops by canonical index, so a stop served twice on a
    loop gives two nodes. Unsplit sub-trips have no canonical index and key
    stops by their occurrence count instead.
    """
    seen: Dict[str, int] = Counter()
    for stop in sort_stops(sub_trip.stops):
        if sub_trip.split:
            yield (stop.stop_id, stop.sort_index), stop.sort_index
        else:
            seen[stop.stop_id] += 1
            yield (stop.stop_id, seen[stop.stop_id]), stop.position


def build_stop_graph(sub_trips: Sequence[ResolvedSubTrip], logger) -> nx.DiGraph:
    """Build stop precedence graph with edges ONLY between consecutive stops of a sub-trip"""
    stop_graph = nx.DiGraph()
    for sub_trip in sub_trips:
        previous = None
        for node, rank in _stop_nodes(sub_trip):
            if node in stop_graph:
                stop_graph.nodes[node]['rank'] = min(stop_graph.nodes[node]['rank'], rank)
            else:
                stop_graph.add_node(node, stop_id=node[0], rank=rank)
            if previous is not None and previous != node:
                if stop_graph.has_edge(previous, node):
                    stop_graph[previous][node]['sub_trips'].append(sub_trip.sub_trip_id)
                else:
                    stop_graph.add_edge(previous, node, sub_trips=[sub_trip.sub_trip_id])
            previous = node

    logger.debug(f"Stop graph built: {stop_graph.number_of_nodes()} nodes, "
                 f"{stop_graph.number_of_edges()} edges from {len(sub_trips)} sub-trips")
    return stop_graph


def merge_direction_stops(sub_trips: Sequence[ResolvedSubTrip], logger) -> MergedDirection:
    """Merge all sub-trips of one route direction into a single stop list.

    Every sub-trip's stop order is preserved; stops no sub-trip orders
    relative to each other fall back to canonical rank, then stop id.
    """
    if not sub_trips:
        raise TripMergeError("No sub-trips to merge")

    directions = {(s.route_id, s.direction_id, s.split) for s in sub_trips}
    if len(directions) > 1:
        raise TripMergeError(f"Cannot merge sub-trips of different directions: {sorted(directions)}")
    headsigns = {s.headsign for s in sub_trips}
    if len(headsigns) > 1:
        raise TripMergeError(f"Unexpected trips to merge with headsigns {sorted(headsigns)}")
    route_id, direction_id, split = directions.pop()

    stop_graph = build_stop_graph(sub_trips, logger)

    def node_key(node: Hashable) -> Tuple[int, str]:
        return stop_graph.nodes[node]['rank'], stop_graph.nodes[node]['stop_id']

    try:
        ordered = list(nx.lexicographical_topological_sort(stop_graph, key=node_key))
    except nx.NetworkXUnfeasible:
        cycle = nx.find_cycle(stop_graph)
        stops = [u[0] for u, _ in cycle]
        raise TripMergeError(
            f"Sub-trips of route {route_id} direction {direction_id} disagree on stop order: {stops}")

    logger.info(f"Merged {len(sub_trips)} sub-trips of route {route_id} direction {direction_id} "
                f"into {len(ordered)} stops")
    return MergedDirection(
        route_id=route_id,
        direction_id=direction_id,
        headsign=headsigns.pop(),
        stop_ids=tuple(stop_graph.nodes[node]['stop_id'] for node in ordered),
        split=split,
    )
