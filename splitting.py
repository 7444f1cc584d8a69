#!/usr/bin/env python3
"""
tripsort - Flask Web API Blueprint
Resolves raw feed trips into directional sub-trips over HTTP
"""

from flask import Blueprint, request, jsonify
import time
from typing import Dict, Any, Optional
from tripsort.core_trip_service import TripResolutionService
from tripsort.config import config
from tripsort.logger import logger
from tripsort.exceptions import TripSortError, TripResolutionError
from tripsort.data.cranbrook import AGENCY_COLOR
from tripsort.models.trip_models import RawTrip, ResolvedSubTrip, StopTime
from tripsort.ordering_functions import make_stop_comparator

splitting_bp = Blueprint('splitting_bp', __name__)

# Global trip service instance
trip_service: Optional[TripResolutionService] = None

# Initialize trip service and canonical sequences ONCE at startup

def initialize_trip_service():
    global trip_service
    try:
        config.validate()
        trip_service = TripResolutionService()
        logger.info("Trip resolution service initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize trip resolution service: {e}")
        raise

# Call this ONCE at startup
initialize_trip_service()


def stop_time_from_value(value, position: int) -> StopTime:
    """Stop times may be sent as {"stop_id", "stop_sequence"} or as a bare stop id"""
    if isinstance(value, dict):
        return StopTime(stop_id=str(value['stop_id']),
                        stop_sequence=int(value.get('stop_sequence', position + 1)))
    return StopTime(stop_id=str(value), stop_sequence=position + 1)


def stop_time_in_trip(value, raw_trip: RawTrip) -> StopTime:
    """A compared stop time; a bare stop id is looked up in the trip's stop times"""
    if isinstance(value, dict) and 'stop_sequence' in value:
        return stop_time_from_value(value, -1)
    stop_id = str(value['stop_id'] if isinstance(value, dict) else value)
    for stop_time in raw_trip.stop_times:
        if stop_time.stop_id == stop_id:
            return stop_time
    raise ValueError(f"Stop {stop_id} is not served by trip {raw_trip.trip_id}")


def raw_trip_from_dict(data: Dict[str, Any]) -> RawTrip:
    """Build a raw trip from request JSON, raising ValueError on bad input"""
    if not data.get('trip_id'):
        raise ValueError('trip_id required')
    stop_times = data.get('stop_times')
    if not stop_times:
        raise ValueError(f"Trip {data['trip_id']} has no stop_times")
    try:
        parsed = tuple(stop_time_from_value(v, i) for i, v in enumerate(stop_times))
    except (KeyError, TypeError) as e:
        raise ValueError(f"Trip {data['trip_id']} has an invalid stop time: {e}")
    direction_id = data.get('direction_id')
    return RawTrip(
        trip_id=str(data['trip_id']),
        stop_times=parsed,
        headsign=data.get('headsign'),
        direction_id=int(direction_id) if direction_id is not None else None,
    )


def sub_trip_to_dict(sub_trip: ResolvedSubTrip) -> Dict[str, Any]:
    return {
        'sub_trip_id': sub_trip.sub_trip_id,
        'trip_id': sub_trip.trip_id,
        'route_id': sub_trip.route_id,
        'direction_id': sub_trip.direction_id,
        'headsign': sub_trip.headsign,
        'split': sub_trip.split,
        'stops': [
            {
                'stop_id': stop.stop_id,
                'stop_sequence': stop.stop_time.stop_sequence,
                'position': stop.position,
                'canonical_index': stop.entry_index,
                'role': stop.role.value if stop.role is not None else None,
            }
            for stop in sub_trip.stops
        ]
    }


@splitting_bp.route('/splitting/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    try:
        if trip_service is None:
            return jsonify({'status': 'error', 'message': 'Trip service not initialized'}), 500

        return jsonify({
            'status': 'healthy',
            'message': 'tripsort resolution engine is running',
            'routes': trip_service.store.route_ids,
            'timestamp': time.time()
        })
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return jsonify({'status': 'error', 'message': str(e)}), 500


@splitting_bp.route('/splitting', methods=['GET'])
def index():
    """Root endpoint"""
    return jsonify({
        'name': 'tripsort',
        'version': '1.0.0',
        'description': 'Canonical stop-sequence resolution for transit feed trips',
        'agency': {
            'id': trip_service.agency_id,
            'color': AGENCY_COLOR
        },
        'endpoints': {
            'health': '/splitting/health',
            'route': '/splitting/routes/<route_id>',
            'resolve': '/splitting/resolve',
            'compare': '/splitting/compare'
        }
    })


@splitting_bp.route('/splitting/routes/<int:route_id>', methods=['GET'])
def route_details(route_id: int):
    """Canonical sequences of one route"""
    description = trip_service.describe_route(route_id)
    if description is None:
        return jsonify({'error': f'Route {route_id} has no canonical sequences'}), 404
    return jsonify(description)


@splitting_bp.route('/splitting/resolve', methods=['POST'])
def resolve():
    """Resolve the raw trips of one route; per-trip failures are listed, not fatal"""
    start = time.time()
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({'error': 'No data provided'}), 400
        if data.get('route_id') is None or not data.get('trips'):
            return jsonify({'error': 'route_id and trips required'}), 400
        try:
            route_id = int(data['route_id'])
            raw_trips = [raw_trip_from_dict(t) for t in data['trips']]
        except (TypeError, ValueError) as e:
            return jsonify({'error': str(e)}), 400

        result = trip_service.resolve_route_trips(route_id, raw_trips)
        response = {
            'route_id': route_id,
            'sub_trips': [sub_trip_to_dict(s) for s in result.sub_trips],
            'failures': [
                {'trip_id': f.trip_id, 'kind': f.kind, 'message': f.message}
                for f in result.failures
            ]
        }
        if data.get('merge'):
            response['merged'] = [
                {
                    'direction_id': m.direction_id,
                    'headsign': m.headsign,
                    'split': m.split,
                    'stop_ids': list(m.stop_ids)
                }
                for m in trip_service.merge_all(result)
            ]
        logger.log_api_call('/splitting/resolve', (time.time() - start) * 1000, True)
        return jsonify(response)
    except TripSortError as e:
        logger.log_api_call('/splitting/resolve', (time.time() - start) * 1000, False)
        logger.warning(f"/splitting/resolve: {e}")
        return jsonify({'error': str(e)}), 422
    except Exception as e:
        logger.error(f"/splitting/resolve error: {e}")
        return jsonify({'error': str(e)}), 500


@splitting_bp.route('/splitting/compare', methods=['POST'])
def compare():
    """Order two stop times of a trip the way its resolved sub-trip does"""
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({'error': 'No data provided'}), 400
        if data.get('route_id') is None or not data.get('trip') or 'a' not in data or 'b' not in data:
            return jsonify({'error': 'route_id, trip, a and b required'}), 400
        try:
            route_id = int(data['route_id'])
            raw_trip = raw_trip_from_dict(data['trip'])
            a = stop_time_in_trip(data['a'], raw_trip)
            b = stop_time_in_trip(data['b'], raw_trip)
        except (TypeError, ValueError, KeyError) as e:
            return jsonify({'error': str(e)}), 400

        try:
            sub_trips = trip_service.resolve_trip(route_id, raw_trip)
        except TripResolutionError as e:
            return jsonify({'error': e.message, 'failure': e.to_dict()}), 422

        for sub_trip in sub_trips:
            stop_times = set(sub_trip.stop_times)
            if a in stop_times and b in stop_times:
                result = make_stop_comparator(sub_trip)(a, b)
                return jsonify({'sub_trip_id': sub_trip.sub_trip_id, 'result': result})
        return jsonify({'error': 'Stop times are not part of the same sub-trip'}), 400
    except Exception as e:
        logger.error(f"/splitting/compare error: {e}")
        return jsonify({'error': str(e)}), 500
