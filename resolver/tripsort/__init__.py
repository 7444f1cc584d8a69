__title__ = 'tripsort'
__version__ = '1.0.0'
__author__ = 'tripsort Team'
__license__ = 'MIT'
__copyright__ = 'Copyright 2024 tripsort Team'

__all__ = ['core_trip_service', 'canonical_store', 'ordering_functions', 'config', 'logger', 'exceptions']

# Set default logging handler to avoid "No handler found" warnings.
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
