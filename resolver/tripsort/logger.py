"""
Logging configuration for the tripsort resolution engine
"""

import logging
import sys
from typing import Optional

from .config import config


class TripSortLogger:
    """Centralized logging for the tripsort resolution engine"""

    def __init__(self, name: str = "tripsort", level: str = "INFO",
                 log_file: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.log_file = log_file

        # Prevent duplicate handlers (the package NullHandler does not count)
        if not any(not isinstance(h, logging.NullHandler) for h in self.logger.handlers):
            self._setup_handlers()

    def _setup_handlers(self):
        """Setup console and optional file handlers"""
        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_format = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_handler.setFormatter(console_format)
        self.logger.addHandler(console_handler)

        # File handler
        if self.log_file:
            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(logging.DEBUG)
            file_format = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
            )
            file_handler.setFormatter(file_format)
            self.logger.addHandler(file_handler)

    def info(self, message: str):
        """Log info message"""
        self.logger.info(message)

    def debug(self, message: str):
        """Log debug message"""
        self.logger.debug(message)

    def warning(self, message: str):
        """Log warning message"""
        self.logger.warning(message)

    def error(self, message: str):
        """Log error message"""
        self.logger.error(message)

    def critical(self, message: str):
        """Log critical message"""
        self.logger.critical(message)

    def log_resolution(self, route_id, trips: int, sub_trips: int, failures: int,
                       duration_ms: float):
        """Log per-route resolution metrics"""
        self.info(f"Route {route_id} resolved: trips={trips}, sub_trips={sub_trips}, "
                  f"failures={failures}, duration={duration_ms:.2f}ms")

    def log_api_call(self, endpoint: str, duration_ms: float, success: bool):
        """Log API call metrics"""
        self.info(f"API call: {endpoint}, duration={duration_ms:.2f}ms, success={success}")


# Global logger instance
logger = TripSortLogger(level=config.log_level, log_file=config.log_file)
