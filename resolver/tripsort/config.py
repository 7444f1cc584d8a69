"""
Configuration management for the tripsort resolution engine
"""

import os
from typing import Optional


class Config:
    """Configuration class for the tripsort resolution engine"""

    def __init__(self):
        # Canonical sequences (built-in agency data unless a JSON file is given)
        self.sequences_file: Optional[str] = os.getenv('TRIPSORT_SEQUENCES_FILE')
        self.agency_id: str = os.getenv('TRIPSORT_AGENCY_ID', '27')
        self.require_sequences: bool = os.getenv('TRIPSORT_REQUIRE_SEQUENCES', 'True').lower() == 'true'

        # Matching parameters
        self.min_mandatory_matches: int = int(os.getenv('TRIPSORT_MIN_MANDATORY_MATCHES', '2'))

        # Batch parameters
        self.workers: int = int(os.getenv('TRIPSORT_WORKERS', '1'))

        # API configuration
        self.host: str = os.getenv('HOST', '0.0.0.0')
        self.port: int = int(os.getenv('PORT', '5000'))
        self.debug: bool = os.getenv('DEBUG', 'False').lower() == 'true'

        # Logging
        self.log_level: str = os.getenv('LOG_LEVEL', 'INFO')
        self.log_file: Optional[str] = os.getenv('LOG_FILE')

    def validate(self):
        """Validate configuration"""
        if self.sequences_file and not os.path.exists(self.sequences_file):
            raise ValueError(f"Sequences file does not exist: {self.sequences_file}")

        if self.min_mandatory_matches < 1:
            raise ValueError("Minimum mandatory matches must be at least 1")

        if self.workers < 1:
            raise ValueError("Workers must be positive")

    def get_matcher_config(self) -> dict:
        """Get configuration for the stop matcher and trip splitter"""
        return {
            'min_mandatory_matches': self.min_mandatory_matches
        }

    def get_service_config(self) -> dict:
        """Get configuration for TripResolutionService"""
        return {
            'min_mandatory_matches': self.min_mandatory_matches,
            'workers': self.workers,
            'agency_id': self.agency_id,
            'require_sequences': self.require_sequences
        }

    def get_api_config(self) -> dict:
        """Get configuration for Flask API"""
        return {
            'host': self.host,
            'port': self.port,
            'debug': self.debug
        }


# Global configuration instance
config = Config()
