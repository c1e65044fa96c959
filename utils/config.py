"""
Configuration management.
"""

import os
from dataclasses import dataclass, field


DEFAULT_PROPERTY_DATA_URL = "https://data.texas.gov/resource/nne4-8riu.json"


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # Property data provider
    property_data_url: str = field(
        default_factory=lambda: os.getenv("PROPERTY_DATA_URL", DEFAULT_PROPERTY_DATA_URL)
    )
    socrata_app_token: str = field(default_factory=lambda: os.getenv("SOCRATA_APP_TOKEN", ""))
    request_timeout: int = field(default_factory=lambda: int(os.getenv("REQUEST_TIMEOUT", "30")))
    candidate_fetch_limit: int = field(
        default_factory=lambda: int(os.getenv("CANDIDATE_FETCH_LIMIT", "5000"))
    )

    # Similarity algorithm
    default_algorithm_source: str = field(
        default_factory=lambda: os.getenv("DEFAULT_ALGORITHM_SOURCE", "")
    )
    default_result_limit: int = field(
        default_factory=lambda: int(os.getenv("DEFAULT_RESULT_LIMIT", "10"))
    )

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary (the app token is never included)."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "property_data_url": self.property_data_url,
            "request_timeout": self.request_timeout,
            "candidate_fetch_limit": self.candidate_fetch_limit,
            "default_algorithm_source": self.default_algorithm_source,
            "default_result_limit": self.default_result_limit,
        }
