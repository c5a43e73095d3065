"""
Configuration context for the uptime probe.

This module defines a data structure that holds all configuration parameters
for the probe. It serves as a central point for passing configuration
throughout the application.
"""

from typing import NamedTuple


class ProbeContext(NamedTuple):
    """
    A data structure containing all configuration parameters for the probe.

    This class is immutable and provides a type-safe way to pass configuration
    throughout the application. It is created by parsing command-line arguments
    and environment variables.

    Attributes:
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
        auth_token: Bearer token required on /check; empty disables authentication.
        location: Fixed location label; empty enables auto-detection.
        instance_id: Unique identifier for this probe instance, added to log records.
        logging_type: Type of logging configuration to use (dev, prod, or custom).
        logging_config_file: Path to custom logging configuration file (if logging_type is 'custom').
        default_timeout: Timeout in milliseconds for targets that do not set one.
        user_agent: User-Agent sent with HTTP checks unless the target overrides it.
    """

    host: str
    port: int
    auth_token: str
    location: str
    instance_id: str
    logging_type: str
    logging_config_file: str
    default_timeout: int
    user_agent: str
