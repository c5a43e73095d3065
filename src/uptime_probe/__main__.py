"""
Main entry point for the uptime probe.

This module initializes and runs the probe's HTTP service. It parses the
configuration, sets up logging, builds the application and serves it until
the process is terminated.
"""

import logging

from aiohttp import web

from uptime_probe.api.routes import create_app
from uptime_probe.config import ProbeContext, get_context
from uptime_probe.config.logging_config import configure_logging


def main() -> None:
    """
    Set up and run the uptime probe.

    This function:
    1. Parses command-line arguments and environment variables
    2. Configures logging based on the context
    3. Creates the application, whose HTTP session and checkers are created on startup
    4. Serves it until interrupted; aiohttp runs the cleanup hooks on shutdown

    Returns:
        None
    """
    # Parse command-line arguments and environment variables
    probe_context: ProbeContext = get_context()

    # Configure logging based on the context
    configure_logging(probe_context)

    logger: logging.Logger = logging.getLogger(__name__)
    logger.info(
        f"Starting application on {probe_context.host}:{probe_context.port} "
        f"(auth: {'enabled' if probe_context.auth_token else 'disabled'}, "
        f"location: {probe_context.location or 'auto-detect'})"
    )

    web.run_app(
        create_app(probe_context),
        host=probe_context.host,
        port=probe_context.port,
        print=None,
    )
    logger.info("Shutdown complete.")


if __name__ == "__main__":
    main()
