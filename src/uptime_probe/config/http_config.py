"""
HTTP client configuration module for the uptime probe.

This module provides functionality to create and configure the HTTP client
session shared by all HTTP checks, using the aiohttp library.
"""

import logging

import aiohttp

from uptime_probe.config import ProbeContext

# Module logger
logger = logging.getLogger(__name__)


def get_http_session(context: ProbeContext) -> aiohttp.ClientSession:
    """
    Create and configure an HTTP client session based on the provided configuration.

    Each check opens its own connection so that the reported latency always
    includes connection setup, and cookies set by one target are never sent to
    another.

    Args:
        context: Configuration context containing HTTP client settings.

    Returns:
        aiohttp.ClientSession: A configured HTTP client session that can be used to make HTTP requests.
    """
    connector = aiohttp.TCPConnector(force_close=True)
    logger.debug(f"Creating HTTP session for instance {context.instance_id}")
    return aiohttp.ClientSession(
        connector=connector,
        cookie_jar=aiohttp.DummyCookieJar(),
        raise_for_status=False,
    )
