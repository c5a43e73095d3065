"""
Location resolution for the uptime probe.

This module determines the label reported alongside every check result. A
configured override always wins; otherwise the location is detected once,
from the Cloudflare trace endpoint or an IP geolocation API, and cached for
the lifetime of the process.
"""

import logging
import re
from typing import Optional

import aiohttp

from uptime_probe.config.constants import (
    CF_TRACE_TIMEOUT_S,
    CF_TRACE_URL,
    IP_API_TIMEOUT_S,
    IP_API_URL,
    UNKNOWN_LOCATION,
)
from uptime_probe.contracts import LocationResolver
from uptime_probe.errors import error_message

# Module logger
logger = logging.getLogger(__name__)

_COLO_PATTERN = re.compile(r"^colo=(.+)$", re.MULTILINE)


class StaticLocationResolver(LocationResolver):
    """A LocationResolver that always returns a configured label."""

    def __init__(self, location: str) -> None:
        self._location: str = location
        logger.info(f"Location manually set: {location}")

    async def resolve(self) -> str:
        return self._location


class AutoDetectLocationResolver(LocationResolver):
    """
    A LocationResolver that detects the location on first use and caches it.

    Detection tries the Cloudflare trace endpoint first, which reports the
    serving data centre, then falls back to IP geolocation. When both fail the
    location is UNKNOWN; that value is cached too, so detection runs at most once.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        trace_url: str = CF_TRACE_URL,
        ip_api_url: str = IP_API_URL,
    ) -> None:
        """
        Args:
            session: An active aiohttp.ClientSession used for the lookups.
            trace_url: Endpoint returning 'key=value' lines including 'colo='.
            ip_api_url: Endpoint returning JSON with 'city' and 'country_code'.
        """
        self._session: aiohttp.ClientSession = session
        self._trace_url: str = trace_url
        self._ip_api_url: str = ip_api_url
        self._cached: Optional[str] = None

    async def resolve(self) -> str:
        if self._cached is not None:
            return self._cached

        location = await self._from_trace() or await self._from_ip_api()
        if location:
            self._cached = location
        else:
            logger.info("Could not detect location")
            self._cached = UNKNOWN_LOCATION
        return self._cached

    async def _from_trace(self) -> Optional[str]:
        try:
            async with self._session.get(
                self._trace_url, timeout=aiohttp.ClientTimeout(total=CF_TRACE_TIMEOUT_S)
            ) as response:
                text: str = await response.text()
        except Exception as e:
            logger.debug(f"Location lookup via trace failed: {error_message(e)}")
            return None

        match = _COLO_PATTERN.search(text)
        if not match:
            return None

        location = match.group(1).strip()
        logger.info(f"Location detected via trace: {location}")
        return location

    async def _from_ip_api(self) -> Optional[str]:
        try:
            async with self._session.get(
                self._ip_api_url, timeout=aiohttp.ClientTimeout(total=IP_API_TIMEOUT_S)
            ) as response:
                data = await response.json(content_type=None)
        except Exception as e:
            logger.debug(f"Location lookup via IP API failed: {error_message(e)}")
            return None

        if not isinstance(data, dict):
            return None
        city, country_code = data.get("city"), data.get("country_code")
        if not city or not country_code:
            return None

        location = f"{city}, {country_code}"
        logger.info(f"Location detected via IP API: {location}")
        return location


def get_location_resolver(location: str, session: aiohttp.ClientSession) -> LocationResolver:
    """
    Builds the resolver matching the configuration.

    Args:
        location: The configured location; empty enables auto-detection.
        session: The session used by auto-detection.

    Returns:
        LocationResolver: A static resolver for a configured label, an
            auto-detecting one otherwise.
    """
    if location:
        return StaticLocationResolver(location)
    return AutoDetectLocationResolver(session)
