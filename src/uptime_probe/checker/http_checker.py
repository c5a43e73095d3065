"""
HTTP checker implementation using the aiohttp library.

This module provides an implementation of the TargetChecker interface that uses
the aiohttp library to perform HTTP requests. It handles timing, error handling,
response validation and the optional TLS certificate inspection of https targets.
"""

import logging
import time

import aiohttp
from multidict import CIMultiDict

from uptime_probe.checker.tls_inspector import inspect_certificate
from uptime_probe.config.constants import (
    DEFAULT_HTTP_TIMEOUT_MS,
    DEFAULT_SSL_EXPIRY_THRESHOLD_DAYS,
    DEFAULT_USER_AGENT,
    MIN_SSL_CHECK_TIMEOUT_MS,
)
from uptime_probe.contracts import TargetChecker
from uptime_probe.domain import CheckResult, MonitorTarget, failure, success
from uptime_probe.errors import error_message, format_number, is_timeout_error
from uptime_probe.timeout import elapsed_ms
from uptime_probe.validation import validate_http_response

# Module logger
logger = logging.getLogger(__name__)


def _discard_body(response: aiohttp.ClientResponse) -> None:
    # Releasing an unread body closes the connection; nothing here may change the result.
    try:
        response.release()
    except Exception as e:
        logger.debug(f"Ignoring error while releasing response body: {e}")


class AiohttpChecker(TargetChecker):
    """
    A concrete implementation of TargetChecker using the aiohttp library.

    This class handles the entire lifecycle of a single HTTP check: request
    headers, the timeout-bounded request, latency measurement, validation of
    status and body, and the certificate inspection of https targets.
    It uses a shared aiohttp ClientSession owned by the application.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        default_timeout: float = DEFAULT_HTTP_TIMEOUT_MS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """
        Initializes the checker with a shared aiohttp ClientSession.

        Args:
            session: An active aiohttp.ClientSession to be used for requests.
            default_timeout: Timeout in milliseconds for targets that do not set one.
            user_agent: User-Agent header added when the target does not set one.
        """
        self._session: aiohttp.ClientSession = session
        self._default_timeout: float = default_timeout
        self._user_agent: str = user_agent

    def _build_headers(self, target: MonitorTarget) -> CIMultiDict:
        headers: CIMultiDict = CIMultiDict()
        for key, value in (target.headers or {}).items():
            headers[key] = str(value)
        if "User-Agent" not in headers:
            headers["User-Agent"] = self._user_agent
        return headers

    async def check(self, target: MonitorTarget) -> CheckResult:
        """
        Performs an HTTP request to the target's URL using the specified method.

        The latency is taken as soon as the response headers arrive, before the
        body is read for validation. aiohttp's own timeout bounds the whole
        exchange and closes the connection when it expires.

        Args:
            target: The MonitorTarget to check.

        Returns:
            CheckResult: CheckSuccess, optionally carrying certificate details,
                or CheckFailure describing the timeout, error or failed rule.
        """
        logger.debug(f"Starting HTTP check for target: {target.target}")
        start_time: float = time.perf_counter()
        timeout: float = target.timeout or self._default_timeout

        try:
            response = await self._session.request(
                target.method or "GET",
                target.target,
                headers=self._build_headers(target),
                data=target.body,
                timeout=aiohttp.ClientTimeout(total=timeout / 1000),
                ssl=not target.ssl_ignore_self_signed,
            )
            latency: int = elapsed_ms(start_time)
            logger.info(f"Response from {target.name}: status={response.status} latency={latency}ms")

            try:
                validation_error = await validate_http_response(target, response)
            finally:
                _discard_body(response)

        except Exception as e:
            latency = elapsed_ms(start_time)
            if is_timeout_error(e):
                logger.info(f"Timeout checking {target.name} after {latency}ms")
                return failure(f"Timeout after {format_number(timeout)}ms", latency)

            message = error_message(e)
            logger.info(f"Error checking {target.name}: {message}")
            return failure(message, latency)

        if validation_error:
            logger.info(f"Validation failed for {target.name}: {validation_error}")
            return failure(validation_error, latency)

        if target.ssl_check_enabled and target.target.startswith("https://"):
            return await self._check_certificate(target, timeout, latency)

        return success(latency)

    async def _check_certificate(
        self, target: MonitorTarget, timeout: float, latency: int
    ) -> CheckResult:
        """
        Inspects the target's certificate with what is left of the time budget.

        The reported latency stays the HTTP latency; inspection time is not added.
        """
        threshold: float = (
            target.ssl_check_days_before_expiry
            if target.ssl_check_days_before_expiry is not None
            else DEFAULT_SSL_EXPIRY_THRESHOLD_DAYS
        )

        try:
            certificate = await inspect_certificate(
                target.target,
                days_before_expiry=threshold,
                ignore_self_signed=target.ssl_ignore_self_signed,
                timeout_ms=max(timeout - latency, MIN_SSL_CHECK_TIMEOUT_MS),
            )
        except Exception as e:
            message = error_message(e)
            logger.warning(f"SSL check failed for {target.name}: {message}")
            return failure(f"SSL check failed: {message}", latency)

        logger.info(f"SSL expiry for {target.name}: {certificate.days_until_expiry} days")

        if certificate.days_until_expiry <= threshold:
            return failure(
                f"SSL certificate expires in {certificate.days_until_expiry} days "
                f"(threshold: {format_number(threshold)})",
                latency,
            )

        return success(latency, certificate)
