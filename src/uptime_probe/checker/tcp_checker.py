"""
TCP reachability checker.

This module provides an implementation of the TargetChecker interface that
opens a raw TCP connection to 'host:port' and closes it as soon as it is
established. The reported latency is the time-to-connect; no application
data is exchanged.
"""

import asyncio
import errno
import logging
import time
from typing import Tuple
from urllib.parse import urlsplit

from uptime_probe.config.constants import DEFAULT_HTTP_TIMEOUT_MS
from uptime_probe.contracts import TargetChecker
from uptime_probe.domain import CheckResult, MonitorTarget, failure, success
from uptime_probe.errors import InvalidTargetError, error_message, format_number, is_timeout_error
from uptime_probe.timeout import elapsed_ms, with_timeout

# Module logger
logger = logging.getLogger(__name__)

MIN_PORT = 1
MAX_PORT = 65535


def parse_tcp_target(target: str) -> Tuple[str, int]:
    """
    Splits a 'hostname:port' string into its parts.

    IPv6 literals must be bracketed, e.g. '[::1]:22'.

    Args:
        target: The target string of a TCP_PING monitor.

    Returns:
        Tuple[str, int]: The hostname and the port.

    Raises:
        InvalidTargetError: If the hostname is empty, the port is missing, or the
            port is not an integer between 1 and 65535.
    """
    try:
        parts = urlsplit(f"tcp://{target}")
        hostname = parts.hostname
    except ValueError as err:
        raise InvalidTargetError(f"Invalid TCP target: {target}") from err

    if not hostname:
        raise InvalidTargetError("Invalid TCP target hostname")

    netloc = parts.netloc.rpartition("@")[2]
    _, separator, port_text = netloc.rpartition(":")
    if not separator or not port_text or netloc.endswith("]"):
        raise InvalidTargetError("TCP target must include a port (hostname:port)")

    # str.isdigit() also accepts superscripts, which int() rejects.
    if not (port_text.isascii() and port_text.isdigit()):
        raise InvalidTargetError(f"Invalid TCP port: {port_text}")

    port = int(port_text)
    if not MIN_PORT <= port <= MAX_PORT:
        raise InvalidTargetError(f"Invalid TCP port: {port_text}")

    return hostname, port


def _is_connection_refused(error: BaseException) -> bool:
    if isinstance(error, ConnectionRefusedError):
        return True
    if not isinstance(error, OSError):
        return False
    # One attempt per resolved address ends in a plain OSError without an errno.
    return error.errno == errno.ECONNREFUSED or "Connect call failed" in error_message(error)


def _describe_connection_error(error: BaseException) -> str:
    message = error_message(error)
    if _is_connection_refused(error) and "refused" not in message.lower():
        return f"Connection refused ({message})"
    return message


async def _connect(hostname: str, port: int) -> None:
    _, writer = await asyncio.open_connection(hostname, port)
    writer.close()


class TcpChecker(TargetChecker):
    """
    A concrete implementation of TargetChecker that measures TCP connect time.

    The connection attempt is raced against the target's timeout; on expiry the
    pending connect is cancelled, which closes the half-open socket.
    """

    def __init__(self, default_timeout: float = DEFAULT_HTTP_TIMEOUT_MS) -> None:
        """
        Args:
            default_timeout: Timeout in milliseconds for targets that do not set one.
        """
        self._default_timeout: float = default_timeout

    async def check(self, target: MonitorTarget) -> CheckResult:
        """
        Opens and immediately closes a TCP connection to the target.

        Args:
            target: A MonitorTarget whose 'target' is 'hostname:port'.

        Returns:
            CheckResult: CheckSuccess with the time-to-connect, or CheckFailure.
                Invalid targets fail without a latency.
        """
        start_time: float = time.perf_counter()
        timeout: float = target.timeout or self._default_timeout

        try:
            hostname, port = parse_tcp_target(target.target)
        except InvalidTargetError as e:
            logger.info(f"Invalid TCP target for {target.name}: {e}")
            return failure(str(e))

        try:
            await with_timeout(_connect(hostname, port), timeout)
        except Exception as e:
            latency = elapsed_ms(start_time)
            if is_timeout_error(e):
                logger.info(f"Timeout connecting to {target.name} after {format_number(timeout)}ms")
                return failure(f"Timeout after {format_number(timeout)}ms", latency)

            message = _describe_connection_error(e)
            logger.info(f"Error connecting to {target.name}: {message}")
            return failure(message, latency)

        latency = elapsed_ms(start_time)
        logger.info(f"Connected to {target.name} ({hostname}:{port}) in {latency}ms")
        return success(latency)
