"""
Exception types raised inside the check-execution core.

Checkers convert every one of these into a CheckFailure before returning, so
they never reach the API layer.
"""

import asyncio


class ProbeError(Exception):
    """Base class for errors raised by the probe itself."""


class InvalidTargetError(ProbeError, ValueError):
    """Raised when a target string cannot be turned into a probe (bad host:port, empty target)."""


class CertificateError(ProbeError):
    """Raised when the peer certificate cannot be read or evaluated."""


class CertificateTrustError(CertificateError):
    """Raised when the peer certificate fails chain or hostname verification."""


def error_message(error: BaseException) -> str:
    """
    Renders an exception as a message, falling back to its class name.

    aiohttp and asyncio raise several exceptions with an empty message, which
    would otherwise produce an empty 'error' field in the check result.
    """
    message = str(error)
    return message if message else type(error).__name__


def is_timeout_error(error: BaseException) -> bool:
    """
    Returns True when the exception is a timeout.

    Classification is by type only. aiohttp's ServerTimeoutError and
    ConnectionTimeoutError derive from asyncio.TimeoutError, and
    OperationTimeoutError from the builtin TimeoutError. Messages are not
    inspected: transport errors embed the host name, which may contain
    words like "timeout".
    """
    return isinstance(error, (asyncio.TimeoutError, TimeoutError))


def format_number(value: float) -> str:
    """Formats a number from a request without a trailing ".0" for whole values."""
    return str(int(value)) if float(value).is_integer() else str(value)
