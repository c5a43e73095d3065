"""
Domain models for the uptime probe.

This module defines the core data structures used throughout the application,
including monitor targets, check kinds, TLS certificate details and check results.
These models serve as the foundation for the probe's data flow and also define
the JSON shape returned to the calling controller.
"""

from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple, Union

TCP_PING_METHOD = "TCP_PING"


class HttpMethod(str, Enum):
    """
    Defines the HTTP methods recognised by the dispatcher as a type-safe enumeration.

    Inheriting from 'str' allows enum members to behave like strings,
    making them compatible with libraries expecting string values.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"


class CheckKind(str, Enum):
    """The closed set of probes the dispatcher can route a target to."""

    TCP_PING = "TCP_PING"
    HTTP = "HTTP"


class MonitorTarget(NamedTuple):
    """
    Represents a single endpoint to probe with its complete configuration.

    Instances are built by the API layer from an already validated request and
    live only for the duration of one check.

    Attributes:
        id: Identifier assigned by the calling controller.
        name: Display name, used in log records.
        method: An HTTP verb, or the pseudo-method 'TCP_PING'.
        target: The URL to request, or 'host:port' for TCP probes.
        timeout: Optional timeout in milliseconds.
        expected_codes: Optional status codes accepted as healthy.
        headers: Optional HTTP headers to send with the request.
        body: Optional request body.
        response_keyword: Optional substring that must appear in the response body.
        response_forbidden_keyword: Optional substring that must not appear in the body.
        ssl_check_enabled: Whether to inspect the TLS certificate of https targets.
        ssl_check_days_before_expiry: Days before expiry at which the check fails.
        ssl_ignore_self_signed: Whether to skip certificate trust verification.
    """

    id: str
    name: str
    method: str
    target: str
    timeout: Optional[float] = None
    expected_codes: Optional[Tuple[int, ...]] = None
    headers: Optional[Dict[str, str]] = None
    body: Optional[str] = None
    response_keyword: Optional[str] = None
    response_forbidden_keyword: Optional[str] = None
    ssl_check_enabled: bool = False
    ssl_check_days_before_expiry: Optional[float] = None
    ssl_ignore_self_signed: bool = False


class TlsCertificateInfo(NamedTuple):
    """
    Details read from the peer's leaf certificate during a TLS inspection.

    Attributes:
        expiry_date: The certificate's not-after instant, in whole seconds since the epoch.
        days_until_expiry: Whole days left before expiry, negative once expired.
        issuer: Issuer organisation, or the issuer common name when absent.
        subject: Subject common name.
    """

    expiry_date: int
    days_until_expiry: int
    issuer: Optional[str] = None
    subject: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Renders the certificate details as camelCase JSON, omitting absent names."""
        data: Dict[str, Any] = {
            "expiryDate": self.expiry_date,
            "daysUntilExpiry": self.days_until_expiry,
        }
        if self.issuer is not None:
            data["issuer"] = self.issuer
        if self.subject is not None:
            data["subject"] = self.subject
        return data


class CheckSuccess(NamedTuple):
    """
    The outcome of a check whose endpoint was reachable and passed every rule.

    Attributes:
        latency: Milliseconds from the start of the check to the response.
        ssl: Certificate details when a TLS inspection was performed.
    """

    latency: int
    ssl: Optional[TlsCertificateInfo] = None

    @property
    def ok(self) -> bool:
        """Always True; lets callers branch on either result type alike."""
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Renders the result as {"ok": true, "latency", "ssl"?} for the API response."""
        data: Dict[str, Any] = {"ok": True, "latency": self.latency}
        if self.ssl is not None:
            data["ssl"] = self.ssl.to_dict()
        return data


class CheckFailure(NamedTuple):
    """
    The outcome of a check that failed for any reason.

    Attributes:
        error: Human readable description of the failure.
        latency: Milliseconds elapsed before the failure, or None when no
            network time was spent (invalid input, unexpected errors).
    """

    error: str
    latency: Optional[int] = None

    @property
    def ok(self) -> bool:
        """Always False."""
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Renders the result as {"ok": false, "error", "latency"?} for the API response."""
        data: Dict[str, Any] = {"ok": False, "error": self.error}
        if self.latency is not None:
            data["latency"] = self.latency
        return data


CheckResult = Union[CheckSuccess, CheckFailure]


def success(latency: int, ssl: Optional[TlsCertificateInfo] = None) -> CheckSuccess:
    """Builds a successful result, optionally carrying the inspected certificate."""
    return CheckSuccess(latency=latency, ssl=ssl)


def failure(error: str, latency: Optional[int] = None) -> CheckFailure:
    """Builds a failed result; pass no latency when no network time was spent."""
    return CheckFailure(error=error, latency=latency)
