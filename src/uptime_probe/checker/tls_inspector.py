"""
TLS certificate inspection.

This module opens a bare TLS connection to a host, reads the peer's leaf
certificate and reports how many whole days remain before it expires. It is
independent of any HTTP exchange: the handshake is performed solely to read
the certificate.
"""

import asyncio
import logging
import math
import ssl
import time
from typing import Optional, Tuple
from urllib.parse import urlsplit

from cryptography import x509
from cryptography.x509.oid import NameOID

from uptime_probe.config.constants import (
    DEFAULT_HTTP_TIMEOUT_MS,
    DEFAULT_SSL_EXPIRY_THRESHOLD_DAYS,
    DEFAULT_TLS_PORT,
)
from uptime_probe.domain import TlsCertificateInfo
from uptime_probe.errors import (
    CertificateError,
    CertificateTrustError,
    InvalidTargetError,
    error_message,
)
from uptime_probe.timeout import with_timeout

# Module logger
logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


def days_until(expiry_timestamp: float, now: Optional[float] = None) -> int:
    """
    Computes the whole days left until an expiry instant.

    Partial days are floored, so an instant 23.9 hours away yields 0 and an
    instant already in the past yields a negative number.

    Args:
        expiry_timestamp: The expiry instant in seconds since the epoch.
        now: The reference instant, defaults to the current time.

    Returns:
        int: The signed number of whole days until expiry.
    """
    if now is None:
        now = time.time()
    return math.floor((expiry_timestamp - now) / SECONDS_PER_DAY)


def parse_certificate(der: bytes, now: Optional[float] = None) -> TlsCertificateInfo:
    """
    Extracts expiry, issuer and subject from a DER encoded certificate.

    Raises:
        CertificateError: If the certificate cannot be parsed.
    """
    try:
        certificate = x509.load_der_x509_certificate(der)
        not_after = certificate.not_valid_after_utc
    except ValueError as err:
        raise CertificateError("Certificate missing valid_to field") from err

    expiry_timestamp = not_after.timestamp()
    issuer = _name_attribute(certificate.issuer, NameOID.ORGANIZATION_NAME) or _name_attribute(
        certificate.issuer, NameOID.COMMON_NAME
    )

    return TlsCertificateInfo(
        expiry_date=int(expiry_timestamp),
        days_until_expiry=days_until(expiry_timestamp, now),
        issuer=issuer,
        subject=_name_attribute(certificate.subject, NameOID.COMMON_NAME),
    )


def _name_attribute(name: x509.Name, oid: x509.ObjectIdentifier) -> Optional[str]:
    attributes = name.get_attributes_for_oid(oid)
    if not attributes:
        return None
    return str(attributes[0].value)


def _parse_host_port(url: str) -> Tuple[str, int]:
    parts = urlsplit(url)
    if not parts.hostname:
        raise InvalidTargetError(f"Invalid URL: {url}")
    return parts.hostname, parts.port or DEFAULT_TLS_PORT


def _build_ssl_context(ignore_self_signed: bool) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if ignore_self_signed:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


async def _read_peer_certificate(
    host: str, port: int, context: ssl.SSLContext, timeout_ms: float
) -> bytes:
    try:
        _, writer = await asyncio.open_connection(
            host,
            port,
            ssl=context,
            server_hostname=host,
            ssl_handshake_timeout=timeout_ms / 1000,
        )
    except ssl.SSLCertVerificationError as err:
        reason = getattr(err, "verify_message", None) or error_message(err)
        raise CertificateTrustError(f"Certificate verification failed: {reason}") from err

    try:
        ssl_object = writer.get_extra_info("ssl_object")
        der: Optional[bytes] = (
            ssl_object.getpeercert(binary_form=True) if ssl_object is not None else None
        )
    finally:
        writer.close()

    if not der:
        raise CertificateError("No certificate received")
    return der


async def inspect_certificate(
    url: str,
    days_before_expiry: float = DEFAULT_SSL_EXPIRY_THRESHOLD_DAYS,
    ignore_self_signed: bool = False,
    timeout_ms: float = DEFAULT_HTTP_TIMEOUT_MS,
) -> TlsCertificateInfo:
    """
    Performs a TLS handshake with the URL's host and evaluates its certificate.

    The handshake is bounded twice: by the connection's own handshake timeout
    and by with_timeout around the whole operation.

    Args:
        url: An https URL; the port defaults to 443.
        days_before_expiry: Threshold in days, only used for logging here. The
            caller decides whether the certificate is expiring too soon.
        ignore_self_signed: Disables chain and hostname verification.
        timeout_ms: Deadline for the whole inspection in milliseconds.

    Returns:
        TlsCertificateInfo: Expiry and naming details of the leaf certificate.

    Raises:
        CertificateTrustError: If verification is enabled and the peer is not trusted.
        CertificateError: If no certificate is presented or it cannot be parsed.
        OperationTimeoutError: If the deadline elapses first.
        OSError: If the connection cannot be established.
    """
    host, port = _parse_host_port(url)
    context = _build_ssl_context(ignore_self_signed)
    logger.debug(f"Inspecting certificate of {host}:{port} (verify={not ignore_self_signed})")

    der = await with_timeout(_read_peer_certificate(host, port, context, timeout_ms), timeout_ms)
    info = parse_certificate(der)

    logger.debug(
        f"Certificate of {host}:{port} expires in {info.days_until_expiry} days "
        f"(threshold: {days_before_expiry})"
    )
    return info
