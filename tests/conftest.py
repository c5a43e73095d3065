"""
Shared fixtures for the uptime probe test suite.
"""

import datetime
import pathlib
from typing import Callable, Optional, Tuple

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from uptime_probe.config.probe_context import ProbeContext
from uptime_probe.domain import MonitorTarget

CertificateFactory = Callable[..., bytes]


def _issue_certificate(
    not_after: datetime.datetime,
    common_name: str = "example.com",
    organization: Optional[str] = "Example Org",
) -> Tuple[x509.Certificate, ec.EllipticCurvePrivateKey]:
    """Issues a self-signed certificate, valid from a day before now (or before not_after)."""
    key = ec.generate_private_key(ec.SECP256R1())
    attributes = [x509.NameAttribute(NameOID.COMMON_NAME, common_name)]
    if organization:
        attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization))
    name = x509.Name(attributes)
    now = datetime.datetime.now(datetime.timezone.utc)
    not_before = min(not_after, now) - datetime.timedelta(days=1)

    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .sign(key, hashes.SHA256())
    )
    return certificate, key


@pytest.fixture
def make_certificate() -> CertificateFactory:
    """
    Provides a factory minting self-signed DER certificates.

    The factory accepts the not-after instant and optional subject/issuer names.
    """

    def factory(
        not_after: datetime.datetime,
        common_name: str = "example.com",
        organization: Optional[str] = "Example Org",
    ) -> bytes:
        certificate, _ = _issue_certificate(not_after, common_name, organization)
        return certificate.public_bytes(serialization.Encoding.DER)

    return factory


@pytest.fixture
def server_certificate_files(tmp_path: pathlib.Path) -> Tuple[str, str]:
    """
    Writes a self-signed 'localhost' certificate valid for 45 days and 1 hour
    and its private key as PEM files.

    Returns:
        Tuple[str, str]: The certificate and key file paths.
    """
    not_after = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(days=45, hours=1)
    certificate, key = _issue_certificate(not_after, "localhost", "Loopback Test CA")

    cert_file = tmp_path / "server.crt"
    key_file = tmp_path / "server.key"
    cert_file.write_bytes(certificate.public_bytes(serialization.Encoding.PEM))
    key_file.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return str(cert_file), str(key_file)


@pytest.fixture
def http_target() -> MonitorTarget:
    """Provides a plain HTTP monitor target."""
    return MonitorTarget(
        id="monitor-1",
        name="Example",
        method="GET",
        target="https://example.com",
        timeout=5000,
    )


@pytest.fixture
def tcp_target() -> MonitorTarget:
    """Provides a TCP_PING monitor target."""
    return MonitorTarget(
        id="monitor-2",
        name="Database",
        method="TCP_PING",
        target="db.example.com:5432",
        timeout=2000,
    )


@pytest.fixture
def probe_context() -> ProbeContext:
    """Provides a ProbeContext with a fixed location and no auth token."""
    return ProbeContext(
        host="127.0.0.1",
        port=3000,
        auth_token="",
        location="test-lab",
        instance_id="probe-123",
        logging_type="dev",
        logging_config_file="logging.json",
        default_timeout=2000,
        user_agent="probe-test/1.0",
    )
