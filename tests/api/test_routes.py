"""
Tests for the HTTP API.

Handler tests run the application returned by build_app against mocked
dispatcher and location resolver; the last class starts the fully wired
application from create_app.

The tests follow the Arrange-Act-Assert (AAA) pattern.
"""

import asyncio
from typing import AsyncIterator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from uptime_probe.api.routes import (
    DISPATCHER_KEY,
    LOCATION_RESOLVER_KEY,
    build_app,
    create_app,
)
from uptime_probe.config import ProbeContext
from uptime_probe.contracts import LocationResolver
from uptime_probe.dispatcher import CheckDispatcher
from uptime_probe.domain import MonitorTarget, TlsCertificateInfo, failure, success

TOKEN = "s3cret"
AUTH_HEADER = {"Authorization": f"Bearer {TOKEN}"}
CHECK_BODY = {"id": "monitor-1", "name": "Example", "method": "GET", "target": "https://example.com"}


@pytest.fixture
def mock_dispatcher() -> MagicMock:
    dispatcher = MagicMock(spec=CheckDispatcher)
    dispatcher.dispatch = AsyncMock(return_value=success(42))
    return dispatcher


@pytest.fixture
def mock_location_resolver() -> MagicMock:
    resolver = MagicMock(spec=LocationResolver)
    resolver.resolve = AsyncMock(return_value="FRA")
    return resolver


async def _client(app: web.Application) -> TestClient:
    client = TestClient(TestServer(app))
    await client.start_server()
    return client


@pytest_asyncio.fixture
async def client(
    mock_dispatcher: MagicMock, mock_location_resolver: MagicMock
) -> AsyncIterator[TestClient]:
    """
    Serves an authenticated application with mocked components.
    """
    app = build_app(TOKEN)
    app[DISPATCHER_KEY] = mock_dispatcher
    app[LOCATION_RESOLVER_KEY] = mock_location_resolver
    test_client = await _client(app)
    yield test_client
    await test_client.close()


class TestInfoAndHealth:
    @pytest.mark.asyncio
    async def test_info_should_describe_service(self, client: TestClient) -> None:
        # Act
        response = await client.get("/")

        # Assert
        assert response.status == 200
        data = await response.json()
        assert data["name"] == "Uptime Probe"
        assert "POST /check" in data["endpoints"]

    @pytest.mark.asyncio
    async def test_health_should_not_require_authentication(self, client: TestClient) -> None:
        # Act
        response = await client.get("/health")

        # Assert
        assert response.status == 200
        data = await response.json()
        assert data["status"] == "ok"
        assert isinstance(data["timestamp"], int)


class TestAuthentication:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "headers",
        [{}, {"Authorization": "Bearer wrong"}, {"Authorization": TOKEN}],
    )
    async def test_check_should_reject_missing_or_wrong_token(
        self, client: TestClient, mock_dispatcher: MagicMock, headers: dict
    ) -> None:
        # Act
        response = await client.post("/check", json=CHECK_BODY, headers=headers)

        # Assert
        assert response.status == 401
        assert await response.json() == {"error": "Unauthorized"}
        mock_dispatcher.dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_check_should_be_open_when_no_token_is_configured(
        self, mock_dispatcher: MagicMock, mock_location_resolver: MagicMock
    ) -> None:
        # Arrange
        app = build_app("")
        app[DISPATCHER_KEY] = mock_dispatcher
        app[LOCATION_RESOLVER_KEY] = mock_location_resolver
        client = await _client(app)

        # Act
        try:
            response = await client.post("/check", json=CHECK_BODY)
            status = response.status
        finally:
            await client.close()

        # Assert
        assert status == 200


class TestCheck:
    """Tests for the /check endpoint."""

    @pytest.mark.asyncio
    async def test_check_should_return_location_and_success(
        self, client: TestClient, mock_dispatcher: MagicMock
    ) -> None:
        # Act
        response = await client.post("/check", json=CHECK_BODY, headers=AUTH_HEADER)

        # Assert
        assert response.status == 200
        assert await response.json() == {"location": "FRA", "result": {"ok": True, "latency": 42}}
        target: MonitorTarget = mock_dispatcher.dispatch.call_args[0][0]
        assert target.id == "monitor-1"
        assert target.target == "https://example.com"

    @pytest.mark.asyncio
    async def test_check_should_serialize_certificate_details(
        self, client: TestClient, mock_dispatcher: MagicMock
    ) -> None:
        # Arrange
        certificate = TlsCertificateInfo(
            expiry_date=1_800_000_000, days_until_expiry=90, issuer="Example CA"
        )
        mock_dispatcher.dispatch.return_value = success(30, certificate)

        # Act
        response = await client.post("/check", json=CHECK_BODY, headers=AUTH_HEADER)

        # Assert
        result = (await response.json())["result"]
        assert result["ssl"] == {
            "expiryDate": 1_800_000_000,
            "daysUntilExpiry": 90,
            "issuer": "Example CA",
        }

    @pytest.mark.asyncio
    async def test_check_should_report_failed_checks_with_200(
        self, client: TestClient, mock_dispatcher: MagicMock
    ) -> None:
        # Arrange
        mock_dispatcher.dispatch.return_value = failure("Invalid TCP port: 70000")

        # Act
        response = await client.post("/check", json=CHECK_BODY, headers=AUTH_HEADER)

        # Assert
        assert response.status == 200
        assert (await response.json())["result"] == {
            "ok": False,
            "error": "Invalid TCP port: 70000",
        }

    @pytest.mark.asyncio
    async def test_check_should_reject_malformed_json(
        self, client: TestClient, mock_dispatcher: MagicMock
    ) -> None:
        # Act
        response = await client.post(
            "/check",
            data="{not json",
            headers={**AUTH_HEADER, "Content-Type": "application/json"},
        )

        # Assert
        assert response.status == 400
        assert await response.json() == {"error": "Invalid JSON body"}
        mock_dispatcher.dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_check_should_reject_invalid_target(
        self, client: TestClient, mock_dispatcher: MagicMock
    ) -> None:
        # Act
        response = await client.post(
            "/check", json={**CHECK_BODY, "target": ""}, headers=AUTH_HEADER
        )

        # Assert
        assert response.status == 400
        assert await response.json() == {"error": "target: target URL is required"}
        mock_dispatcher.dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_check_should_reject_nan_timeout(
        self, client: TestClient, mock_dispatcher: MagicMock
    ) -> None:
        # Act
        response = await client.post(
            "/check",
            data='{"method": "TCP_PING", "target": "db.example.com:5432", "timeout": NaN}',
            headers={**AUTH_HEADER, "Content-Type": "application/json"},
        )

        # Assert
        assert response.status == 400
        assert (await response.json())["error"].startswith("timeout")
        mock_dispatcher.dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_check_should_return_500_when_location_lookup_raises(
        self, client: TestClient, mock_location_resolver: MagicMock
    ) -> None:
        # Arrange
        mock_location_resolver.resolve.side_effect = RuntimeError("resolver crashed")

        # Act
        response = await client.post("/check", json=CHECK_BODY, headers=AUTH_HEADER)

        # Assert
        assert response.status == 500
        assert await response.json() == {"error": "resolver crashed"}


class TestCreateApp:
    """Tests against the fully wired application."""

    @pytest.mark.asyncio
    async def test_create_app_should_wire_components_on_startup(
        self, probe_context: ProbeContext
    ) -> None:
        # Arrange
        async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
            writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        client = await _client(create_app(probe_context))

        # Act
        try:
            response = await client.post(
                "/check", json={"id": "db", "method": "TCP_PING", "target": f"127.0.0.1:{port}"}
            )
            data = await response.json()
        finally:
            await client.close()
            server.close()
            await server.wait_closed()

        # Assert
        assert response.status == 200
        assert data["location"] == "test-lab"
        assert data["result"]["ok"] is True
        assert data["result"]["latency"] >= 0

    @pytest.mark.asyncio
    async def test_create_app_should_report_invalid_tcp_target_as_failed_check(
        self, probe_context: ProbeContext
    ) -> None:
        # Arrange
        client = await _client(create_app(probe_context))

        # Act
        try:
            response = await client.post(
                "/check", json={"method": "TCP_PING", "target": "badhost:70000"}
            )
            data = await response.json()
        finally:
            await client.close()

        # Assert
        assert response.status == 200
        assert data["result"] == {"ok": False, "error": "Invalid TCP port: 70000"}
