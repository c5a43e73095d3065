"""
HTTP API of the uptime probe, built on aiohttp.web.

Endpoints:
    GET  /        Service information.
    GET  /health  Liveness probe.
    POST /check   Executes one check for the monitor target in the JSON body.

When an auth token is configured, /check requires 'Authorization: Bearer <token>'.
"""

import hmac
import logging
import time
from typing import AsyncIterator, Awaitable, Callable

import aiohttp
from aiohttp import web

from uptime_probe.api.schema import TargetValidationError, parse_monitor_target
from uptime_probe.checker.http_checker import AiohttpChecker
from uptime_probe.checker.tcp_checker import TcpChecker
from uptime_probe.config import ProbeContext
from uptime_probe.config.constants import SERVICE_DOCS_URL, SERVICE_NAME, SERVICE_VERSION
from uptime_probe.config.http_config import get_http_session
from uptime_probe.contracts import LocationResolver
from uptime_probe.dispatcher import CheckDispatcher
from uptime_probe.errors import error_message
from uptime_probe.location import get_location_resolver

# Module logger
logger = logging.getLogger(__name__)

CONTEXT_KEY = web.AppKey("context", ProbeContext)
DISPATCHER_KEY = web.AppKey("dispatcher", CheckDispatcher)
LOCATION_RESOLVER_KEY = web.AppKey("location_resolver", LocationResolver)

CHECK_PATH = "/check"

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


async def handle_info(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "name": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "endpoints": {
                "GET /": "This info page",
                "GET /health": "Health check",
                "POST /check": "Execute a monitor check",
            },
            "docs": SERVICE_DOCS_URL,
        }
    )


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "timestamp": int(time.time() * 1000)})


async def handle_check(request: web.Request) -> web.Response:
    """
    Validates the monitor target in the request body and runs one check.

    Returns:
        web.Response: 200 with {"location", "result"}; 400 for an invalid body;
            500 when something outside the check itself fails.
    """
    try:
        try:
            payload = await request.json()
        except ValueError:
            return web.json_response({"error": "Invalid JSON body"}, status=400)

        try:
            target = parse_monitor_target(payload)
        except TargetValidationError as e:
            return web.json_response({"error": str(e)}, status=400)

        logger.info(f"Starting check: {target.name}")

        location = await request.app[LOCATION_RESOLVER_KEY].resolve()
        result = await request.app[DISPATCHER_KEY].dispatch(target)

        status = "UP" if result.ok else "DOWN"
        logger.info(f"Completed check: {target.name} location={location} status={status}")
        return web.json_response({"location": location, "result": result.to_dict()})
    except Exception as e:
        message = error_message(e)
        logger.exception(f"Error handling check request: {message}")
        return web.json_response({"error": message}, status=500)


def auth_middleware(auth_token: str) -> Callable:
    """
    Builds a middleware requiring the bearer token on the /check endpoint.

    The comparison runs in constant time.
    """
    expected = f"Bearer {auth_token}".encode()

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        if request.path == CHECK_PATH:
            provided = request.headers.get("Authorization", "").encode()
            if not hmac.compare_digest(provided, expected):
                logger.info("Unauthorized request")
                return web.json_response({"error": "Unauthorized"}, status=401)
        return await handler(request)

    return middleware


def build_app(auth_token: str) -> web.Application:
    """
    Creates the application with its routes and, when a token is given, authentication.

    The dispatcher and location resolver are looked up under DISPATCHER_KEY and
    LOCATION_RESOLVER_KEY; callers must store them before serving requests.

    Args:
        auth_token: Bearer token for /check; empty disables authentication.

    Returns:
        web.Application: The configured application.
    """
    middlewares = [auth_middleware(auth_token)] if auth_token else []
    app = web.Application(middlewares=middlewares)
    app.add_routes(
        [
            web.get("/", handle_info),
            web.get("/health", handle_health),
            web.post(CHECK_PATH, handle_check),
        ]
    )
    return app


async def _probe_components(app: web.Application) -> AsyncIterator[None]:
    """
    Creates the shared HTTP session and the components built on it, and closes the session on shutdown.
    """
    context: ProbeContext = app[CONTEXT_KEY]
    http_session: aiohttp.ClientSession = get_http_session(context)
    logger.info("configured: http_session")

    app[DISPATCHER_KEY] = CheckDispatcher(
        http_checker=AiohttpChecker(
            session=http_session,
            default_timeout=context.default_timeout,
            user_agent=context.user_agent,
        ),
        tcp_checker=TcpChecker(default_timeout=context.default_timeout),
    )
    app[LOCATION_RESOLVER_KEY] = get_location_resolver(context.location, http_session)
    logger.info("initialized: dispatcher, location_resolver")

    yield

    logger.info("Shutting down resources...")
    await http_session.close()


def create_app(context: ProbeContext) -> web.Application:
    """
    Creates the fully wired application for the given configuration.

    Args:
        context: Configuration context containing all application settings.

    Returns:
        web.Application: An application whose components are created on startup.
    """
    if not context.auth_token:
        logger.warning("No auth token configured: /check is unauthenticated.")

    app = build_app(context.auth_token)
    app[CONTEXT_KEY] = context
    app.cleanup_ctx.append(_probe_components)
    return app
