"""
Configuration module for the uptime probe.

This module provides functionality to parse command-line arguments and environment
variables to create a configuration context for the probe. It defines
default values and help text for all configurable parameters.
"""

import argparse
import os
from typing import Any
from uuid import uuid4

from uptime_probe.config.constants import (
    DEFAULT_AUTH_TOKEN,
    DEFAULT_HOST,
    DEFAULT_HTTP_TIMEOUT_MS,
    DEFAULT_INSTANCE_ID_PREFIX,
    DEFAULT_LOCATION,
    DEFAULT_LOGGING_CONFIG_FILE,
    DEFAULT_LOGGING_TYPE,
    DEFAULT_PORT,
    DEFAULT_USER_AGENT,
)
from uptime_probe.config.probe_context import ProbeContext


def get_context() -> ProbeContext:
    """
    Parse command-line arguments and environment variables to create a configuration context.

    This function creates an argument parser with options for all configurable aspects
    of the probe. For each option, it first checks for a command-line argument,
    then falls back to an environment variable, and finally uses a default value.

    Returns:
        ProbeContext: A configuration context object containing all parsed settings.
    """
    parser = argparse.ArgumentParser(
        description="On-demand HTTP/TCP availability probe for a monitoring controller."
    )

    parser.add_argument(
        "--host",
        type=str,
        default=os.getenv("UPTIME_PROBE_HOST", DEFAULT_HOST),
        help="Specifies the interface the HTTP server binds to.\n"
        "If not provided, the value is read from the UPTIME_PROBE_HOST environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_HOST} is used.",
    )

    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=int(os.getenv("UPTIME_PROBE_PORT", os.getenv("PORT", DEFAULT_PORT))),
        help="Specifies the port the HTTP server listens on.\n"
        "If not provided, the value is read from the UPTIME_PROBE_PORT environment variable,\n"
        "then from PORT.\n"
        f"If both are absent, a default value of {DEFAULT_PORT} is used.",
    )

    parser.add_argument(
        "-t",
        "--auth-token",
        type=str,
        default=os.getenv("UPTIME_PROBE_TOKEN", DEFAULT_AUTH_TOKEN),
        help="Specifies the bearer token required by the /check endpoint.\n"
        "If not provided, the value is read from the UPTIME_PROBE_TOKEN environment variable.\n"
        "If that is also absent, authentication is disabled.",
    )

    parser.add_argument(
        "-l",
        "--location",
        type=str,
        default=os.getenv("UPTIME_PROBE_LOCATION", DEFAULT_LOCATION),
        help="Specifies a fixed location label reported with every result.\n"
        "If not provided, the value is read from the UPTIME_PROBE_LOCATION environment variable.\n"
        "If that is also absent, the location is detected automatically.",
    )

    parser.add_argument(
        "-iid",
        "--instance-id",
        type=str,
        default=os.getenv("UPTIME_PROBE_INSTANCE_ID", f"{DEFAULT_INSTANCE_ID_PREFIX}{uuid4()}"),
        help="Specifies the instance ID added to every log record.\n"
        "If not provided, the value is read from the UPTIME_PROBE_INSTANCE_ID environment variable.\n"
        f"If that is also absent, the default value will be {DEFAULT_INSTANCE_ID_PREFIX}uuid4().",
    )

    parser.add_argument(
        "-lt",
        "--logging-type",
        type=str,
        default=os.getenv("UPTIME_PROBE_LOGGING_TYPE", DEFAULT_LOGGING_TYPE),
        help="Specifies the logging configuration type to use.\n"
        "Allowed values: dev, prod, custom (case insensitive).\n"
        "For 'dev' and 'prod', system will use built-in configurations.\n"
        "For 'custom', the --logging-config-file argument is required.",
    )

    parser.add_argument(
        "-lcf",
        "--logging-config-file",
        type=str,
        default=os.getenv("UPTIME_PROBE_LOGGING_CONFIG_FILE", DEFAULT_LOGGING_CONFIG_FILE),
        help="Path to custom logging configuration file.\n"
        "Required when --logging-type is set to 'custom'.",
    )

    parser.add_argument(
        "-dt",
        "--default-timeout",
        type=int,
        default=int(os.getenv("UPTIME_PROBE_DEFAULT_TIMEOUT", DEFAULT_HTTP_TIMEOUT_MS)),
        help="Specifies the timeout in milliseconds for targets that do not set one.\n"
        "If not provided, the value is read from the UPTIME_PROBE_DEFAULT_TIMEOUT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_HTTP_TIMEOUT_MS}ms is used.",
    )

    parser.add_argument(
        "-ua",
        "--user-agent",
        type=str,
        default=os.getenv("UPTIME_PROBE_USER_AGENT", DEFAULT_USER_AGENT),
        help="Specifies the User-Agent sent with HTTP checks that do not set their own.\n"
        "If not provided, the value is read from the UPTIME_PROBE_USER_AGENT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_USER_AGENT} is used.",
    )

    # Parse the command-line arguments
    args: Any = parser.parse_args()

    if args.default_timeout <= 0:
        parser.error("--default-timeout must be a positive number of milliseconds")

    # Create and return a ProbeContext with the parsed settings
    return ProbeContext(
        host=args.host,
        port=args.port,
        auth_token=args.auth_token,
        location=args.location,
        instance_id=args.instance_id,
        logging_type=args.logging_type,
        logging_config_file=args.logging_config_file,
        default_timeout=args.default_timeout,
        user_agent=args.user_agent,
    )
