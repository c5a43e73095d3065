"""
Constants for the uptime probe.

This module defines default values for all configurable parameters
of the probe and the fixed values used by the checkers. The configurable
defaults are used as fallback values when neither command-line arguments
nor environment variables are provided.
"""

# Server configuration defaults
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_AUTH_TOKEN = ""
DEFAULT_LOCATION = ""

# Instance configuration defaults
DEFAULT_INSTANCE_ID_PREFIX = "uptime-probe-"

# Check configuration defaults
DEFAULT_HTTP_TIMEOUT_MS = 10000
DEFAULT_SSL_EXPIRY_THRESHOLD_DAYS = 30
DEFAULT_USER_AGENT = "uptime-probe/1.0"

# Fixed check parameters
DEFAULT_TLS_PORT = 443
MIN_SSL_CHECK_TIMEOUT_MS = 1000

# Location detection
CF_TRACE_URL = "https://cloudflare.com/cdn-cgi/trace"
IP_API_URL = "https://ipapi.co/json/"
CF_TRACE_TIMEOUT_S = 3
IP_API_TIMEOUT_S = 5
UNKNOWN_LOCATION = "UNKNOWN"

# Logging configuration defaults
DEFAULT_LOGGING_TYPE = "prod"
DEFAULT_LOGGING_CONFIG_FILE = ""

# Service description
SERVICE_NAME = "Uptime Probe"
SERVICE_VERSION = "1.0.0"
SERVICE_DOCS_URL = "https://github.com/uptime-probe/uptime-probe"
