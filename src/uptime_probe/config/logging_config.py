"""
Logging configuration module for the uptime probe.

This module provides functionality to configure logging for the application
based on the provided configuration context. It supports different logging
configurations for development, production, and custom environments.
"""

import json
import logging.config
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Union

from uptime_probe.config.probe_context import ProbeContext

# Logging types served by the JSON files packaged next to this module
BUILTIN_CONFIGS: Dict[str, str] = {
    "dev": "logging-config-dev.json",
    "prod": "logging-config-prod.json",
}


def configure_logging(context: ProbeContext) -> None:
    """
    Configure logging for the application based on the provided configuration.

    This function sets up logging based on the logging type specified in the
    configuration context. It supports three types of logging configurations:
    - dev: Human readable console output at DEBUG level
    - prod: One JSON-like line per record at INFO level
    - custom: Custom logging configuration from a specified file

    It also adds an instance ID filter to all log records to identify which probe
    instance generated the log.

    Args:
        context: Configuration context containing logging settings.

    Raises:
        ValueError: If the logging type is invalid or if a custom logging
            configuration file is not provided when using the 'custom' type.
        RuntimeError: If the selected configuration cannot be loaded.
    """
    logging_type: str = context.logging_type.lower()
    if not logging_type:
        raise ValueError("Logging type must be provided.")
    elif logging_type in BUILTIN_CONFIGS:
        _load_logging_config(_packaged_config_path(BUILTIN_CONFIGS[logging_type]))
    elif logging_type == "custom":
        if not context.logging_config_file:
            raise ValueError("Custom logging configuration file must be provided.")
        _load_logging_config(context.logging_config_file)
    else:
        raise ValueError(
            f"Invalid logging type: {context.logging_type}. Allowed values are: dev, prod, custom"
        )

    # The filter goes on the handlers: filters on a logger do not apply to
    # records propagated from child loggers.
    instance_filter = _InstanceIdFilter(instance_id=context.instance_id)
    for handler in logging.getLogger().handlers:
        handler.addFilter(instance_filter)

    logging.debug("Logging configured and InstanceIdFilter added.")


def _load_logging_config(config_file: Union[str, Path]) -> None:
    """
    Apply a JSON dictConfig document.

    Reading, decoding and applying are reported separately, each as a
    RuntimeError naming the file.

    Args:
        config_file: Path to the JSON file containing logging configuration.

    Raises:
        RuntimeError: If the file cannot be read, is not valid JSON, or is
            rejected by logging.config.dictConfig.
    """
    path = Path(config_file)
    try:
        document = path.read_text(encoding="utf-8")
    except FileNotFoundError as err:
        raise RuntimeError(f"Logging config file not found: {path}") from err
    except OSError as err:
        raise RuntimeError(f"Cannot read logging config file {path}: {err}") from err

    try:
        config: Dict[str, Any] = json.loads(document)
    except json.JSONDecodeError as err:
        raise RuntimeError(
            f"Invalid JSON format in logging config file: {path} (line {err.lineno})"
        ) from err

    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError, AttributeError, ImportError) as err:
        raise RuntimeError(f"Error loading logging config {path}: {err}") from err


def _packaged_config_path(file_name: str) -> Path:
    """Locates a logging configuration shipped as package data of uptime_probe.config."""
    return Path(str(resources.files("uptime_probe.config").joinpath(file_name)))


class _InstanceIdFilter(logging.Filter):
    """
    A logging filter that injects the instance ID into every log record.

    This filter adds an 'instance_id' attribute to each log record, which can
    be used in log formatters to identify which probe instance generated the log.
    """

    def __init__(self, instance_id: str) -> None:
        """
        Initialize the filter with an instance ID.

        Args:
            instance_id: The unique identifier of the probe instance.
        """
        super().__init__()
        self._instance_id: str = instance_id

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add the instance ID to the log record.

        Args:
            record: The log record to be processed.

        Returns:
            bool: Always True to allow the record to be processed further.
        """
        record.instance_id = self._instance_id
        return True
