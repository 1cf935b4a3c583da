"""Logging configuration for the geolocate command line tool."""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = "WARNING"


def configure_logging(default_level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure application-wide logging.

    Respects GEOLOCATE_LOG_LEVEL environment variable (default: WARNING).
    Unknown level names fall back to ``default_level``.
    Logs go to stderr with timestamp, level, module name, and message, so
    they never interleave with the progress output on stdout.

    Environment Variables:
        GEOLOCATE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                             Default is WARNING.

    Examples:
        # Default: only problems are logged
        $ geolocate 8.8.8.8

        # Follow every status fetch
        $ GEOLOCATE_LOG_LEVEL=DEBUG geolocate 8.8.8.8

        # Phase transitions and winners
        $ GEOLOCATE_LOG_LEVEL=INFO geolocate 8.8.8.8
    """
    log_level_str = os.environ.get("GEOLOCATE_LOG_LEVEL", default_level).upper()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    log_level = log_level_map.get(
        log_level_str, log_level_map.get(default_level.upper(), logging.WARNING)
    )

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,  # Override any existing configuration
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured: level=%s", logging.getLevelName(log_level))
