"""Entry point for the geolocate command."""

import asyncio
import logging
import sys

from geolocate.cli import parse_args, run
from geolocate.config import Settings
from geolocate.logging_config import configure_logging

# Configure logging early
configure_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the geolocate command."""
    try:
        settings = Settings.from_env()
    except ValueError as e:
        # Invalid environment configuration
        logger.debug("Configuration error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    args = parse_args(argv, settings)

    try:
        return asyncio.run(run(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
