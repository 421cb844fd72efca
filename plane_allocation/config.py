"""Default configuration for the plane allocation simulator."""

import logging

# World configuration
DEFAULT_WIDTH = 1000
DEFAULT_HEIGHT = 1000
DEFAULT_DURATION = 3600 * 24 * 30  # seconds

# Plane configuration
DEFAULT_SPEED = 1.0  # distance units per tick
DEFAULT_COMMUNICATION_RANGE = 500.0

# Allocation configuration
PERSISTENT_ROUTES = False

# Logging
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING"):
    """Configure root logging for scripts and the command line interface."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), format=LOG_FORMAT)
