"""
Application configuration and constants for the Fleet Inventory API Server.

This module centralizes environment-based configuration, resource limits,
regular expressions, seat layout defaults and other constants.

Configuration values can be overridden via environment variables.
"""

from os import environ


# ---------------------------------------------------------------------------
# Application metadata
# ---------------------------------------------------------------------------
API_TITLE = "Fleet Inventory API Server"
API_VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# PostgreSQL configuration
# ---------------------------------------------------------------------------
PSQL_DB_DRIVER = environ.get("PSQL_DB_DRIVER", "postgresql")
PSQL_DB_USERNAME = environ.get("PSQL_DB_USERNAME", "postgres")
PSQL_DB_PORT = environ.get("PSQL_DB_PORT", "5432")
PSQL_DB_PASSWORD = environ.get("PSQL_DB_PASSWORD", "password")
PSQL_DB_HOST = environ.get("PSQL_DB_HOST", "localhost")
PSQL_DB_NAME = environ.get("PSQL_DB_NAME", "postgres")


# ---------------------------------------------------------------------------
# OpenObserve configuration
# ---------------------------------------------------------------------------
OPENOBSERVE_PROTOCOL = environ.get("OPENOBSERVE_PROTOCOL", "http")
OPENOBSERVE_HOST = environ.get("OPENOBSERVE_HOST", "localhost")
OPENOBSERVE_PORT = environ.get("OPENOBSERVE_PORT", "5080")
OPENOBSERVE_USERNAME = environ.get("OPENOBSERVE_USERNAME", "admin@inventory.com")
OPENOBSERVE_PASSWORD = environ.get("OPENOBSERVE_PASSWORD", "password")
OPENOBSERVE_ORG = environ.get("OPENOBSERVE_ORG", "fleet")
OPENOBSERVE_STREAM = environ.get("OPENOBSERVE_STREAM", "fleet-inventory-server")
OPENOBSERVE_TIMEOUT = 5  # Seconds to wait for the log shipper


# ---------------------------------------------------------------------------
# Redis configuration
# ---------------------------------------------------------------------------
REDIS_HOST = environ.get("REDIS_HOST", "localhost")
REDIS_PORT = environ.get("REDIS_PORT", "6379")
REDIS_PASSWORD = environ.get("REDIS_PASSWORD", "password")


# ---------------------------------------------------------------------------
# Resource upper limits
# ---------------------------------------------------------------------------
MAX_EXECUTIVE_TOKENS = 5  # Maximum tokens per executive
MAX_TOKEN_VALIDITY = 7 * 24 * 60 * 60  # Token validity (in seconds, 7 days)


# ---------------------------------------------------------------------------
# Regex constants (input validation)
# ---------------------------------------------------------------------------
REGEX_SEAT_NUMBER = r"^[A-Za-z0-9][A-Za-z0-9-]{0,7}$"


# ---------------------------------------------------------------------------
# Bus diagram template limits
# ---------------------------------------------------------------------------
MAX_FLOORS = 2  # Single or double decker
MAX_ROWS_PER_FLOOR = 30
MAX_SEATS_PER_SIDE = 4
MAX_BUS_CAPACITY = 120


# ---------------------------------------------------------------------------
# Seat defaults
# ---------------------------------------------------------------------------
DEFAULT_RECLINEMENT_ANGLE = 120  # In degrees
DEFAULT_IS_ACTIVE = True
INITIAL_SEAT_NUMBER = 1
MAX_RECLINEMENT_ANGLE = 180

# Placeholder seat numbers used while renumbering, never matches REGEX_SEAT_NUMBER
TEMPORARY_SEAT_NUMBER_PREFIX = "#TMP-"


# ---------------------------------------------------------------------------
# Redis mutex lock constants
# ---------------------------------------------------------------------------
MUTEX_LOCK_TIMEOUT = 10  # Lock timeout (in seconds)
MUTEX_LOCK_MAX_WAIT_TIME = 60  # Max blocking wait time (in seconds)
