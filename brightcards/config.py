"""
Runtime configuration.

Values come from environment variables, optionally loaded from a .env file.
Nothing here is cached: callers build a Database or SchedulerParameters from
these values and pass them explicitly.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from brightcards.fsrs.constants import R_TARGET
from brightcards.fsrs.database import Database
from brightcards.fsrs.errors import InvalidInputState
from brightcards.fsrs.parameters import SchedulerParameters, build_parameters

# Load environment
load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///brightcards.db"
DB_NAME = "brightcards"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_database_url() -> str:
    """
    Get the database URL from environment variables.

    Uses TEST_MODE to pick the test database: the database name in the URL
    is replaced with test_<name> (e.g. brightcards.db -> test_brightcards.db).

    Returns:
        SQLAlchemy connection string
    """
    url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    if is_test_mode() and f"test_{DB_NAME}" not in url:
        return url.replace(DB_NAME, f"test_{DB_NAME}")
    return url


def get_desired_retention() -> float:
    """Retention target from BRIGHTCARDS_DESIRED_RETENTION (default 0.9)."""
    raw = os.getenv("BRIGHTCARDS_DESIRED_RETENTION")
    if raw is None or raw.strip() == "":
        return R_TARGET
    try:
        return float(raw)
    except ValueError as exc:
        raise InvalidInputState(f"BRIGHTCARDS_DESIRED_RETENTION must be a number, got {raw!r}") from exc


def get_scheduler_parameters() -> SchedulerParameters:
    """Default weights with the configured retention target."""
    return build_parameters(desired_retention=get_desired_retention())


def open_database(db_url: str | None = None) -> Database:
    """
    Build a Database from configuration and make sure its tables exist.

    Args:
        db_url: Explicit URL (defaults to get_database_url())

    Returns:
        Initialized Database
    """
    db = Database(db_url or get_database_url())
    db.init_db()
    return db
