"""
Library configuration.

Loads settings from environment variables with sensible defaults.
"""

import os
from functools import lru_cache

from pydantic import BaseModel


def _get_int(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes')


def _get_str(key: str, default: str) -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


# =============================================================================
# DOCUMENT SETTINGS
# =============================================================================
# Only this document version can be loaded; documents without a version are
# assumed to be at this version
SUPPORTED_VERSION = '1.0.0'

# =============================================================================
# TEAMS
# =============================================================================
# Sentinel team returned when a reference cannot (yet) be resolved
UNKNOWN_TEAM_ID = 'UNKNOWN'
UNKNOWN_TEAM_NAME = 'UNKNOWN'

MAX_ID_LENGTH = 100
MAX_NAME_LENGTH = 1000

# =============================================================================
# MATCH ORDERING
# =============================================================================
# Matches and breaks without a date or start time sort as if they had these
DEFAULT_MATCH_DATE = '2023-02-12'
DEFAULT_MATCH_START = '10:00'


# =============================================================================
# ENVIRONMENT SETTINGS
# =============================================================================
class Settings(BaseModel):
    """Snapshot of the environment-driven settings."""

    LOG_LEVEL: str = 'WARNING'
    # Whether team references are checked strictly as matches are loaded
    VALIDATE_REFERENCES: bool = True
    # Width of the team name column when the CLI prints a league table
    TABLE_NAME_WIDTH: int = 24


@lru_cache
def get_settings() -> Settings:
    """Get the settings, read once from the environment."""
    return Settings(
        LOG_LEVEL=_get_str('VBC_LOG_LEVEL', 'WARNING'),
        VALIDATE_REFERENCES=_get_bool('VBC_VALIDATE_REFERENCES', True),
        TABLE_NAME_WIDTH=_get_int('VBC_TABLE_NAME_WIDTH', 24),
    )
