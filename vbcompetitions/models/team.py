"""Team data model."""

import re
from typing import Optional

from pydantic import BaseModel

from vbcompetitions import config
from vbcompetitions.exceptions import InvalidIDError

# ASCII printable, excluding the characters used by the team reference grammar
ID_PATTERN = re.compile(r'^((?![":{}?=])[\x20-\x7F])+$')


def check_id(value: str, kind: str) -> str:
    """Check an ID is usable for a team or stage.

    Args:
        value: The ID to check
        kind: What the ID identifies, for the error message (e.g. "team")

    Returns:
        The ID, unchanged

    Raises:
        InvalidIDError: If the ID is too long, too short, or uses reserved characters
    """
    if len(value) < 1 or len(value) > config.MAX_ID_LENGTH:
        raise InvalidIDError(f"Invalid {kind} ID: must be between 1 and {config.MAX_ID_LENGTH} characters long")
    if not ID_PATTERN.match(value):
        raise InvalidIDError(
            f'Invalid {kind} ID: must contain only ASCII printable characters excluding " : {{ }} ? ='
        )
    return value


class CompetitionTeam(BaseModel):
    """A team entered into a competition."""

    id: str
    name: str
    club: Optional[str] = None
    notes: Optional[str] = None
    contacts: list[dict] = []

    @property
    def is_unknown(self) -> bool:
        """Whether this is the sentinel for a team that cannot be resolved yet."""
        return self.id == config.UNKNOWN_TEAM_ID

    def serialize(self) -> dict:
        team = {"id": self.id, "name": self.name}
        if self.club is not None:
            team["club"] = self.club
        if self.notes is not None:
            team["notes"] = self.notes
        if self.contacts:
            team["contacts"] = self.contacts
        return team


def unknown_team() -> CompetitionTeam:
    """Build the sentinel team returned for unresolved references."""
    return CompetitionTeam(id=config.UNKNOWN_TEAM_ID, name=config.UNKNOWN_TEAM_NAME)
