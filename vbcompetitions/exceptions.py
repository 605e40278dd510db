"""
Exceptions raised while loading, mutating and validating a competition.

These exceptions provide clear error categories:
- CompetitionError: Base exception for all competition errors
- DocumentError: Invalid JSON, unsupported version or schema failure
- TeamReferenceError: Malformed or dangling team references
- ScoreError: Scores that break the match or set rules
- DuplicateIDError: IDs that must be unique but are not
- InvalidIDError: IDs or names with a bad length or bad characters
- InvalidMatchError: Matches that are structurally wrong
- NotFoundError: Lookups by ID that find nothing
- MatchStateError: Results asked of a match that has none
"""

from typing import Optional


class CompetitionError(Exception):
    """Base exception for all competition errors."""
    pass


class DocumentError(CompetitionError):
    """The competition document could not be read."""
    pass


class TeamReferenceError(CompetitionError):
    """A team reference is malformed or cannot be resolved."""

    def __init__(
        self,
        message: str,
        match_id: Optional[str] = None,
        field: Optional[str] = None,
        fragment: Optional[str] = None,
        part: Optional[str] = None,
    ):
        super().__init__(message)
        self.match_id = match_id
        self.field = field
        self.fragment = fragment
        self.part = part  # which operand of a ternary, if any


class ReferenceSyntaxError(TeamReferenceError):
    """A team reference does not follow the reference grammar."""
    pass


class UnresolvedReferenceError(TeamReferenceError):
    """A team reference points at a stage, group, match or team that does not exist."""
    pass


class ScoreError(CompetitionError):
    """Scores are inconsistent with the match or set rules."""
    pass


class DuplicateIDError(CompetitionError):
    """An ID is already in use within its scope."""
    pass


class InvalidIDError(CompetitionError):
    """An ID or name has a bad length or contains bad characters."""
    pass


class InvalidMatchError(CompetitionError):
    """A match is structurally invalid."""
    pass


class NotFoundError(CompetitionError):
    """No entity exists with the requested ID."""
    pass


class MatchStateError(CompetitionError):
    """The match has no result of the requested kind."""
    pass
