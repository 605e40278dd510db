"""
Matches and breaks within a group.

A GroupMatch holds the raw data for a match and the outcome derived from it.
The outcome is recalculated whenever scores change, and only committed once
the new scores have passed validation.
"""

import logging
from typing import TYPE_CHECKING, Optional, Sequence, Union

from vbcompetitions.exceptions import InvalidMatchError, MatchStateError, ScoreError
from vbcompetitions.models.document import ManagerDocument, MatchTeamDocument, OfficialsDocument
from vbcompetitions.models.outcome import (
    MatchOutcome,
    MatchType,
    assert_continuous_scores_valid,
    assert_set_scores_valid,
    calculate_outcome,
)

if TYPE_CHECKING:
    from vbcompetitions.models.group import Group

logger = logging.getLogger(__name__)


class MatchTeam(MatchTeamDocument):
    """One side of a match: a team ID or reference plus its scores."""

    def serialize(self) -> dict:
        team = {
            "id": self.id,
            "scores": list(self.scores),
            "forfeit": self.forfeit,
            "bonusPoints": self.bonus_points,
            "penaltyPoints": self.penalty_points,
        }
        if self.mvp is not None:
            team["mvp"] = self.mvp
        if self.players:
            team["players"] = list(self.players)
        if self.notes is not None:
            team["notes"] = self.notes
        return team


class MatchOfficials(OfficialsDocument):
    """Officials for a match, either a team or named people."""

    @property
    def is_team(self) -> bool:
        return self.team is not None

    def serialize(self) -> dict:
        if self.is_team:
            return {"team": self.team}
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"team"})


class MatchManager(ManagerDocument):
    """A court manager given as a team ID or reference."""


class GroupBreak:
    """A break in play, listed among a group's matches."""

    def __init__(
        self,
        group: "Group",
        start: Optional[str] = None,
        date: Optional[str] = None,
        duration: Optional[str] = None,
        name: Optional[str] = None,
    ):
        self.group = group
        self.start = start
        self.date = date
        self.duration = duration
        self.name = name

    def serialize(self) -> dict:
        entry = {"type": "break"}
        for key in ("start", "date", "duration", "name"):
            value = getattr(self, key)
            if value is not None:
                entry[key] = value
        return entry

    def __repr__(self) -> str:
        return f"GroupBreak(name={self.name!r}, date={self.date!r}, start={self.start!r})"


class GroupMatch:
    """
    A match between two teams in a group.

    The match ID is fixed at construction. Scores are changed through
    set_scores(), which recalculates the outcome and tells the competition
    that any derived state it holds is stale.
    """

    def __init__(
        self,
        group: "Group",
        match_id: str,
        home_team: MatchTeam,
        away_team: MatchTeam,
        complete: Optional[bool] = None,
        court: Optional[str] = None,
        venue: Optional[str] = None,
        date: Optional[str] = None,
        warmup: Optional[str] = None,
        start: Optional[str] = None,
        duration: Optional[str] = None,
        officials: Optional[MatchOfficials] = None,
        mvp: Optional[str] = None,
        manager: Optional[Union[MatchManager, str]] = None,
        friendly: bool = False,
        notes: Optional[str] = None,
    ):
        """
        Create a match.

        Raises:
            InvalidMatchError: If a continuous match has no completeness flag,
                or the officiating team is one of the playing teams
            ScoreError: If the scores are invalid for the group
        """
        self._id = match_id
        self._group = group
        self.home_team = home_team
        self.away_team = away_team
        self.complete = complete
        self.court = court
        self.venue = venue
        self.date = date
        self.warmup = warmup
        self.start = start
        self.duration = duration
        self.officials = officials
        self.mvp = mvp
        self.manager = manager
        self.friendly = friendly
        self.notes = notes

        if group.match_type == MatchType.CONTINUOUS and complete is None:
            raise InvalidMatchError(
                f'Group {{{group.stage.id}:{group.id}}}, match ID {{{match_id}}}, missing field "complete"'
            )

        if officials is not None and officials.is_team and officials.team in (home_team.id, away_team.id):
            raise InvalidMatchError(
                f"Refereeing team (in match {self.location}) cannot be the same as one of the playing teams"
            )

        self._outcome = self._calculate(home_team.scores, away_team.scores, complete)

    @property
    def id(self) -> str:
        return self._id

    @property
    def group(self) -> "Group":
        return self._group

    @property
    def location(self) -> str:
        """The match coordinates as "{stage:group:match}"."""
        return f"{{{self._group.stage.id}:{self._group.id}:{self._id}}}"

    @property
    def outcome(self) -> MatchOutcome:
        return self._outcome

    # -------------------------------------------------------------------------
    # Presence checks
    # -------------------------------------------------------------------------

    @property
    def has_court(self) -> bool:
        return self.court is not None

    @property
    def has_venue(self) -> bool:
        return self.venue is not None

    @property
    def has_date(self) -> bool:
        return self.date is not None

    @property
    def has_warmup(self) -> bool:
        return self.warmup is not None

    @property
    def has_start(self) -> bool:
        return self.start is not None

    @property
    def has_duration(self) -> bool:
        return self.duration is not None

    @property
    def has_officials(self) -> bool:
        return self.officials is not None

    @property
    def has_mvp(self) -> bool:
        return self.mvp is not None

    @property
    def has_manager(self) -> bool:
        return self.manager is not None

    @property
    def has_notes(self) -> bool:
        return self.notes is not None

    @property
    def manager_team_id(self) -> Optional[str]:
        """The managing team's ID or reference, if the manager is a team."""
        if isinstance(self.manager, MatchManager):
            return self.manager.team
        return None

    # -------------------------------------------------------------------------
    # Outcome
    # -------------------------------------------------------------------------

    def is_complete(self) -> bool:
        return self._outcome.is_complete

    def is_draw(self) -> bool:
        return self._outcome.is_draw

    def get_winner_team_id(self) -> str:
        """
        Get the winning team's ID (or reference, as written in the match).

        Raises:
            MatchStateError: If the match is incomplete or drawn
        """
        if not self._outcome.is_complete:
            raise MatchStateError("Match incomplete, there is no winner")
        if self._outcome.is_draw:
            raise MatchStateError("Match drawn, there is no winner")
        return self._outcome.winner_team_id

    def get_loser_team_id(self) -> str:
        """
        Get the losing team's ID (or reference, as written in the match).

        Raises:
            MatchStateError: If the match is incomplete or drawn
        """
        if not self._outcome.is_complete:
            raise MatchStateError("Match incomplete, there is no loser")
        if self._outcome.is_draw:
            raise MatchStateError("Match drawn, there is no loser")
        return self._outcome.loser_team_id

    def get_home_team_sets(self) -> int:
        if self._group.match_type == MatchType.CONTINUOUS:
            raise MatchStateError("Match has no sets because the match type is continuous")
        return self._outcome.home_sets

    def get_away_team_sets(self) -> int:
        if self._group.match_type == MatchType.CONTINUOUS:
            raise MatchStateError("Match has no sets because the match type is continuous")
        return self._outcome.away_sets

    def set_scores(
        self,
        home_scores: Sequence[int],
        away_scores: Sequence[int],
        complete: Optional[bool] = None,
    ) -> "GroupMatch":
        """
        Replace the scores for the match.

        The new scores are checked and the outcome recalculated before anything
        is changed, so a failed call leaves the match as it was.

        Args:
            home_scores: Home team scores, one per set, or a single total
            away_scores: Away team scores
            complete: Whether the match is complete. Required for continuous
                matches and for sets matches with a duration

        Returns:
            This match

        Raises:
            ScoreError: If the scores are invalid or completeness is missing
        """
        group = self._group
        if group.match_type == MatchType.CONTINUOUS:
            if complete is None:
                raise ScoreError("Invalid score: match type is continuous, but the match completeness is not set")
            if complete:
                assert_continuous_scores_valid(home_scores, away_scores, group.draws_allowed)
        else:
            assert_set_scores_valid(home_scores, away_scores, group.set_config)
            if self.has_duration and complete is None:
                raise ScoreError(
                    "Invalid score: match has a duration, but the match completeness is not set"
                )

        new_complete = complete if complete is not None else self.complete
        outcome = self._calculate(home_scores, away_scores, new_complete)

        self.home_team = self.home_team.model_copy(update={"scores": list(home_scores)})
        self.away_team = self.away_team.model_copy(update={"scores": list(away_scores)})
        self.complete = new_complete
        self._outcome = outcome
        logger.debug(f"Scores set for match {self.location}: {list(home_scores)} v {list(away_scores)}")

        group.competition.invalidate_caches()
        return self

    def _calculate(
        self,
        home_scores: Sequence[int],
        away_scores: Sequence[int],
        complete: Optional[bool],
    ) -> MatchOutcome:
        return calculate_outcome(
            home_team_id=self.home_team.id,
            away_team_id=self.away_team.id,
            home_scores=home_scores,
            away_scores=away_scores,
            match_type=self._group.match_type,
            set_config=self._group.set_config,
            complete=complete,
            has_duration=self.has_duration,
            draws_allowed=self._group.draws_allowed,
            location=self.location,
        )

    def serialize(self) -> dict:
        match = {"type": "match", "id": self._id}
        for key in ("court", "venue", "date", "warmup", "start", "duration", "complete"):
            value = getattr(self, key)
            if value is not None:
                match[key] = value
        match["homeTeam"] = self.home_team.serialize()
        match["awayTeam"] = self.away_team.serialize()
        if self.officials is not None:
            match["officials"] = self.officials.serialize()
        if self.mvp is not None:
            match["mvp"] = self.mvp
        if isinstance(self.manager, MatchManager):
            match["manager"] = {"team": self.manager.team}
        elif self.manager is not None:
            match["manager"] = self.manager
        if self.friendly:
            match["friendly"] = True
        if self.notes is not None:
            match["notes"] = self.notes
        return match

    def __repr__(self) -> str:
        return f"GroupMatch(location={self.location!r}, home={self.home_team.id!r}, away={self.away_team.id!r})"
