"""
Match outcome calculation.

Works out, from a match's configuration and raw scores, whether the match is
complete, who won, and how many sets each side took. Everything here is pure:
the caller decides whether to commit the returned MatchOutcome.
"""

from enum import Enum
from typing import Optional, Sequence

from pydantic import BaseModel

from vbcompetitions.exceptions import ScoreError
from vbcompetitions.models.group_config import SetConfig


class MatchType(str, Enum):
    """How a match is scored."""

    CONTINUOUS = "continuous"
    SETS = "sets"


class MatchOutcome(BaseModel):
    """Derived result of a match."""

    is_complete: bool = False
    is_draw: bool = False
    winner_team_id: Optional[str] = None
    loser_team_id: Optional[str] = None
    home_sets: int = 0
    away_sets: int = 0

    class Config:
        """Pydantic configuration."""

        frozen = True

    @property
    def has_winner(self) -> bool:
        return self.is_complete and not self.is_draw and self.winner_team_id is not None


def is_set_complete(set_index: int, home_score: int, away_score: int, set_config: SetConfig) -> bool:
    """Work out whether a set is complete, using the decider rules for the last possible set."""
    if set_config.is_decider(set_index):
        points_to_win = set_config.last_set_points_to_win
        max_points = set_config.last_set_max_points
    else:
        points_to_win = set_config.points_to_win
        max_points = set_config.max_points

    has_enough_points = home_score >= points_to_win or away_score >= points_to_win
    is_clear = abs(home_score - away_score) >= set_config.clear_points
    has_scored_maximum = home_score == max_points or away_score == max_points
    return (has_enough_points and is_clear) or has_scored_maximum


def assert_set_scores_valid(
    home_scores: Sequence[int],
    away_scores: Sequence[int],
    set_config: SetConfig,
) -> None:
    """Check that set scores are structurally valid for the set configuration.

    Raises:
        ScoreError: If the arrays differ in length, hold too many sets, show a
            non-zero score after an incomplete set, or show a deciding set won
            by more than was needed
    """
    if len(home_scores) != len(away_scores):
        raise ScoreError("Invalid set scores: score arrays are different lengths")

    if len(home_scores) > set_config.max_sets:
        raise ScoreError("Invalid set scores: score arrays are longer than the maximum number of sets allowed")

    seen_incomplete_set = False
    for set_index, (home_score, away_score) in enumerate(zip(home_scores, away_scores)):
        if seen_incomplete_set and (home_score != 0 or away_score != 0):
            raise ScoreError("Invalid set scores: data contains non-zero scores for a set after an incomplete set")

        if set_config.is_decider(set_index):
            margin = abs(home_score - away_score)
            if margin > set_config.clear_points and min(home_score, away_score) > set_config.last_set_points_to_win:
                side = "home" if home_score > away_score else "away"
                raise ScoreError(
                    f"Invalid set scores: value for set score at index {set_index} shows {side} team "
                    f"scoring more points than necessary to win the set"
                )
        elif not is_set_complete(set_index, home_score, away_score, set_config):
            seen_incomplete_set = True


def assert_continuous_scores_valid(
    home_scores: Sequence[int],
    away_scores: Sequence[int],
    draws_allowed: bool,
) -> None:
    """Check that continuous scores are valid.

    Raises:
        ScoreError: If there is more than one score, or a non-zero draw where draws are not allowed
    """
    if len(home_scores) != len(away_scores):
        raise ScoreError("Invalid score: score arrays are different lengths")
    if len(home_scores) > 1:
        raise ScoreError("Invalid results: match type is continuous, but score length is greater than one")
    if home_scores and not draws_allowed and home_scores[0] == away_scores[0] and home_scores[0] != 0:
        raise ScoreError("Invalid score: draws not allowed in this group")


def calculate_outcome(
    home_team_id: str,
    away_team_id: str,
    home_scores: Sequence[int],
    away_scores: Sequence[int],
    match_type: MatchType,
    set_config: Optional[SetConfig],
    complete: Optional[bool],
    has_duration: bool,
    draws_allowed: bool,
    location: str,
) -> MatchOutcome:
    """Calculate the outcome of a match.

    Args:
        home_team_id: ID (or reference) of the home team
        away_team_id: ID (or reference) of the away team
        home_scores: Home team's scores, one per set (or a single total)
        away_scores: Away team's scores
        match_type: Continuous or sets
        set_config: Set configuration, required for sets matches
        complete: The explicit completeness flag, if the data gives one
        has_duration: Whether the match is capped by a duration rather than sets
        draws_allowed: Whether the owning group allows draws
        location: "{stage:group:match}" coordinates used in error messages

    Returns:
        A new MatchOutcome

    Raises:
        ScoreError: If the scores are invalid
    """
    if len(home_scores) != len(away_scores):
        raise ScoreError(f"Invalid match information for match {location}: team scores have different length")

    if match_type == MatchType.CONTINUOUS:
        return _continuous_outcome(
            home_team_id, away_team_id, home_scores, away_scores, bool(complete), draws_allowed, location
        )

    if set_config is None:
        set_config = SetConfig()
    if len(home_scores) > set_config.max_sets:
        raise ScoreError(
            f"Invalid match information (in match {location}): "
            f"team scores have more sets than the maximum allowed length"
        )
    return _sets_outcome(
        home_team_id, away_team_id, home_scores, away_scores, set_config,
        bool(complete), has_duration, draws_allowed, location,
    )


def _decide(
    home_team_id: str,
    away_team_id: str,
    home_value: int,
    away_value: int,
    draws_allowed: bool,
    location: str,
    **sets: int,
) -> MatchOutcome:
    """Build the outcome of a complete match from the deciding values."""
    if home_value > away_value:
        return MatchOutcome(is_complete=True, winner_team_id=home_team_id, loser_team_id=away_team_id, **sets)
    if home_value < away_value:
        return MatchOutcome(is_complete=True, winner_team_id=away_team_id, loser_team_id=home_team_id, **sets)
    if draws_allowed:
        return MatchOutcome(is_complete=True, is_draw=True, **sets)
    raise ScoreError(f"Invalid match information (in match {location}): scores show a draw but draws are not allowed")


def _continuous_outcome(
    home_team_id: str,
    away_team_id: str,
    home_scores: Sequence[int],
    away_scores: Sequence[int],
    complete: bool,
    draws_allowed: bool,
    location: str,
) -> MatchOutcome:
    if len(home_scores) > 1:
        raise ScoreError(
            f"Invalid match information (in match {location}): "
            f"match type is continuous, but score length is greater than one"
        )
    # No score yet, or 0-0: nothing can be decided, whatever the complete flag says
    if not home_scores or home_scores[0] + away_scores[0] == 0:
        return MatchOutcome()
    if not complete:
        return MatchOutcome()
    return _decide(home_team_id, away_team_id, home_scores[0], away_scores[0], draws_allowed, location)


def _sets_outcome(
    home_team_id: str,
    away_team_id: str,
    home_scores: Sequence[int],
    away_scores: Sequence[int],
    set_config: SetConfig,
    complete: bool,
    has_duration: bool,
    draws_allowed: bool,
    location: str,
) -> MatchOutcome:
    assert_set_scores_valid(home_scores, away_scores, set_config)

    home_sets = 0
    away_sets = 0
    for set_index, (home_score, away_score) in enumerate(zip(home_scores, away_scores)):
        if home_score < set_config.min_points and away_score < set_config.min_points:
            continue
        if complete or is_set_complete(set_index, home_score, away_score, set_config):
            if home_score > away_score:
                home_sets += 1
            elif home_score < away_score:
                away_sets += 1

    if not has_duration and (
        home_sets + away_sets == set_config.max_sets
        or home_sets >= set_config.sets_to_win
        or away_sets >= set_config.sets_to_win
    ):
        complete = True

    if not complete:
        return MatchOutcome(home_sets=home_sets, away_sets=away_sets)
    return _decide(
        home_team_id, away_team_id, home_sets, away_sets, draws_allowed, location,
        home_sets=home_sets, away_sets=away_sets,
    )
