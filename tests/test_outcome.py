"""Tests for match outcome calculation."""

import pytest

from vbcompetitions.exceptions import MatchStateError, ScoreError
from vbcompetitions.models.group_config import SetConfig
from vbcompetitions.models.match import GroupMatch
from vbcompetitions.models.outcome import (
    MatchType,
    assert_continuous_scores_valid,
    assert_set_scores_valid,
    calculate_outcome,
    is_set_complete,
)


def _outcome(home, away, match_type=MatchType.SETS, set_config=None, complete=None,
             has_duration=False, draws_allowed=False):
    return calculate_outcome(
        home_team_id='H',
        away_team_id='A',
        home_scores=home,
        away_scores=away,
        match_type=match_type,
        set_config=set_config,
        complete=complete,
        has_duration=has_duration,
        draws_allowed=draws_allowed,
        location='{S:G:M}',
    )


@pytest.fixture
def best_of_three() -> SetConfig:
    """Provide a best-of-three set configuration."""
    return SetConfig(max_sets=3, sets_to_win=2, points_to_win=25, last_set_points_to_win=15)


class TestSetsOutcome:
    """Tests for matches played in sets."""

    def test_three_set_home_win(self, best_of_three):
        """25-20, 20-25, 15-10 is a 2-1 home win."""
        outcome = _outcome([25, 20, 15], [20, 25, 10], set_config=best_of_three)

        assert outcome.home_sets == 2
        assert outcome.away_sets == 1
        assert outcome.is_complete is True
        assert outcome.winner_team_id == 'H'
        assert outcome.loser_team_id == 'A'

    def test_straight_sets_away_win(self, best_of_three):
        """Two sets to the away team completes the match."""
        outcome = _outcome([20, 18], [25, 25], set_config=best_of_three)

        assert outcome.is_complete is True
        assert outcome.winner_team_id == 'A'
        assert outcome.home_sets == 0
        assert outcome.away_sets == 2

    def test_in_progress_set_not_counted(self, best_of_three):
        """A set still in play does not count towards sets won."""
        outcome = _outcome([25, 10], [20, 8], set_config=best_of_three)

        assert outcome.is_complete is False
        assert outcome.home_sets == 1
        assert outcome.away_sets == 0
        assert outcome.winner_team_id is None

    def test_explicit_complete_counts_every_set(self, best_of_three):
        """With complete set, unfinished sets are still given to the leader."""
        outcome = _outcome([25, 10], [20, 8], set_config=best_of_three, complete=True)

        assert outcome.is_complete is True
        assert outcome.home_sets == 2
        assert outcome.winner_team_id == 'H'

    def test_sets_below_min_points_ignored(self):
        """Sets where neither side reaches the minimum points are skipped."""
        config = SetConfig(max_sets=3, sets_to_win=2, min_points=5)
        outcome = _outcome([25, 3, 0], [20, 2, 0], set_config=config)

        assert outcome.home_sets == 1
        assert outcome.away_sets == 0
        assert outcome.is_complete is False

    def test_duration_stops_auto_completion(self, best_of_three):
        """A timed match is not completed by reaching the sets to win."""
        outcome = _outcome([25, 25], [20, 20], set_config=best_of_three, has_duration=True)

        assert outcome.is_complete is False
        assert outcome.home_sets == 2

    def test_timed_match_drawn_on_sets(self):
        """A timed match completed level on sets is a draw where draws are allowed."""
        config = SetConfig(max_sets=4, sets_to_win=3)
        outcome = _outcome([25, 20], [20, 25], set_config=config, complete=True,
                           has_duration=True, draws_allowed=True)

        assert outcome.is_complete is True
        assert outcome.is_draw is True
        assert outcome.winner_team_id is None

    def test_draw_not_allowed_raises(self):
        """A completed level match in a no-draws group is rejected."""
        config = SetConfig(max_sets=4, sets_to_win=3)

        with pytest.raises(ScoreError, match="draws are not allowed"):
            _outcome([25, 20], [20, 25], set_config=config, complete=True, has_duration=True)

    def test_default_set_config(self):
        """Sets matches without a set configuration use best of five."""
        outcome = _outcome([25, 25, 25], [20, 20, 20])

        assert outcome.is_complete is True
        assert outcome.home_sets == 3

    def test_length_mismatch_raises(self, best_of_three):
        """Home and away scores must have the same length."""
        with pytest.raises(ScoreError, match="different length"):
            _outcome([25, 25], [20], set_config=best_of_three)

    def test_too_many_sets_raises(self, best_of_three):
        """Scores cannot have more sets than the maximum."""
        with pytest.raises(ScoreError, match="more sets than the maximum"):
            _outcome([25, 20, 15, 15], [20, 25, 10, 10], set_config=best_of_three)

    def test_sets_never_exceed_max_sets(self, best_of_three):
        """Sets won by both teams never add up to more than the maximum."""
        outcome = _outcome([25, 20, 15], [20, 25, 10], set_config=best_of_three)

        assert outcome.home_sets + outcome.away_sets <= best_of_three.max_sets


class TestContinuousOutcome:
    """Tests for continuous-scoring matches."""

    def test_home_win(self):
        """The higher score wins a completed match."""
        outcome = _outcome([30], [20], match_type=MatchType.CONTINUOUS, complete=True)

        assert outcome.is_complete is True
        assert outcome.winner_team_id == 'H'

    def test_incomplete_has_no_winner(self):
        """A match not marked complete has no winner."""
        outcome = _outcome([30], [20], match_type=MatchType.CONTINUOUS, complete=False)

        assert outcome.is_complete is False
        assert outcome.has_winner is False

    def test_nil_nil_is_undetermined(self):
        """0-0 is undetermined even when marked complete."""
        outcome = _outcome([0], [0], match_type=MatchType.CONTINUOUS, complete=True)

        assert outcome.is_complete is False
        assert outcome.is_draw is False
        assert outcome.winner_team_id is None

    def test_no_scores_is_undetermined(self):
        """A match without scores is undetermined."""
        outcome = _outcome([], [], match_type=MatchType.CONTINUOUS, complete=True)

        assert outcome.is_complete is False

    def test_draw_allowed(self):
        """Level scores give a draw where draws are allowed."""
        outcome = _outcome([21], [21], match_type=MatchType.CONTINUOUS, complete=True, draws_allowed=True)

        assert outcome.is_complete is True
        assert outcome.is_draw is True

    def test_draw_not_allowed_raises(self):
        """Level scores are rejected where draws are not allowed."""
        with pytest.raises(ScoreError, match="scores show a draw but draws are not allowed"):
            _outcome([21], [21], match_type=MatchType.CONTINUOUS, complete=True)

    def test_more_than_one_score_raises(self):
        """Continuous matches have a single score per team."""
        with pytest.raises(ScoreError, match="score length is greater than one"):
            _outcome([10, 10], [5, 5], match_type=MatchType.CONTINUOUS, complete=True)


class TestSetRules:
    """Tests for the set completion and score validation rules."""

    def test_set_complete_when_clear(self):
        """A set reaching the target with a clear margin is complete."""
        assert is_set_complete(0, 25, 23, SetConfig()) is True

    def test_set_incomplete_without_margin(self):
        """A set at the target without a clear margin is still in play."""
        assert is_set_complete(0, 25, 24, SetConfig()) is False

    def test_set_complete_at_max_points(self):
        """Reaching the points cap completes a set whatever the margin."""
        config = SetConfig(max_points=30)
        assert is_set_complete(0, 30, 29, config) is True

    def test_decider_uses_last_set_target(self):
        """The deciding set is played to the last set target."""
        config = SetConfig(max_sets=3, sets_to_win=2, last_set_points_to_win=15)

        assert is_set_complete(2, 15, 10, config) is True
        assert is_set_complete(1, 15, 10, config) is False

    def test_valid_scores_pass(self):
        """Scores following the set rules are accepted."""
        assert_set_scores_valid([25, 20, 15], [20, 25, 10], SetConfig(max_sets=3, sets_to_win=2))

    def test_scores_after_incomplete_set_raise(self):
        """No set may have points after a set that is still in play."""
        with pytest.raises(ScoreError, match="after an incomplete set"):
            assert_set_scores_valid([25, 10, 5], [20, 8, 3], SetConfig())

    def test_decider_won_by_too_much_raises(self):
        """A deciding set cannot run past the point where it was won."""
        config = SetConfig(max_sets=3, sets_to_win=2, last_set_points_to_win=15)

        with pytest.raises(ScoreError, match="home team scoring more points than necessary"):
            assert_set_scores_valid([25, 20, 25], [20, 25, 16], config)

    def test_decider_extended_by_two_passes(self):
        """A deciding set extended until a two point lead is valid."""
        config = SetConfig(max_sets=3, sets_to_win=2, last_set_points_to_win=15)
        assert_set_scores_valid([25, 20, 18], [20, 25, 16], config)

    def test_continuous_validation(self):
        """Continuous scores allow a single non-drawn score."""
        assert_continuous_scores_valid([10], [5], draws_allowed=False)

        with pytest.raises(ScoreError, match="draws not allowed"):
            assert_continuous_scores_valid([5], [5], draws_allowed=False)


class TestMatchOutcomeAccessors:
    """Tests for the outcome accessors on a loaded match."""

    def test_winner_of_nil_nil_match_raises(self, staged_competition):
        """Asking for the winner of a 0-0 match reports it incomplete."""
        match = staged_competition.get_stage('F').get_group('F1').get_match('FIN')
        match.set_scores([0], [0], complete=True)

        with pytest.raises(MatchStateError, match="Match incomplete"):
            match.get_winner_team_id()

    def test_sets_unavailable_for_continuous(self, staged_competition):
        """Continuous matches have no sets."""
        match = staged_competition.get_stage('P').get_group('A').get_match('PA1')

        with pytest.raises(MatchStateError, match="continuous"):
            match.get_home_team_sets()

    def test_winner_loser_and_sets(self, league_competition):
        """A decided match reports its winner, loser and sets."""
        group = league_competition.get_stage('L').get_group('RL')
        match = group.get_match('RLM1')
        assert match.get_winner_team_id() == 'TB'
        assert match.get_loser_team_id() == 'TA'
        assert match.get_home_team_sets() == 0
        assert match.get_away_team_sets() == 2

    def test_complete_matches_have_winner_or_draw(self, league_competition):
        """Every complete match has exactly one of a winner or a draw."""
        for group in league_competition.get_stage('L').groups:
            for match in group.get_matches():
                if not isinstance(match, GroupMatch) or not match.is_complete():
                    continue
                assert match.outcome.has_winner != match.is_draw()
                if match.is_draw():
                    assert group.draws_allowed
