"""
League standings calculation.

Accumulates each team's record from the completed, non-friendly matches in a
league and ranks the teams using the league's configured ordering keys.
"""

import locale
import logging
from functools import cmp_to_key
from typing import TYPE_CHECKING, Callable

from vbcompetitions.models.league_table import LeagueTable, LeagueTableEntry
from vbcompetitions.models.match import GroupMatch
from vbcompetitions.models.outcome import MatchType

if TYPE_CHECKING:
    from vbcompetitions.models.group import League

logger = logging.getLogger(__name__)

Comparator = Callable[[LeagueTableEntry, LeagueTableEntry], int]


def _compare_head_to_head(a: LeagueTableEntry, b: LeagueTableEntry) -> int:
    # No opinion unless the two teams have both recorded a meeting
    if b.team_id not in a.h2h or a.team_id not in b.h2h:
        return 0
    return b.h2h[a.team_id] - a.h2h[b.team_id]


# Negative means a ranks above b
COMPARATORS: dict[str, Comparator] = {
    "PTS": lambda a, b: b.pts - a.pts,
    "WINS": lambda a, b: b.wins - a.wins,
    "LOSSES": lambda a, b: a.losses - b.losses,
    "H2H": _compare_head_to_head,
    "PF": lambda a, b: b.pf - a.pf,
    "PA": lambda a, b: a.pa - b.pa,
    "PD": lambda a, b: b.pd - a.pd,
    "SF": lambda a, b: b.sf - a.sf,
    "SA": lambda a, b: a.sa - b.sa,
    "SD": lambda a, b: b.sd - a.sd,
    "BP": lambda a, b: b.bp - a.bp,
    "PP": lambda a, b: a.pp - b.pp,
}


class StandingsCalculator:
    """Builds the league table for a League group."""

    def __init__(self, league: "League"):
        self.league = league
        self.config = league.league_config

    def build_table(self) -> LeagueTable:
        """
        Build and rank the league table.

        Returns:
            A LeagueTable with one entry per team that has a non-friendly match
        """
        entries: dict[str, LeagueTableEntry] = {}
        for match in self.league.entries:
            if not isinstance(match, GroupMatch) or match.friendly:
                continue
            home = self._entry(entries, match.home_team.id)
            away = self._entry(entries, match.away_team.id)
            if match.is_complete():
                self._add_result(match, home, away, entries)

        points_for_playing = self.config.points.played
        for entry in entries.values():
            entry.pd = entry.pf - entry.pa
            entry.sd = entry.sf - entry.sa
            entry.pts += entry.played * points_for_playing + entry.bp - entry.pp

        table = LeagueTable(self.league, self.sort_entries(list(entries.values())))
        logger.info(f"League table built for {{{self.league.key}}} with {len(table.entries)} teams")
        return table

    def sort_entries(self, entries: list[LeagueTableEntry]) -> list[LeagueTableEntry]:
        """Rank entries by the configured ordering, then by team name."""
        return sorted(entries, key=cmp_to_key(self.compare))

    def compare(self, a: LeagueTableEntry, b: LeagueTableEntry) -> int:
        for key in self.config.ordering:
            result = COMPARATORS[key](a, b)
            if result != 0:
                return result
        return locale.strcoll(a.team, b.team)

    def _entry(self, entries: dict[str, LeagueTableEntry], team_id: str) -> LeagueTableEntry:
        if team_id not in entries:
            name = self.league.competition.get_team(team_id).name
            entries[team_id] = LeagueTableEntry(team_id=team_id, team=name)
        return entries[team_id]

    def _add_result(
        self,
        match: GroupMatch,
        home: LeagueTableEntry,
        away: LeagueTableEntry,
        entries: dict[str, LeagueTableEntry],
    ) -> None:
        points = self.config.points
        winner = loser = None
        if match.is_draw():
            home.h2h.setdefault(away.team_id, 0)
            away.h2h.setdefault(home.team_id, 0)
            home.draws += 1
            away.draws += 1
        else:
            winner = entries[match.get_winner_team_id()]
            loser = entries[match.get_loser_team_id()]
            winner.wins += 1
            loser.losses += 1
            winner.h2h[loser.team_id] = winner.h2h.get(loser.team_id, 0) + 1
            loser.h2h[winner.team_id] = loser.h2h.get(winner.team_id, 0) - 1

        home.played += 1
        away.played += 1

        home_scores = match.home_team.scores
        away_scores = match.away_team.scores
        if self.league.match_type == MatchType.SETS:
            min_points = self.league.set_config.min_points
            home_sets = 0
            away_sets = 0
            for home_score, away_score in zip(home_scores, away_scores):
                if home_score < min_points and away_score < min_points:
                    continue
                home.pf += home_score
                home.pa += away_score
                away.pf += away_score
                away.pa += home_score
                if home_score > away_score:
                    home_sets += 1
                elif home_score < away_score:
                    away_sets += 1
            home.sf += home_sets
            home.sa += away_sets
            away.sf += away_sets
            away.sa += home_sets
            home.pts += points.per_set * home_sets
            away.pts += points.per_set * away_sets
            if winner is not None:
                if abs(home_sets - away_sets) == 1:
                    winner.pts += points.win_by_one
                    loser.pts += points.lose_by_one
                else:
                    winner.pts += points.win
                    loser.pts += points.lose
        else:
            home.pf += home_scores[0]
            home.pa += away_scores[0]
            away.pf += away_scores[0]
            away.pa += home_scores[0]
            if winner is not None:
                winner.pts += points.win
                loser.pts += points.lose

        if match.home_team.forfeit:
            home.pts -= points.forfeit
        if match.away_team.forfeit:
            away.pts -= points.forfeit
        home.bp += match.home_team.bonus_points
        home.pp += match.home_team.penalty_points
        away.bp += match.away_team.bonus_points
        away.pp += match.away_team.penalty_points
