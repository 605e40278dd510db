"""Data models for volleyball competitions."""

from vbcompetitions.models.competition import Competition
from vbcompetitions.models.enums import GroupType, MatchFilter, TeamFilter
from vbcompetitions.models.group import Crossover, Group, Knockout, League
from vbcompetitions.models.group_config import KnockoutConfig, LeagueConfig, LeagueConfigPoints, SetConfig
from vbcompetitions.models.league_table import LeagueTable, LeagueTableEntry
from vbcompetitions.models.match import GroupBreak, GroupMatch, MatchManager, MatchOfficials, MatchTeam
from vbcompetitions.models.outcome import MatchOutcome, MatchType
from vbcompetitions.models.stage import Stage
from vbcompetitions.models.team import CompetitionTeam

__all__ = [
    "Competition",
    "CompetitionTeam",
    "Stage",
    "Group",
    "League",
    "Knockout",
    "Crossover",
    "GroupType",
    "GroupMatch",
    "GroupBreak",
    "MatchTeam",
    "MatchOfficials",
    "MatchManager",
    "MatchOutcome",
    "MatchType",
    "MatchFilter",
    "TeamFilter",
    "SetConfig",
    "LeagueConfig",
    "LeagueConfigPoints",
    "KnockoutConfig",
    "LeagueTable",
    "LeagueTableEntry",
]
