"""
Volleyball competition documents.

Loads competition documents and derives what they do not state directly:
match results, league tables, and which team a reference such as
"{P:A:league:1}" currently points at.

Usage:
    from vbcompetitions import load_competition

    competition = load_competition(json_text)
    table = competition.get_stage("P").get_group("A").get_league_table()
"""

from vbcompetitions.exceptions import CompetitionError, DocumentError, TeamReferenceError
from vbcompetitions.models import Competition, CompetitionTeam, MatchFilter, TeamFilter
from vbcompetitions.services.loader import (
    dump_competition,
    load_competition,
    load_competition_data,
    serialize_competition,
)

__version__ = "0.1.0"

__all__ = [
    "Competition",
    "CompetitionTeam",
    "MatchFilter",
    "TeamFilter",
    "CompetitionError",
    "DocumentError",
    "TeamReferenceError",
    "load_competition",
    "load_competition_data",
    "serialize_competition",
    "dump_competition",
]
