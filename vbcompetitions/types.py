"""
Type definitions for vbcompetitions.

Provides TypedDict classes describing serialized competition data.
"""

from typing import TypedDict, Optional, List, Dict, Union


class SetConfigDict(TypedDict):
    """Set configuration for a group."""
    maxSets: int
    setsToWin: int
    clearPoints: int
    minPoints: int
    pointsToWin: int
    lastSetPointsToWin: int
    maxPoints: int
    lastSetMaxPoints: int


class LeaguePointsDict(TypedDict):
    """League points awarded per result."""
    played: int
    perSet: int
    win: int
    winByOne: int
    lose: int
    loseByOne: int
    forfeit: int


class LeagueConfigDict(TypedDict):
    """League configuration."""
    ordering: List[str]
    points: LeaguePointsDict


class StandingDict(TypedDict):
    """A knockout standing position."""
    position: str
    id: str


class KnockoutConfigDict(TypedDict):
    """Knockout configuration."""
    standing: List[StandingDict]


class MatchTeamDict(TypedDict, total=False):
    """One side of a match."""
    id: str
    scores: List[int]
    mvp: str
    forfeit: bool
    bonusPoints: int
    penaltyPoints: int
    players: List[str]
    notes: str


class OfficialsDict(TypedDict, total=False):
    """Match officials, either a team or named people."""
    team: str
    first: str
    second: str
    challenge: str
    assistantChallenge: str
    reserve: str
    scorer: str
    assistantScorer: str
    linespersons: List[str]
    ballCrew: List[str]


class MatchDict(TypedDict, total=False):
    """A match in a group."""
    id: str
    type: str  # match
    court: str
    venue: str
    date: str
    warmup: str
    start: str
    duration: str
    complete: bool
    homeTeam: MatchTeamDict
    awayTeam: MatchTeamDict
    officials: OfficialsDict
    mvp: str
    manager: Union[str, Dict[str, str]]
    friendly: bool
    notes: str


class BreakDict(TypedDict, total=False):
    """A break in play."""
    type: str  # break
    start: str
    date: str
    duration: str
    name: str


class GroupDict(TypedDict, total=False):
    """A group within a stage."""
    id: str
    name: str
    notes: str
    description: List[str]
    type: str  # league, knockout, crossover
    league: LeagueConfigDict
    knockout: KnockoutConfigDict
    matchType: str  # continuous, sets
    sets: SetConfigDict
    drawsAllowed: bool
    matches: List[Union[MatchDict, BreakDict]]


class StageDict(TypedDict, total=False):
    """A stage of the competition."""
    id: str
    name: str
    notes: str
    description: List[str]
    groups: List[GroupDict]


class TeamDict(TypedDict, total=False):
    """A team entered in the competition."""
    id: str
    name: str
    club: str
    notes: str
    contacts: List[Dict[str, object]]


class CompetitionDict(TypedDict, total=False):
    """A whole competition document."""
    version: str
    metadata: List[Dict[str, str]]
    name: str
    notes: str
    clubs: List[Dict[str, object]]
    teams: List[TeamDict]
    stages: List[StageDict]


class LeagueTableEntryDict(TypedDict):
    """A row of a league table."""
    teamID: str
    team: str
    played: int
    wins: int
    losses: int
    draws: int
    sf: int
    sa: int
    sd: int
    pf: int
    pa: int
    pd: int
    bp: int
    pp: int
    pts: int
    h2h: Dict[str, int]


class ValidationResultDict(TypedDict):
    """Result of validating one document from the CLI."""
    path: str
    valid: bool
    error: Optional[str]
