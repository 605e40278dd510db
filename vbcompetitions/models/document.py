"""
Competition document model.

Acts as the schema gate in front of the object graph: once a document has been
validated here, the builders in services.loader can assume its structure is sound.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from vbcompetitions.models.group_config import KnockoutConfig, LeagueConfig, SetConfig

DATE_PATTERN = r"^[0-9]{4}-(0[0-9]|1[0-2])-(0[1-9]|[12][0-9]|3[01])$"
TIME_PATTERN = r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$"


class MetadataDocument(BaseModel):
    """A key/value metadata pair."""

    key: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., min_length=1, max_length=1000)


class ClubDocument(BaseModel):
    """A club grouping teams. Carried through untouched."""

    id: str
    name: str
    notes: Optional[str] = None
    teams: list[str] = []


class TeamDocument(BaseModel):
    """A team entered into the competition."""

    id: str
    name: str = Field(..., min_length=1, max_length=1000)
    club: Optional[str] = None
    notes: Optional[str] = None
    contacts: list[dict] = []


class MatchTeamDocument(BaseModel):
    """One side of a match."""

    id: str
    scores: list[int]
    mvp: Optional[str] = None
    forfeit: bool = False
    bonus_points: int = Field(default=0, alias="bonusPoints")
    penalty_points: int = Field(default=0, alias="penaltyPoints")
    players: list[str] = []
    notes: Optional[str] = None

    class Config:
        """Pydantic configuration."""

        populate_by_name = True


class OfficialsDocument(BaseModel):
    """Officials for a match: either a team, or named people led by a first referee."""

    team: Optional[str] = None
    first: Optional[str] = None
    second: Optional[str] = None
    challenge: Optional[str] = None
    assistant_challenge: Optional[str] = Field(default=None, alias="assistantChallenge")
    reserve: Optional[str] = None
    scorer: Optional[str] = None
    assistant_scorer: Optional[str] = Field(default=None, alias="assistantScorer")
    linespersons: list[str] = []
    ball_crew: list[str] = Field(default=[], alias="ballCrew")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True

    @model_validator(mode="after")
    def _team_or_person(self) -> "OfficialsDocument":
        if self.team is None and self.first is None:
            raise ValueError("Match Officials must be either a team or a person")
        return self


class ManagerDocument(BaseModel):
    """A court manager given as a team."""

    team: str


class MatchDocument(BaseModel):
    """A match between two teams."""

    type: Literal["match"]
    id: str
    court: Optional[str] = None
    venue: Optional[str] = None
    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)
    warmup: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    start: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    duration: Optional[str] = None
    complete: Optional[bool] = None
    home_team: MatchTeamDocument = Field(..., alias="homeTeam")
    away_team: MatchTeamDocument = Field(..., alias="awayTeam")
    officials: Optional[OfficialsDocument] = None
    mvp: Optional[str] = None
    manager: Optional[Union[ManagerDocument, str]] = None
    friendly: bool = False
    notes: Optional[str] = None

    class Config:
        """Pydantic configuration."""

        populate_by_name = True


class BreakDocument(BaseModel):
    """A break in play between matches."""

    type: Literal["break"]
    start: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)
    duration: Optional[str] = None
    name: Optional[str] = None


GroupEntryDocument = Annotated[Union[MatchDocument, BreakDocument], Field(discriminator="type")]


class GroupDocument(BaseModel):
    """A league, knockout or crossover group."""

    id: str
    name: Optional[str] = None
    notes: Optional[str] = None
    description: Optional[list[str]] = None
    type: Literal["league", "knockout", "crossover"]
    match_type: Literal["continuous", "sets"] = Field(..., alias="matchType")
    sets: Optional[SetConfig] = None
    league: Optional[LeagueConfig] = None
    knockout: Optional[KnockoutConfig] = None
    draws_allowed: bool = Field(default=False, alias="drawsAllowed")
    matches: list[GroupEntryDocument]

    class Config:
        """Pydantic configuration."""

        populate_by_name = True

    @model_validator(mode="after")
    def _league_has_config(self) -> "GroupDocument":
        if self.type == "league" and self.league is None:
            raise ValueError(f'League group "{self.id}" is missing the "league" configuration')
        return self


class StageDocument(BaseModel):
    """A stage of the competition."""

    id: str
    name: Optional[str] = None
    notes: Optional[str] = None
    description: Optional[list[str]] = None
    groups: list[GroupDocument]


class CompetitionDocument(BaseModel):
    """Root of a competition document."""

    version: str = "1.0.0"
    metadata: list[MetadataDocument] = []
    name: str = Field(..., min_length=1, max_length=1000)
    notes: Optional[str] = None
    clubs: list[ClubDocument] = []
    teams: list[TeamDocument]
    stages: list[StageDocument]
