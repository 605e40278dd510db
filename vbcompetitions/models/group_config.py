"""Configuration blocks attached to a group: sets, league scoring and knockout standing."""

from typing import Literal

from pydantic import BaseModel, Field

OrderingKey = Literal["PTS", "WINS", "LOSSES", "H2H", "PF", "PA", "PD", "SF", "SA", "SD", "BP", "PP"]


class SetConfig(BaseModel):
    """Defines the nature of a set in a group whose matches are played in sets."""

    max_sets: int = Field(default=5, ge=1, alias="maxSets")
    sets_to_win: int = Field(default=3, ge=1, alias="setsToWin")
    clear_points: int = Field(default=2, ge=0, alias="clearPoints")
    min_points: int = Field(default=1, ge=0, alias="minPoints")
    points_to_win: int = Field(default=25, ge=1, alias="pointsToWin")
    last_set_points_to_win: int = Field(default=15, ge=1, alias="lastSetPointsToWin")
    max_points: int = Field(default=1000, ge=1, alias="maxPoints")
    last_set_max_points: int = Field(default=1000, ge=1, alias="lastSetMaxPoints")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True

    def is_decider(self, set_index: int) -> bool:
        """Whether the zero-based set index is the deciding set."""
        return set_index == self.max_sets - 1


class LeagueConfigPoints(BaseModel):
    """League points awarded for each kind of result."""

    played: int = 0
    per_set: int = Field(default=0, alias="perSet")
    win: int = 3
    win_by_one: int = Field(default=0, alias="winByOne")
    lose: int = 0
    lose_by_one: int = Field(default=0, alias="loseByOne")
    forfeit: int = 0

    class Config:
        """Pydantic configuration."""

        populate_by_name = True


class LeagueConfig(BaseModel):
    """Ordering keys and points formula for a league."""

    ordering: list[OrderingKey] = []
    points: LeagueConfigPoints = Field(default_factory=LeagueConfigPoints)


class KnockoutStanding(BaseModel):
    """A final position in a knockout, given as a team reference."""

    position: str
    id: str


class KnockoutConfig(BaseModel):
    """Final standing of a knockout group."""

    standing: list[KnockoutStanding] = []
