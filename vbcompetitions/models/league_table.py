"""League table data model."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from vbcompetitions.models.group_config import LeagueConfig
from vbcompetitions.models.outcome import MatchType

if TYPE_CHECKING:
    from vbcompetitions.models.group import League

ORDERING_TEXT = {
    "PTS": "points",
    "WINS": "wins",
    "LOSSES": "losses",
    "H2H": "head-to-head",
    "PF": "points for",
    "PA": "points against",
    "PD": "points difference",
    "SF": "sets for",
    "SA": "sets against",
    "SD": "sets difference",
    "BP": "bonus points",
    "PP": "penalty points",
}


class LeagueTableEntry(BaseModel):
    """A team's row in a league table."""

    team_id: str = Field(..., alias="teamID")
    team: str
    played: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    sf: int = 0
    sa: int = 0
    sd: int = 0
    pf: int = 0
    pa: int = 0
    pd: int = 0
    bp: int = 0
    pp: int = 0
    pts: int = 0
    h2h: dict[str, int] = {}

    class Config:
        """Pydantic configuration."""

        populate_by_name = True


class LeagueTable:
    """The ranked entries of a league, with text describing how they were ranked and scored."""

    def __init__(self, league: "League", entries: list[LeagueTableEntry]):
        self.league = league
        self.entries = entries

    @property
    def config(self) -> LeagueConfig:
        return self.league.league_config

    @property
    def has_sets(self) -> bool:
        return self.league.match_type == MatchType.SETS

    @property
    def has_draws(self) -> bool:
        return self.league.draws_allowed

    def get_ordering_text(self) -> str:
        """Describe the ordering, e.g. "Position is decided by points, then head-to-head"."""
        ordering = [ORDERING_TEXT[key] for key in self.config.ordering]
        if not ordering:
            return ""
        return "Position is decided by " + ", then ".join(ordering)

    def get_scoring_text(self) -> str:
        """Describe the points formula, e.g. "Teams win 3 points per win and 1 point per loss"."""
        points = self.config.points
        parts = []
        if points.played:
            parts.append(_points(points.played, "played"))
        if points.win:
            parts.append(_points(points.win, "win"))
        if points.per_set:
            parts.append(_points(points.per_set, "set"))
        if points.win_by_one and points.win_by_one != points.win:
            parts.append(_points(points.win_by_one, "win by one set"))
        if points.lose:
            parts.append(_points(points.lose, "loss"))
        if points.lose_by_one and points.lose_by_one != points.lose:
            parts.append(_points(points.lose_by_one, "loss by one set"))
        if points.forfeit:
            parts.append(_points(points.forfeit, "forfeited match"))
        if not parts:
            # Everything scores zero
            return ""

        if len(parts) == 1:
            return "Teams win " + parts[0]
        return "Teams win " + ", ".join(parts[:-1]) + " and " + parts[-1]

    def serialize(self) -> list[dict]:
        return [entry.model_dump(by_alias=True) for entry in self.entries]

    def __repr__(self) -> str:
        return f"LeagueTable(league={self.league.key!r}, entries={len(self.entries)})"


def _points(count: int, action: str) -> str:
    if count == 1:
        return f"1 point per {action}"
    return f"{count} points per {action}"
