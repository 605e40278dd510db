"""
Groups of matches within a stage.

A Group owns an ordered list of matches and breaks. League, Knockout and
Crossover share the Group interface; only League carries a league table and
only Knockout carries a final standing.
"""

import logging
from typing import TYPE_CHECKING, Optional, Union

from vbcompetitions import config
from vbcompetitions.exceptions import DuplicateIDError, MatchStateError, NotFoundError, TeamReferenceError
from vbcompetitions.models.enums import GroupType, MatchFilter, TeamFilter
from vbcompetitions.models.group_config import KnockoutConfig, LeagueConfig, SetConfig
from vbcompetitions.models.league_table import LeagueTable
from vbcompetitions.models.match import GroupBreak, GroupMatch
from vbcompetitions.models.outcome import MatchType
from vbcompetitions.models.team import CompetitionTeam
from vbcompetitions.utils.references import is_reference

if TYPE_CHECKING:
    from vbcompetitions.models.competition import Competition
    from vbcompetitions.models.stage import Stage

logger = logging.getLogger(__name__)

GroupEntry = Union[GroupMatch, GroupBreak]

# Optional match fields that can be checked with Group.matches_have()
MATCH_FIELDS = ("court", "venue", "date", "warmup", "start", "duration", "officials", "mvp", "manager", "notes")


class Group:
    """
    Base class for a group of matches.

    Derived state (completeness, per-team lookups) is memoized on the group
    and cleared through reset_caches() whenever anything in the competition
    changes.
    """

    type: GroupType

    def __init__(
        self,
        stage: "Stage",
        group_id: str,
        match_type: Union[MatchType, str],
        draws_allowed: bool = False,
        set_config: Optional[SetConfig] = None,
        name: Optional[str] = None,
        notes: Optional[str] = None,
        description: Optional[list[str]] = None,
    ):
        self._id = group_id
        self._stage = stage
        self._match_type = MatchType(match_type)
        self._draws_allowed = draws_allowed
        if self._match_type == MatchType.SETS and set_config is None:
            set_config = SetConfig()
        self._set_config = set_config
        self.name = name
        self.notes = notes
        self.description = description

        self._entries: list[GroupEntry] = []
        self._matches: dict[str, GroupMatch] = {}
        self._is_complete: Optional[bool] = None
        self._playing_cache: dict[str, bool] = {}
        self._officiating_cache: dict[str, bool] = {}

    @property
    def id(self) -> str:
        return self._id

    @property
    def stage(self) -> "Stage":
        return self._stage

    @property
    def competition(self) -> "Competition":
        return self._stage.competition

    @property
    def match_type(self) -> MatchType:
        return self._match_type

    @property
    def set_config(self) -> Optional[SetConfig]:
        return self._set_config

    @property
    def draws_allowed(self) -> bool:
        return self._draws_allowed

    @property
    def key(self) -> str:
        """The group coordinates as "stage:group"."""
        return f"{self._stage.id}:{self._id}"

    @property
    def entries(self) -> list[GroupEntry]:
        """All matches and breaks, in document order."""
        return list(self._entries)

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def add_match(self, match: GroupMatch) -> "Group":
        """
        Add a match to the end of the group.

        Every team ID and reference in the match is validated against the
        competition as it currently stands, so matches that refer to other
        matches in this group must be added after them.

        Raises:
            DuplicateIDError: If the group already has a match with this ID
            TeamReferenceError: If a team ID or reference in the match is invalid
        """
        if match.group is not self:
            raise ValueError(f"Match {match.id} belongs to a different group")
        if match.id in self._matches:
            raise DuplicateIDError(
                f"Group {{{self.key}}}: matches with duplicate IDs {{{match.id}}} not allowed"
            )

        competition = self.competition
        if competition.validate_references:
            competition.validate_team_id(match.home_team.id, match.id, "homeTeam")
            competition.validate_team_id(match.away_team.id, match.id, "awayTeam")
            if match.officials is not None and match.officials.is_team:
                competition.validate_team_id(match.officials.team, match.id, "officials")
            if match.manager_team_id is not None:
                competition.validate_team_id(match.manager_team_id, match.id, "manager")

        self._entries.append(match)
        self._matches[match.id] = match
        competition.invalidate_caches()
        return self

    def add_break(self, group_break: GroupBreak) -> "Group":
        self._entries.append(group_break)
        self.competition.invalidate_caches()
        return self

    def reset_caches(self) -> None:
        self._is_complete = None
        self._playing_cache.clear()
        self._officiating_cache.clear()

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_match(self, match_id: str) -> GroupMatch:
        """
        Get a match by ID.

        Raises:
            NotFoundError: If there is no match with this ID in the group
        """
        try:
            return self._matches[match_id]
        except KeyError:
            raise NotFoundError(f'Match with ID "{match_id}" not found in group {{{self.key}}}') from None

    def has_match(self, match_id: str) -> bool:
        return match_id in self._matches

    def get_matches(self, team_id: Optional[str] = None, flags: MatchFilter = MatchFilter.ALL_IN_GROUP) -> list[GroupEntry]:
        """
        Get the matches (and breaks) in the group.

        Args:
            team_id: Only include matches for this team. Ignored with ALL_IN_GROUP
            flags: ALL_IN_GROUP for everything including breaks, or any of
                PLAYING and OFFICIATING (ALL means both)

        Returns:
            Entries in document order
        """
        # An unresolved team cannot be matched, so treat it as no team at all
        if team_id is None or team_id == config.UNKNOWN_TEAM_ID or is_reference(team_id):
            return list(self._entries)
        if flags & MatchFilter.ALL_IN_GROUP:
            return list(self._entries)

        want_playing = bool(flags & (MatchFilter.ALL | MatchFilter.PLAYING))
        want_officiating = bool(flags & (MatchFilter.ALL | MatchFilter.OFFICIATING))
        matches = []
        for match in self._entries:
            if not isinstance(match, GroupMatch):
                continue
            if want_playing and self._is_playing(match, team_id):
                matches.append(match)
            elif want_officiating and self._is_officiating(match, team_id):
                matches.append(match)
        return matches

    def _is_playing(self, match: GroupMatch, team_id: str) -> bool:
        competition = self.competition
        return (
            competition.get_team(match.home_team.id).id == team_id
            or competition.get_team(match.away_team.id).id == team_id
        )

    def _is_officiating(self, match: GroupMatch, team_id: str) -> bool:
        if match.officials is None or not match.officials.is_team:
            return False
        return self.competition.get_team(match.officials.team).id == team_id

    def get_team_ids(self, flags: TeamFilter = TeamFilter.FIXED_ID) -> list[str]:
        """
        Get the IDs of teams in this group.

        Args:
            flags: FIXED_ID for literal IDs, KNOWN for anything that currently
                resolves to a team, MAYBE for teams that might still arrive,
                ALL for every ID and reference as written. PLAYING and
                OFFICIATING narrow ALL to the playing or officiating fields

        Returns:
            IDs sorted by team name for FIXED_ID and KNOWN, otherwise in order of appearance
        """
        if flags & TeamFilter.MAYBE:
            return self.competition.resolver.maybe_team_ids(self)

        if flags & (TeamFilter.PLAYING | TeamFilter.OFFICIATING):
            want_playing = bool(flags & TeamFilter.PLAYING)
            want_officiating = bool(flags & TeamFilter.OFFICIATING)
        else:
            want_playing = want_officiating = True

        team_ids: list[str] = []
        for match in self._entries:
            if not isinstance(match, GroupMatch):
                continue
            candidates = []
            if want_playing:
                candidates += [match.home_team.id, match.away_team.id]
            if want_officiating and match.officials is not None and match.officials.is_team:
                candidates.append(match.officials.team)
            for candidate in candidates:
                if candidate not in team_ids:
                    team_ids.append(candidate)

        if flags & TeamFilter.FIXED_ID:
            return self._sort_by_name([team_id for team_id in team_ids if not is_reference(team_id)])
        if flags & TeamFilter.KNOWN:
            known = []
            for team_id in team_ids:
                team = self.competition.get_team(team_id)
                if not team.is_unknown and team.id not in known:
                    known.append(team.id)
            return self._sort_by_name(known)
        return team_ids

    def _sort_by_name(self, team_ids: list[str]) -> list[str]:
        competition = self.competition
        return sorted(team_ids, key=lambda team_id: competition.get_team(team_id).name)

    def team_has_matches(self, team_id: str) -> bool:
        """Whether the team definitely plays in this group."""
        if team_id not in self._playing_cache:
            self._playing_cache[team_id] = any(
                isinstance(match, GroupMatch) and self._is_playing(match, team_id) for match in self._entries
            )
        return self._playing_cache[team_id]

    def team_has_officiating(self, team_id: str) -> bool:
        """Whether the team definitely officiates in this group."""
        if team_id not in self._officiating_cache:
            self._officiating_cache[team_id] = any(
                isinstance(match, GroupMatch) and self._is_officiating(match, team_id) for match in self._entries
            )
        return self._officiating_cache[team_id]

    def team_may_have_matches(self, team_id: str) -> bool:
        """Whether the team could still arrive in this group through an unresolved reference."""
        return self.competition.resolver.may_have_team(self, team_id)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    def is_complete(self) -> bool:
        """Whether every match in the group is complete."""
        if self._is_complete is None:
            self._is_complete = all(
                match.is_complete() for match in self._entries if isinstance(match, GroupMatch)
            )
            logger.debug(f"Group {{{self.key}}} completeness calculated: {self._is_complete}")
        return self._is_complete

    def all_teams_known(self) -> bool:
        """Whether every team ID and reference in the group currently resolves to a team."""
        competition = self.competition
        return all(
            not competition.get_team(team_id).is_unknown for team_id in self.get_team_ids(TeamFilter.ALL)
        )

    def matches_have(self, field: str) -> bool:
        """
        Whether any match in the group has the given optional field set.

        Args:
            field: One of MATCH_FIELDS, e.g. "court" or "officials"
        """
        if field not in MATCH_FIELDS:
            raise ValueError(f'Unknown match field "{field}"')
        return any(
            isinstance(match, GroupMatch) and getattr(match, field) is not None for match in self._entries
        )

    def get_match_dates(self, team_id: Optional[str] = None, flags: MatchFilter = MatchFilter.PLAYING) -> list[str]:
        """
        Get the sorted distinct dates of the group's matches, optionally for one team.

        MatchFilter.ALL gives every date in the group whatever the team.
        """
        if team_id is None or team_id == config.UNKNOWN_TEAM_ID or flags & MatchFilter.ALL:
            entries = self._entries
        else:
            entries = self.get_matches(team_id, flags)
        return sorted({match.date for match in entries if isinstance(match, GroupMatch) and match.date is not None})

    def get_matches_on_date(
        self, date: str, team_id: Optional[str] = None, flags: MatchFilter = MatchFilter.ALL
    ) -> list[GroupEntry]:
        """Get the matches and breaks on a date, optionally only those for one team."""
        if team_id is None:
            entries = self._entries
        else:
            entries = self.get_matches(team_id, flags)
        return [entry for entry in entries if entry.date == date]

    # -------------------------------------------------------------------------
    # Team references
    # -------------------------------------------------------------------------

    def get_team(self, selector: str, qualifier: str) -> CompetitionTeam:
        """
        Get the team referred to by a selector and qualifier in this group.

        Args:
            selector: A match ID
            qualifier: "winner" or "loser"

        Raises:
            NotFoundError: If there is no such match
            MatchStateError: If the match has no winner yet
            TeamReferenceError: If the qualifier is not understood
        """
        match = self.get_match(selector)
        if qualifier == "winner":
            return self.competition.get_team(match.get_winner_team_id())
        if qualifier == "loser":
            return self.competition.get_team(match.get_loser_team_id())
        raise TeamReferenceError(
            f'Invalid Match result in reference {{{self.key}:{selector}:{qualifier}}}: '
            f'reference must be one of "winner"|"loser"'
        )

    def serialize(self) -> dict:
        group = {"id": self._id}
        if self.name is not None:
            group["name"] = self.name
        if self.notes is not None:
            group["notes"] = self.notes
        if self.description is not None:
            group["description"] = list(self.description)
        group["type"] = self.type.value
        group.update(self._serialize_config())
        group["matchType"] = self._match_type.value
        if self._set_config is not None:
            group["sets"] = self._set_config.model_dump(by_alias=True)
        if self._draws_allowed:
            group["drawsAllowed"] = True
        group["matches"] = [entry.serialize() for entry in self._entries]
        return group

    def _serialize_config(self) -> dict:
        return {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, matches={len(self._matches)})"


class League(Group):
    """A round-robin group ranked by a league table."""

    type = GroupType.LEAGUE

    def __init__(
        self,
        stage: "Stage",
        group_id: str,
        match_type: Union[MatchType, str],
        league_config: Optional[LeagueConfig] = None,
        draws_allowed: bool = False,
        set_config: Optional[SetConfig] = None,
        name: Optional[str] = None,
        notes: Optional[str] = None,
        description: Optional[list[str]] = None,
    ):
        super().__init__(stage, group_id, match_type, draws_allowed, set_config, name, notes, description)
        self.league_config = league_config if league_config is not None else LeagueConfig()
        self._table: Optional[LeagueTable] = None

    @property
    def is_processed(self) -> bool:
        return self._table is not None

    def reset_caches(self) -> None:
        super().reset_caches()
        self._table = None

    def process_matches(self) -> LeagueTable:
        """Build the league table from the group's matches, if it has not been built since the last change."""
        if self._table is None:
            # services import models, so import on use
            from vbcompetitions.services.standings import StandingsCalculator

            self._table = StandingsCalculator(self).build_table()
        return self._table

    def get_league_table(self) -> LeagueTable:
        return self.process_matches()

    def get_team(self, selector: str, qualifier: str) -> CompetitionTeam:
        """
        Get a team by league position or by match result.

        Raises:
            MatchStateError: If a league position is asked of an incomplete league
            TeamReferenceError: If the position is not a positive integer, or is
                beyond the number of teams in the table
        """
        if selector != "league":
            return super().get_team(selector, qualifier)

        if not self.is_complete():
            raise MatchStateError("Cannot get the team in a league position on an incomplete league")
        try:
            position = int(qualifier)
        except ValueError:
            raise TeamReferenceError(
                f"Invalid League position: reference must be an integer in {{{self.key}:league:{qualifier}}}"
            ) from None
        entries = self.get_league_table().entries
        if position < 1 or position > len(entries):
            raise TeamReferenceError(
                f"Invalid League position: position is bigger than the number of teams in {{{self.key}:league:{qualifier}}}"
            )
        return self.competition.get_team(entries[position - 1].team_id)

    def _serialize_config(self) -> dict:
        return {"league": self.league_config.model_dump(by_alias=True)}


class Knockout(Group):
    """A bracket of matches, optionally with a final standing."""

    type = GroupType.KNOCKOUT

    def __init__(
        self,
        stage: "Stage",
        group_id: str,
        match_type: Union[MatchType, str],
        knockout_config: Optional[KnockoutConfig] = None,
        set_config: Optional[SetConfig] = None,
        name: Optional[str] = None,
        notes: Optional[str] = None,
        description: Optional[list[str]] = None,
    ):
        super().__init__(stage, group_id, match_type, False, set_config, name, notes, description)
        self.knockout_config = knockout_config

    def get_standing(self) -> list[tuple[str, CompetitionTeam]]:
        """
        Resolve the final standing.

        Returns:
            (position, team) pairs in configured order, with the unknown team
            for positions that cannot be decided yet
        """
        if self.knockout_config is None:
            return []
        competition = self.competition
        return [(standing.position, competition.get_team(standing.id)) for standing in self.knockout_config.standing]

    def _serialize_config(self) -> dict:
        if self.knockout_config is None:
            return {}
        return {"knockout": self.knockout_config.model_dump()}


class Crossover(Group):
    """Matches between teams from different groups of an earlier stage."""

    type = GroupType.CROSSOVER

    def __init__(
        self,
        stage: "Stage",
        group_id: str,
        match_type: Union[MatchType, str],
        set_config: Optional[SetConfig] = None,
        name: Optional[str] = None,
        notes: Optional[str] = None,
        description: Optional[list[str]] = None,
    ):
        super().__init__(stage, group_id, match_type, False, set_config, name, notes, description)
