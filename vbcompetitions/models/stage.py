"""Stages of a competition."""

import logging
from typing import TYPE_CHECKING, Optional

from vbcompetitions import config
from vbcompetitions.exceptions import DuplicateIDError, InvalidMatchError, NotFoundError
from vbcompetitions.models.enums import MatchFilter, TeamFilter
from vbcompetitions.models.group import MATCH_FIELDS, Group, GroupEntry
from vbcompetitions.models.team import check_id
from vbcompetitions.utils.references import is_reference

if TYPE_CHECKING:
    from vbcompetitions.models.competition import Competition

logger = logging.getLogger(__name__)


def _match_sort_key(entry: GroupEntry) -> str:
    date = entry.date if entry.date is not None else config.DEFAULT_MATCH_DATE
    start = entry.start if entry.start is not None else config.DEFAULT_MATCH_START
    return f"{date}{start}"


class Stage:
    """
    A phase of a competition.

    Groups within a stage run in parallel; stages run one after another, so
    matches in a later stage may refer to results in an earlier one.
    """

    def __init__(
        self,
        competition: "Competition",
        stage_id: str,
        name: Optional[str] = None,
        notes: Optional[str] = None,
        description: Optional[list[str]] = None,
    ):
        """
        Create a stage.

        Raises:
            InvalidIDError: If the stage ID is not a valid ID
        """
        self._id = check_id(stage_id, "stage")
        self._competition = competition
        self.name = name
        self.notes = notes
        self.description = description

        self._groups: dict[str, Group] = {}
        self._is_complete: Optional[bool] = None
        self._all_matches: Optional[list[GroupEntry]] = None

    @property
    def id(self) -> str:
        return self._id

    @property
    def competition(self) -> "Competition":
        return self._competition

    @property
    def groups(self) -> list[Group]:
        return list(self._groups.values())

    def add_group(self, group: Group) -> "Stage":
        """
        Add a group to the stage.

        Raises:
            DuplicateIDError: If the stage already has a group with this ID
        """
        if group.stage is not self:
            raise ValueError(f"Group {group.id} belongs to a different stage")
        if group.id in self._groups:
            raise DuplicateIDError(f"Groups in a Stage with duplicate IDs not allowed: {{{self._id}:{group.id}}}")
        self._groups[group.id] = group
        self._competition.invalidate_caches()
        logger.debug(f"Added group {{{group.key}}} to stage {self._id}")
        return self

    def get_group(self, group_id: str) -> Group:
        """
        Get a group by ID.

        Raises:
            NotFoundError: If there is no group with this ID in the stage
        """
        try:
            return self._groups[group_id]
        except KeyError:
            raise NotFoundError(f"Group with ID {group_id} not found in stage with ID {self._id}") from None

    def has_group(self, group_id: str) -> bool:
        return group_id in self._groups

    def reset_caches(self) -> None:
        self._is_complete = None
        self._all_matches = None
        for group in self._groups.values():
            group.reset_caches()

    def check_matches(self) -> None:
        """
        Check that no team plays in more than one group of this stage.

        Raises:
            InvalidMatchError: If two groups share a playing team
        """
        groups = list(self._groups.values())
        for index, group in enumerate(groups):
            team_ids = group.get_team_ids(TeamFilter.ALL | TeamFilter.PLAYING)
            for other in groups[index + 1:]:
                other_team_ids = other.get_team_ids(TeamFilter.ALL | TeamFilter.PLAYING)
                shared = [team_id for team_id in team_ids if team_id in other_team_ids]
                if shared:
                    quoted = ", ".join(f'"{team_id}"' for team_id in shared)
                    raise InvalidMatchError(
                        f"Groups in the same stage cannot contain the same team. Groups {{{group.key}}} and "
                        f"{{{other.key}}} both contain the following team IDs: {quoted}"
                    )

    def is_complete(self) -> bool:
        """Whether every group in the stage is complete."""
        if self._is_complete is None:
            self._is_complete = all(group.is_complete() for group in self._groups.values())
        return self._is_complete

    def get_matches(self, team_id: Optional[str] = None, flags: MatchFilter = MatchFilter.PLAYING) -> list[GroupEntry]:
        """
        Get matches from every group, sorted by date and start time.

        Args:
            team_id: A resolved team ID. When omitted (or unknown), every match
                and break in the stage is returned and flags is ignored
            flags: ALL_IN_GROUP to include every match in any group the team
                plays in, PLAYING and/or OFFICIATING otherwise

        Returns:
            Matches and breaks, earliest first
        """
        if team_id is None or team_id == config.UNKNOWN_TEAM_ID or is_reference(team_id):
            if self._all_matches is None:
                matches = [entry for group in self._groups.values() for entry in group.get_matches()]
                self._all_matches = sorted(matches, key=_match_sort_key)
            return list(self._all_matches)

        matches = []
        for group in self._groups.values():
            if group.team_has_matches(team_id):
                matches += group.get_matches(team_id, flags)
            elif flags & MatchFilter.OFFICIATING and group.team_has_officiating(team_id):
                matches += group.get_matches(team_id, MatchFilter.OFFICIATING)
        return sorted(matches, key=_match_sort_key)

    def get_team_ids(self, flags: TeamFilter = TeamFilter.FIXED_ID) -> list[str]:
        """Get the distinct team IDs across every group, see Group.get_team_ids()."""
        team_ids = []
        for group in self._groups.values():
            for team_id in group.get_team_ids(flags):
                if team_id not in team_ids:
                    team_ids.append(team_id)
        return team_ids

    def team_has_matches(self, team_id: str) -> bool:
        return any(group.team_has_matches(team_id) for group in self._groups.values())

    def team_has_officiating(self, team_id: str) -> bool:
        return any(group.team_has_officiating(team_id) for group in self._groups.values())

    def team_may_have_matches(self, team_id: str) -> bool:
        """Whether the team could still arrive in this stage through an unresolved reference."""
        return self._competition.resolver.may_have_team(self, team_id)

    def matches_have(self, field: str) -> bool:
        if field not in MATCH_FIELDS:
            raise ValueError(f'Unknown match field "{field}"')
        return any(group.matches_have(field) for group in self._groups.values())

    def get_match_dates(self, team_id: Optional[str] = None, flags: MatchFilter = MatchFilter.PLAYING) -> list[str]:
        dates = set()
        for group in self._groups.values():
            dates.update(group.get_match_dates(team_id, flags))
        return sorted(dates)

    def get_matches_on_date(
        self, date: str, team_id: Optional[str] = None, flags: MatchFilter = MatchFilter.ALL
    ) -> list[GroupEntry]:
        """Get the matches and breaks on a date across every group, sorted by start time."""
        matches = []
        for group in self._groups.values():
            matches += group.get_matches_on_date(date, team_id, flags)
        return sorted(
            matches,
            key=lambda entry: entry.start if entry.start is not None else config.DEFAULT_MATCH_START,
        )

    def serialize(self) -> dict:
        stage = {"id": self._id}
        if self.name is not None:
            stage["name"] = self.name
        if self.notes is not None:
            stage["notes"] = self.notes
        if self.description is not None:
            stage["description"] = list(self.description)
        stage["groups"] = [group.serialize() for group in self._groups.values()]
        return stage

    def __repr__(self) -> str:
        return f"Stage(id={self._id!r}, groups={len(self._groups)})"
