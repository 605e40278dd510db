"""
Team reference resolution.

Turns team IDs and team references into teams. resolve() is total: a
reference that cannot be decided yet (an incomplete match or league, or a
stage that has not been loaded) gives the competition's unknown team.
validate() is strict and raises for anything malformed or dangling, and is
used as matches are added.

Also answers "could this team still end up here" for incomplete groups by
following the groups a group's references point at.
"""

import logging
from typing import TYPE_CHECKING, Iterator, Union

from vbcompetitions.exceptions import (
    CompetitionError,
    ReferenceSyntaxError,
    TeamReferenceError,
    UnresolvedReferenceError,
)
from vbcompetitions.models.enums import GroupType, TeamFilter
from vbcompetitions.models.match import GroupMatch
from vbcompetitions.models.stage import Stage
from vbcompetitions.models.team import CompetitionTeam
from vbcompetitions.utils.references import (
    LiteralID,
    Operand,
    StructuredReference,
    TeamReference,
    TernaryReference,
    is_reference,
    parse_team_reference,
    structured_references,
)

if TYPE_CHECKING:
    from vbcompetitions.models.competition import Competition
    from vbcompetitions.models.group import Group

logger = logging.getLogger(__name__)

TERNARY_PARTS = ("left part", "right part", "true team", "false team")


class TeamReferenceResolver:
    """
    Resolves and validates team references for one competition.

    Holds memoized reference lookups per group; the competition clears them
    whenever anything changes.
    """

    def __init__(self, competition: "Competition"):
        self.competition = competition
        self._referenced_groups: dict[str, list[tuple[str, str]]] = {}
        self._maybe_team_ids: dict[str, list[str]] = {}

    def clear_cache(self) -> None:
        self._referenced_groups.clear()
        self._maybe_team_ids.clear()

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve(self, team_id: str) -> CompetitionTeam:
        """
        Resolve a team ID or reference to a team.

        Args:
            team_id: A literal team ID, structured reference or ternary

        Returns:
            The team, or the competition's unknown team if it cannot be decided
        """
        if not is_reference(team_id):
            return self.competition.lookup_team(team_id) or self.competition.unknown_team

        try:
            reference = parse_team_reference(team_id)
        except ReferenceSyntaxError as e:
            logger.debug(f"Unparseable team reference {team_id}: {e}")
            return self.competition.unknown_team
        return self._resolve_reference(reference)

    def _resolve_reference(self, reference: TeamReference) -> CompetitionTeam:
        unknown = self.competition.unknown_team
        if isinstance(reference, LiteralID):
            return self.competition.lookup_team(reference.team_id) or unknown

        if isinstance(reference, TernaryReference):
            left = self._resolve_reference(reference.left)
            right = self._resolve_reference(reference.right)
            # Undecided sides compare as the unknown team itself
            if left.id == right.id:
                return self._resolve_reference(reference.if_true)
            return self._resolve_reference(reference.if_false)

        try:
            group = self.competition.get_stage(reference.stage_id).get_group(reference.group_id)
            return group.get_team(reference.selector, reference.qualifier)
        except CompetitionError as e:
            logger.debug(f"Team reference {reference.text} not resolved: {e}")
            return unknown

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, team_id: str, match_id: str, field: str) -> None:
        """
        Check that a team ID or reference is well formed and points at something that exists.

        Args:
            team_id: The ID or reference to check
            match_id: ID of the match it appears in, for error messages
            field: Name of the field it appears in, e.g. "homeTeam"

        Raises:
            ReferenceSyntaxError: If the reference is malformed
            UnresolvedReferenceError: If the reference names a team, stage,
                group or match that does not exist
        """
        context = {"match_id": match_id, "field": field}
        if not is_reference(team_id):
            if not self.competition.has_team(team_id):
                raise UnresolvedReferenceError(
                    f'Invalid team ID for {field} in match with ID "{match_id}"', fragment=team_id, **context
                )
            return

        try:
            reference = parse_team_reference(team_id)
        except ReferenceSyntaxError as e:
            if e.part is not None:
                message = f'Invalid ternary {e.part} reference for {field} in match with ID "{match_id}": "{e.fragment}"'
            else:
                message = f'Invalid team reference for {field} in match with ID "{match_id}": {e}'
            raise ReferenceSyntaxError(message, fragment=e.fragment, part=e.part, **context) from e

        if isinstance(reference, TernaryReference):
            for part, operand in zip(TERNARY_PARTS, reference):
                try:
                    self._check_operand(operand)
                except TeamReferenceError as e:
                    raise type(e)(
                        f'Invalid ternary {part} reference for {field} in match with ID "{match_id}": '
                        f'"{operand.text}": {e}',
                        fragment=operand.text,
                        part=part,
                        **context,
                    ) from e
            return

        try:
            self._check_structured(reference)
        except TeamReferenceError as e:
            raise type(e)(
                f'Invalid team reference for {field} in match with ID "{match_id}": {e}',
                fragment=team_id,
                **context,
            ) from e

    def _check_operand(self, operand: Operand) -> None:
        if isinstance(operand, LiteralID):
            if not self.competition.has_team(operand.team_id):
                raise UnresolvedReferenceError(f'Team with ID "{operand.team_id}" does not exist')
            return
        self._check_structured(operand)

    def _check_structured(self, reference: StructuredReference) -> None:
        competition = self.competition
        if not competition.has_stage(reference.stage_id):
            raise UnresolvedReferenceError(f'Invalid Stage part: Stage with ID "{reference.stage_id}" does not exist')

        stage = competition.get_stage(reference.stage_id)
        if not stage.has_group(reference.group_id):
            raise UnresolvedReferenceError(
                f'Invalid Group part: Group with ID "{reference.group_id}" does not exist '
                f'in stage with ID "{reference.stage_id}"'
            )

        group = stage.get_group(reference.group_id)
        if reference.selector == "league":
            if group.type != GroupType.LEAGUE:
                raise UnresolvedReferenceError(
                    f'Invalid League part: Group with ID "{reference.group_id}" in stage with ID '
                    f'"{reference.stage_id}" is not a league'
                )
            try:
                position = int(reference.qualifier)
            except ValueError:
                raise ReferenceSyntaxError("Invalid League position: reference must be an integer") from None
            if position < 1:
                raise ReferenceSyntaxError("Invalid League position: reference must be a positive integer")
            if group.is_complete() and position > len(group.get_team_ids(TeamFilter.KNOWN)):
                raise UnresolvedReferenceError("Invalid League position: position is bigger than the number of teams")
            return

        if not group.has_match(reference.selector):
            raise UnresolvedReferenceError(
                f'Invalid Match part in reference {reference.text} : Match with ID "{reference.selector}" '
                f'does not exist in stage:group with IDs "{reference.stage_id}:{reference.group_id}"'
            )
        if reference.qualifier not in ("winner", "loser"):
            raise ReferenceSyntaxError(
                f'Invalid Match result in reference {reference.text}: reference must be one of "winner"|"loser"'
            )

    # -------------------------------------------------------------------------
    # Reference lookup
    # -------------------------------------------------------------------------

    def strip_team_references(self, team_id: str) -> list[StructuredReference]:
        """
        List the structured references inside a team ID.

        A literal ID gives an empty list, a ternary gives the references among its parts.
        Malformed references also give an empty list.
        """
        if not is_reference(team_id):
            return []
        try:
            return structured_references(parse_team_reference(team_id))
        except ReferenceSyntaxError:
            return []

    def match_references(self, match: GroupMatch) -> list[StructuredReference]:
        """List the structured references in a match's home, away and officiating team fields."""
        team_ids = [match.home_team.id, match.away_team.id]
        if match.officials is not None and match.officials.is_team:
            team_ids.append(match.officials.team)
        references = []
        for team_id in team_ids:
            references += self.strip_team_references(team_id)
        return references

    def referenced_groups(self, group: "Group") -> list[tuple[str, str]]:
        """Get the distinct (stage ID, group ID) pairs referred to by a group's matches."""
        if group.key not in self._referenced_groups:
            pairs = []
            for match in group.entries:
                if not isinstance(match, GroupMatch):
                    continue
                for reference in self.match_references(match):
                    pair = (reference.stage_id, reference.group_id)
                    if pair not in pairs:
                        pairs.append(pair)
            self._referenced_groups[group.key] = pairs
        return self._referenced_groups[group.key]

    def _upstream_groups(self, group: "Group") -> Iterator["Group"]:
        for stage_id, group_id in self.referenced_groups(group):
            if not self.competition.has_stage(stage_id):
                continue
            stage = self.competition.get_stage(stage_id)
            if stage.has_group(group_id):
                yield stage.get_group(group_id)

    # -------------------------------------------------------------------------
    # Maybe-reachability
    # -------------------------------------------------------------------------

    def may_have_team(self, target: Union["Group", "Stage"], team_id: str) -> bool:
        """
        Whether a team could still end up playing in a group or stage.

        A team "may" reach a group when one of the incomplete groups that the
        group refers to has the team playing in it, or may have it in turn.
        Complete groups have no maybes.

        Args:
            target: A Group or Stage
            team_id: A literal team ID

        Returns:
            True if the team might still arrive through an unresolved reference
        """
        if self.competition.lookup_team(team_id) is None:
            return False
        groups = target.groups if isinstance(target, Stage) else [target]
        visited: set[str] = set()
        return any(self._group_may_have_team(group, team_id, visited) for group in groups)

    def _group_may_have_team(self, group: "Group", team_id: str, visited: set[str]) -> bool:
        if group.is_complete() or group.key in visited:
            return False
        visited.add(group.key)
        for upstream in self._upstream_groups(group):
            if upstream.is_complete():
                continue
            if upstream.team_has_matches(team_id) or self._group_may_have_team(upstream, team_id, visited):
                return True
        return False

    def maybe_team_ids(self, group: "Group") -> list[str]:
        """
        Get the IDs of teams that could still end up playing in a group.

        Returns:
            Team IDs, empty once the group is complete
        """
        if group.key not in self._maybe_team_ids:
            self._maybe_team_ids[group.key] = self._collect_maybe_team_ids(group, set())
            logger.debug(f"Maybe teams for {{{group.key}}}: {self._maybe_team_ids[group.key]}")
        return list(self._maybe_team_ids[group.key])

    def _collect_maybe_team_ids(self, group: "Group", visited: set[str]) -> list[str]:
        if group.is_complete() or group.key in visited:
            return []
        visited.add(group.key)
        team_ids: list[str] = []
        for upstream in self._upstream_groups(group):
            if upstream.is_complete():
                continue
            candidates = upstream.get_team_ids(TeamFilter.KNOWN) + self._collect_maybe_team_ids(upstream, visited)
            for team_id in candidates:
                if team_id not in team_ids:
                    team_ids.append(team_id)
        return team_ids
