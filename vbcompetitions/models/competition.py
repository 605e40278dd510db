"""
Competition model.

The Competition is the root of the object graph: it owns the teams and
stages, resolves team references through its TeamReferenceResolver, and
clears every derived cache in the graph whenever anything changes.
"""

import logging
from typing import Optional

from vbcompetitions import config
from vbcompetitions.exceptions import DuplicateIDError, InvalidIDError, NotFoundError, TeamReferenceError
from vbcompetitions.models.document import ClubDocument, MetadataDocument
from vbcompetitions.models.enums import MatchFilter
from vbcompetitions.models.match import GroupMatch
from vbcompetitions.models.stage import Stage
from vbcompetitions.models.team import CompetitionTeam, check_id, unknown_team

logger = logging.getLogger(__name__)


class Competition:
    """A competition: its teams, and the stages they play through."""

    def __init__(self, name: str, version: str = config.SUPPORTED_VERSION, validate_references: bool = True):
        """
        Create an empty competition.

        Args:
            name: Competition name
            version: Document version the competition was loaded from
            validate_references: Whether add_match() checks team IDs and references

        Raises:
            InvalidIDError: If the name is empty or too long
        """
        if len(name) < 1 or len(name) > config.MAX_NAME_LENGTH:
            raise InvalidIDError(
                f"Invalid competition name: must be between 1 and {config.MAX_NAME_LENGTH} characters long"
            )
        # services import models, so import on use
        from vbcompetitions.services.resolver import TeamReferenceResolver

        self.name = name
        self.version = version
        self.validate_references = validate_references
        self.notes: Optional[str] = None
        self.metadata: list[MetadataDocument] = []
        self.clubs: list[ClubDocument] = []

        self._teams: dict[str, CompetitionTeam] = {}
        self._stages: dict[str, Stage] = {}
        self._unknown_team = unknown_team()
        self.resolver = TeamReferenceResolver(self)

    @property
    def unknown_team(self) -> CompetitionTeam:
        """The team returned for references that cannot be resolved yet."""
        return self._unknown_team

    # -------------------------------------------------------------------------
    # Teams
    # -------------------------------------------------------------------------

    def add_team(self, team: CompetitionTeam) -> "Competition":
        """
        Add a team.

        Raises:
            InvalidIDError: If the team ID is not a valid ID
            DuplicateIDError: If a team with this ID already exists
        """
        check_id(team.id, "team")
        if team.id in self._teams:
            raise DuplicateIDError(f'Team with ID "{team.id}" already exists in the competition')
        self._teams[team.id] = team
        self.invalidate_caches()
        return self

    def get_teams(self) -> list[CompetitionTeam]:
        return list(self._teams.values())

    def has_team(self, team_id: str) -> bool:
        return team_id in self._teams

    def lookup_team(self, team_id: str) -> Optional[CompetitionTeam]:
        """Get a registered team by its literal ID, without resolving references."""
        return self._teams.get(team_id)

    def get_team(self, team_id: str) -> CompetitionTeam:
        """
        Get the team for a team ID or team reference.

        Never raises: anything that cannot be resolved yet gives the unknown team.
        """
        return self.resolver.resolve(team_id)

    def delete_team(self, team_id: str) -> "Competition":
        """
        Delete a team that has no matches.

        Raises:
            TeamReferenceError: If the team still plays or officiates in any match
        """
        if team_id not in self._teams:
            return self

        locations = []
        for stage in self._stages.values():
            for match in stage.get_matches(team_id, MatchFilter.PLAYING | MatchFilter.OFFICIATING):
                locations.append(match.location)
        if locations:
            raise TeamReferenceError(f"Team still has matches with IDs: {', '.join(locations)}")

        for club in self.clubs:
            if team_id in club.teams:
                club.teams.remove(team_id)
        del self._teams[team_id]
        self.invalidate_caches()
        logger.info(f"Deleted team {team_id}")
        return self

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def add_stage(self, stage: Stage) -> "Competition":
        """
        Add a stage after any existing stages.

        Raises:
            DuplicateIDError: If a stage with this ID already exists
        """
        if stage.competition is not self:
            raise ValueError(f"Stage {stage.id} belongs to a different competition")
        if stage.id in self._stages:
            raise DuplicateIDError(f'Stage with ID "{stage.id}" already exists in the competition')
        self._stages[stage.id] = stage
        self.invalidate_caches()
        return self

    def get_stages(self) -> list[Stage]:
        return list(self._stages.values())

    def get_stage(self, stage_id: str) -> Stage:
        """
        Get a stage by ID.

        Raises:
            NotFoundError: If there is no stage with this ID
        """
        try:
            return self._stages[stage_id]
        except KeyError:
            raise NotFoundError(f"Stage with ID {stage_id} not found") from None

    def has_stage(self, stage_id: str) -> bool:
        return stage_id in self._stages

    def delete_stage(self, stage_id: str) -> "Competition":
        """
        Delete a stage that no later stage refers to.

        Raises:
            TeamReferenceError: If a match in a later stage refers to this stage
        """
        if stage_id not in self._stages:
            return self

        stage_ids = list(self._stages)
        for later_id in stage_ids[stage_ids.index(stage_id) + 1:]:
            for group in self._stages[later_id].groups:
                for match in group.get_matches():
                    if not isinstance(match, GroupMatch):
                        continue
                    for reference in self.resolver.match_references(match):
                        if reference.stage_id == stage_id:
                            raise TeamReferenceError(
                                f'Cannot delete stage with id "{stage_id}" as it is referenced in match {match.location}'
                            )

        del self._stages[stage_id]
        self.invalidate_caches()
        logger.info(f"Deleted stage {stage_id}")
        return self

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    def is_complete(self) -> bool:
        return all(stage.is_complete() for stage in self._stages.values())

    def validate_team_id(self, team_id: str, match_id: str, field: str) -> None:
        """
        Check that a team ID or reference in a match is valid.

        Raises:
            TeamReferenceError: If the ID or reference is malformed or points nowhere
        """
        self.resolver.validate(team_id, match_id, field)

    def invalidate_caches(self) -> None:
        """Forget every derived value held anywhere in the competition."""
        self.resolver.clear_cache()
        for stage in self._stages.values():
            stage.reset_caches()

    def serialize(self) -> dict:
        competition = {"version": self.version}
        if self.metadata:
            competition["metadata"] = [entry.model_dump() for entry in self.metadata]
        competition["name"] = self.name
        if self.notes is not None:
            competition["notes"] = self.notes
        if self.clubs:
            competition["clubs"] = [club.model_dump(exclude_none=True) for club in self.clubs]
        competition["teams"] = [team.serialize() for team in self._teams.values()]
        competition["stages"] = [stage.serialize() for stage in self._stages.values()]
        return competition

    def __repr__(self) -> str:
        return f"Competition(name={self.name!r}, teams={len(self._teams)}, stages={len(self._stages)})"
