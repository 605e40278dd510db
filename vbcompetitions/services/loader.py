"""
Competition document loading and serialization.

Documents pass through the pydantic schema gate in models.document first,
then the object graph is built with the same calls a library user would make,
so every invariant the models enforce also holds for loaded documents.
"""

import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from vbcompetitions.config import SUPPORTED_VERSION, get_settings
from vbcompetitions.exceptions import DocumentError, DuplicateIDError
from vbcompetitions.models.competition import Competition
from vbcompetitions.models.document import (
    BreakDocument,
    CompetitionDocument,
    GroupDocument,
    MatchDocument,
    StageDocument,
)
from vbcompetitions.models.enums import GroupType
from vbcompetitions.models.group import Crossover, Group, Knockout, League
from vbcompetitions.models.match import GroupBreak, GroupMatch, MatchManager, MatchOfficials, MatchTeam
from vbcompetitions.models.stage import Stage
from vbcompetitions.models.team import CompetitionTeam
from vbcompetitions.types import CompetitionDict

logger = logging.getLogger(__name__)


def load_competition(competition_json: str, validate_references: Optional[bool] = None) -> Competition:
    """
    Load a competition from JSON text.

    Args:
        competition_json: The competition document
        validate_references: Whether to check team references as matches are
            added. Defaults to the VBC_VALIDATE_REFERENCES setting

    Returns:
        The loaded competition

    Raises:
        DocumentError: If the text is not JSON, the version is not supported,
            or the document fails schema validation
        CompetitionError: If the document breaks any other competition rule
    """
    try:
        data = json.loads(competition_json)
    except json.JSONDecodeError:
        raise DocumentError("Document does not contain valid JSON") from None
    return load_competition_data(data, validate_references)


def load_competition_data(data: Any, validate_references: Optional[bool] = None) -> Competition:
    """
    Load a competition from an already parsed document.

    See load_competition().
    """
    if not isinstance(data, dict):
        raise DocumentError("Competition data failed schema validation:\ndocument must be an object")

    # Documents without a version are taken to be at the supported version
    version = data.get("version", SUPPORTED_VERSION)
    if version != SUPPORTED_VERSION:
        raise DocumentError(f"Document version {version} not supported")

    try:
        document = CompetitionDocument.model_validate(data)
    except ValidationError as e:
        raise DocumentError(f"Competition data failed schema validation:\n{_format_errors(e)}") from e

    if validate_references is None:
        validate_references = get_settings().VALIDATE_REFERENCES

    competition = build_competition(document, validate_references)
    logger.info(
        f"Loaded competition {competition.name!r} with {len(competition.get_teams())} teams "
        f"and {len(competition.get_stages())} stages"
    )
    return competition


def _format_errors(error: ValidationError) -> str:
    lines = []
    for detail in error.errors():
        location = "/".join(str(part) for part in detail["loc"])
        lines.append(f"[/{location}] {detail['msg']}")
    return "\n".join(lines)


def build_competition(document: CompetitionDocument, validate_references: bool = True) -> Competition:
    """
    Build a competition from a validated document.

    Raises:
        CompetitionError: If the document breaks a competition rule
    """
    competition = Competition(document.name, document.version, validate_references)
    competition.notes = document.notes

    keys = set()
    for entry in document.metadata:
        if entry.key in keys:
            raise DuplicateIDError(f'Metadata with key "{entry.key}" already exists in the competition')
        keys.add(entry.key)
        competition.metadata.append(entry)

    for team in document.teams:
        competition.add_team(CompetitionTeam.model_validate(team.model_dump()))
    competition.clubs = [club.model_copy(deep=True) for club in document.clubs]

    for stage_document in document.stages:
        _build_stage(competition, stage_document)
    return competition


def _build_stage(competition: Competition, document: StageDocument) -> Stage:
    stage = Stage(competition, document.id, document.name, document.notes, document.description)
    competition.add_stage(stage)
    for group_document in document.groups:
        group = _build_group(stage, group_document)
        stage.add_group(group)
        for entry in group_document.matches:
            if isinstance(entry, BreakDocument):
                group.add_break(GroupBreak(group, entry.start, entry.date, entry.duration, entry.name))
            else:
                group.add_match(_build_match(group, entry))
    stage.check_matches()
    logger.debug(f"Built stage {stage.id} with {len(stage.groups)} groups")
    return stage


def _build_group(stage: Stage, document: GroupDocument) -> Group:
    common = {
        "set_config": document.sets,
        "name": document.name,
        "notes": document.notes,
        "description": document.description,
    }
    group_type = GroupType(document.type)
    if group_type == GroupType.LEAGUE:
        return League(
            stage, document.id, document.match_type,
            league_config=document.league, draws_allowed=document.draws_allowed, **common,
        )
    if group_type == GroupType.KNOCKOUT:
        return Knockout(stage, document.id, document.match_type, knockout_config=document.knockout, **common)
    return Crossover(stage, document.id, document.match_type, **common)


def _build_match(group: Group, document: MatchDocument) -> GroupMatch:
    officials = None
    if document.officials is not None:
        officials = MatchOfficials.model_validate(document.officials.model_dump())
    manager = document.manager
    if manager is not None and not isinstance(manager, str):
        manager = MatchManager(team=manager.team)

    return GroupMatch(
        group,
        document.id,
        home_team=MatchTeam.model_validate(document.home_team.model_dump()),
        away_team=MatchTeam.model_validate(document.away_team.model_dump()),
        complete=document.complete,
        court=document.court,
        venue=document.venue,
        date=document.date,
        warmup=document.warmup,
        start=document.start,
        duration=document.duration,
        officials=officials,
        mvp=document.mvp,
        manager=manager,
        friendly=document.friendly,
        notes=document.notes,
    )


def serialize_competition(competition: Competition) -> CompetitionDict:
    """Get the competition as a document that load_competition_data() accepts."""
    return competition.serialize()


def dump_competition(competition: Competition, indent: Optional[int] = 2) -> str:
    """Get the competition as JSON text."""
    return json.dumps(serialize_competition(competition), indent=indent)
