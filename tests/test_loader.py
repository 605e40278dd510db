"""Tests for loading and serializing competition documents."""

import json

import pytest

from vbcompetitions import dump_competition, load_competition, load_competition_data, serialize_competition
from vbcompetitions.exceptions import DocumentError, DuplicateIDError, ScoreError
from vbcompetitions.models.enums import TeamFilter
from vbcompetitions.models.group import Crossover, Knockout, League


class TestLoadCompetition:
    """Tests for load_competition()."""

    def test_load_from_json(self, league_json):
        """A valid document loads into a competition."""
        competition = load_competition(league_json)

        assert competition.name == 'Test League'
        assert competition.version == '1.0.0'
        assert [team.id for team in competition.get_teams()] == ['TA', 'TB', 'TC', 'TD']
        assert isinstance(competition.get_stage('L').get_group('RL'), League)

    def test_group_types(self, staged_competition):
        """Each group type builds its own group class."""
        assert isinstance(staged_competition.get_stage('F').get_group('F1'), Knockout)

    def test_invalid_json(self):
        """Text that is not JSON is rejected."""
        with pytest.raises(DocumentError, match="valid JSON"):
            load_competition('{"name": ')

    def test_not_an_object(self):
        """The document must be a JSON object."""
        with pytest.raises(DocumentError, match="schema validation"):
            load_competition('[]')

    def test_unsupported_version(self, league_data):
        """Only the supported version loads."""
        league_data['version'] = '2.0.0'

        with pytest.raises(DocumentError, match="Document version 2.0.0 not supported"):
            load_competition_data(league_data)

    def test_missing_version_accepted(self, staged_competition):
        """A document without a version is taken as the supported version."""
        assert staged_competition.version == '1.0.0'

    def test_schema_failure_lists_location(self, league_data):
        """Schema errors name the failing field."""
        del league_data['teams']

        with pytest.raises(DocumentError) as exc_info:
            load_competition_data(league_data)

        assert "failed schema validation" in str(exc_info.value)
        assert "[/teams]" in str(exc_info.value)

    def test_bad_date(self, league_data):
        """Match dates must be real calendar dates."""
        league_data['stages'][0]['groups'][0]['matches'][0]['date'] = '2024-13-01'

        with pytest.raises(DocumentError):
            load_competition_data(league_data)

    def test_unknown_entry_type(self, league_data):
        """Group entries are matches or breaks."""
        league_data['stages'][0]['groups'][0]['matches'].append({'type': 'ceremony'})

        with pytest.raises(DocumentError):
            load_competition_data(league_data)

    def test_league_needs_configuration(self, league_data):
        """A league group must carry its league configuration."""
        del league_data['stages'][0]['groups'][0]['league']

        with pytest.raises(DocumentError, match='missing the "league" configuration'):
            load_competition_data(league_data)

    def test_officials_need_team_or_person(self, league_data):
        """Officials without a team or first referee fail the schema."""
        league_data['stages'][0]['groups'][0]['matches'][0]['officials'] = {'second': 'Someone'}

        with pytest.raises(DocumentError):
            load_competition_data(league_data)

    def test_duplicate_team(self, league_data):
        """Team IDs must be unique."""
        league_data['teams'].append({'id': 'TA', 'name': 'Alpha again'})

        with pytest.raises(DuplicateIDError):
            load_competition_data(league_data)

    def test_duplicate_stage(self, league_data):
        """Stage IDs must be unique."""
        league_data['stages'].append({'id': 'L', 'groups': []})

        with pytest.raises(DuplicateIDError):
            load_competition_data(league_data)

    def test_duplicate_metadata_key(self, league_data):
        """Metadata keys must be unique."""
        league_data['metadata'] = [{'key': 'season', 'value': '2024'}, {'key': 'season', 'value': '2025'}]

        with pytest.raises(DuplicateIDError, match='Metadata with key "season"'):
            load_competition_data(league_data)

    def test_invalid_scores(self, league_data):
        """Scores breaking the set rules fail the load."""
        league_data['stages'][0]['groups'][0]['matches'][0]['homeTeam']['scores'] = [25, 25, 25, 25]
        league_data['stages'][0]['groups'][0]['matches'][0]['awayTeam']['scores'] = [20, 20, 20, 20]

        with pytest.raises(ScoreError):
            load_competition_data(league_data)

    def test_crossover_group(self, league_data):
        """Crossover groups load with their matches."""
        league_data['stages'].append({
            'id': 'X',
            'groups': [
                {
                    'id': 'C',
                    'type': 'crossover',
                    'matchType': 'sets',
                    'matches': [
                        {
                            'type': 'match',
                            'id': 'C1',
                            'homeTeam': {'id': '{L:RL:league:1}', 'scores': []},
                            'awayTeam': {'id': '{L:RL:league:2}', 'scores': []},
                            'manager': {'team': 'TC'},
                        },
                    ],
                },
            ],
        })

        competition = load_competition_data(league_data)
        group = competition.get_stage('X').get_group('C')

        assert isinstance(group, Crossover)
        assert group.get_match('C1').manager_team_id == 'TC'
        assert group.get_team_ids(TeamFilter.KNOWN) == ['TA', 'TB']


class TestSerialize:
    """Tests for turning a competition back into a document."""

    def test_serialized_document_reloads(self, league_competition):
        """A serialized competition loads back to the same table."""
        reloaded = load_competition_data(serialize_competition(league_competition))
        table = reloaded.get_stage('L').get_group('RL').get_league_table()

        assert [entry.team_id for entry in table.entries] == ['TB', 'TA', 'TC', 'TD']

    def test_serialize_keeps_scores_changes(self, staged_competition):
        """Scores set after loading are part of the serialized document."""
        staged_competition.get_stage('F').get_group('F1').get_match('FIN').set_scores([25], [20], complete=True)

        data = serialize_competition(staged_competition)
        final = data['stages'][1]['groups'][0]['matches'][0]

        assert final['complete'] is True
        assert final['homeTeam']['scores'] == [25]
        assert data['stages'][1]['groups'][0]['knockout']['standing'][0]['position'] == '1st'

    def test_dump_competition(self, league_competition):
        """The dump is JSON text."""
        data = json.loads(dump_competition(league_competition))

        assert data['name'] == 'Test League'
        assert data['stages'][0]['groups'][0]['league']['points']['winByOne'] == 3
        assert data['stages'][0]['groups'][0]['sets']['maxSets'] == 3
