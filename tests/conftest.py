"""
Shared test fixtures and configuration.

Provides sample competition documents and the competitions loaded from them.
"""

import copy
import json
import os
import shutil
import tempfile
from typing import Any, Dict, List

import pytest

from vbcompetitions.config import get_settings
from vbcompetitions.services.loader import load_competition_data


def _team_side(team_id: str, scores: List[int], **extra) -> Dict[str, Any]:
    side = {'id': team_id, 'scores': scores}
    side.update(extra)
    return side


def _match(match_id: str, home: str, away: str, home_scores: List[int], away_scores: List[int], **extra) -> Dict[str, Any]:
    match = {
        'type': 'match',
        'id': match_id,
        'homeTeam': _team_side(home, home_scores),
        'awayTeam': _team_side(away, away_scores),
    }
    match.update(extra)
    return match


# =============================================================================
# SETTINGS
# =============================================================================

@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_data_dir():
    """Provide a temporary directory for documents written by tests."""
    temp_dir = tempfile.mkdtemp(prefix="vbcompetitions_test_")
    yield temp_dir

    if os.path.exists(temp_dir):
        shutil.rmtree(temp_dir, ignore_errors=True)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_teams() -> List[Dict[str, Any]]:
    """Provide four teams whose names sort in ID order."""
    return [
        {'id': 'TA', 'name': 'Alpha'},
        {'id': 'TB', 'name': 'Bravo'},
        {'id': 'TC', 'name': 'Charlie'},
        {'id': 'TD', 'name': 'Delta'},
    ]


@pytest.fixture
def league_data(sample_teams) -> Dict[str, Any]:
    """
    Provide a complete best-of-three league.

    Alpha and Bravo finish on 6 points, Bravo having beaten Alpha.
    Charlie and Delta finish on 3 points, Charlie having beaten Delta.
    """
    return {
        'version': '1.0.0',
        'name': 'Test League',
        'teams': copy.deepcopy(sample_teams),
        'stages': [
            {
                'id': 'L',
                'name': 'League',
                'groups': [
                    {
                        'id': 'RL',
                        'name': 'Round robin',
                        'type': 'league',
                        'matchType': 'sets',
                        'sets': {'maxSets': 3, 'setsToWin': 2, 'lastSetPointsToWin': 15},
                        'league': {
                            'ordering': ['PTS', 'H2H'],
                            'points': {'win': 3, 'winByOne': 3, 'lose': 0},
                        },
                        'matches': [
                            _match('RLM1', 'TA', 'TB', [20, 18], [25, 25], date='2024-03-01', start='10:00'),
                            _match('RLM2', 'TA', 'TC', [25, 25], [20, 21], date='2024-03-01', start='11:00'),
                            {'type': 'break', 'date': '2024-03-01', 'start': '12:00', 'name': 'Lunch'},
                            _match('RLM3', 'TA', 'TD', [25, 25], [15, 16], date='2024-03-02', start='10:00'),
                            _match('RLM4', 'TB', 'TC', [25, 25], [23, 19], date='2024-03-01', start='13:00'),
                            _match('RLM5', 'TD', 'TB', [25, 25], [22, 20], date='2024-03-02', start='11:00',
                                   officials={'team': 'TA'}),
                            _match('RLM6', 'TC', 'TD', [25, 20, 15], [20, 25, 10], date='2024-03-02', start='09:00',
                                   court='1'),
                        ],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def league_competition(league_data):
    """Provide the loaded league competition."""
    return load_competition_data(league_data)


@pytest.fixture
def staged_data(sample_teams) -> Dict[str, Any]:
    """
    Provide a continuous-scoring pool followed by a knockout fed by league positions.

    Pool A finishes Alpha, Bravo, Delta, Charlie.
    """
    return {
        'name': 'Staged Cup',
        'teams': copy.deepcopy(sample_teams),
        'stages': [
            {
                'id': 'P',
                'groups': [
                    {
                        'id': 'A',
                        'type': 'league',
                        'matchType': 'continuous',
                        'league': {
                            'ordering': ['PTS', 'PD'],
                            'points': {'win': 3, 'lose': 1},
                        },
                        'matches': [
                            _match('PA1', 'TA', 'TB', [30], [20], complete=True),
                            _match('PA2', 'TC', 'TD', [25], [28], complete=True),
                            _match('PA3', 'TA', 'TC', [30], [10], complete=True),
                            _match('PA4', 'TB', 'TD', [22], [20], complete=True),
                            _match('PA5', 'TA', 'TD', [30], [15], complete=True),
                            _match('PA6', 'TB', 'TC', [31], [10], complete=True),
                        ],
                    },
                ],
            },
            {
                'id': 'F',
                'groups': [
                    {
                        'id': 'F1',
                        'type': 'knockout',
                        'matchType': 'continuous',
                        'knockout': {
                            'standing': [
                                {'position': '1st', 'id': '{F:F1:FIN:winner}'},
                                {'position': '2nd', 'id': '{F:F1:FIN:loser}'},
                            ],
                        },
                        'matches': [
                            _match('FIN', '{P:A:league:1}', '{P:A:league:2}', [], [], complete=False,
                                   officials={'team': '{P:A:league:3}'}),
                            _match('PLATE', '{P:A:league:3}', '{P:A:league:4}', [], [], complete=False),
                        ],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def staged_competition(staged_data):
    """Provide the loaded staged competition."""
    return load_competition_data(staged_data)


@pytest.fixture
def incomplete_staged_data(staged_data) -> Dict[str, Any]:
    """Provide the staged competition with the last pool match still to play."""
    last_match = staged_data['stages'][0]['groups'][0]['matches'][5]
    last_match['complete'] = False
    last_match['homeTeam']['scores'] = []
    last_match['awayTeam']['scores'] = []
    return staged_data


@pytest.fixture
def incomplete_staged_competition(incomplete_staged_data):
    """Provide the loaded staged competition with pool A incomplete."""
    return load_competition_data(incomplete_staged_data)


@pytest.fixture
def league_json(league_data) -> str:
    """Provide the league document as JSON text."""
    return json.dumps(league_data)
