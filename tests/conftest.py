"""
Shared pytest fixtures for competition results tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os
import json

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.models import CompetitionSnapshot, Game


def robot(robot_id, name=None):
    return {'id': robot_id, 'name': name or f"Robot {robot_id}"}


def round_record(left_valid, right_valid, has_ended=True, left_invalid=0, right_invalid=0):
    """A round with the given number of valid (and invalid) scores per side."""
    def side(valid, invalid):
        return [{'value': 1, 'isValid': True}] * valid + [{'value': 0, 'isValid': False}] * invalid
    return {
        'scores': [side(left_valid, left_invalid), side(right_valid, right_invalid)],
        'hasEnded': has_ended,
    }


def game_record(game_id, robots, rounds=(), result='unknown', winner=None, tally=(0, 0, 0), free_throws=None):
    status = {
        'result': result,
        'roundWinCount': tally[0],
        'roundTieCount': tally[1],
        'roundLossCount': tally[2],
    }
    if winner is not None:
        status['winner'] = winner
    data = {
        'id': game_id,
        'robots': list(robots),
        'rounds': list(rounds),
        'status': status,
    }
    if free_throws is not None:
        data['freeThrows'] = {'scores': list(free_throws)}
    return data


@pytest.fixture
def make_robot():
    return robot


@pytest.fixture
def make_round():
    return round_record


@pytest.fixture
def make_game():
    """Build a parsed Game from keyword arguments of game_record."""
    def build(*args, **kwargs):
        return Game.from_dict(game_record(*args, **kwargs))
    return build


@pytest.fixture
def make_game_record():
    return game_record


@pytest.fixture
def robots():
    """Six robots, A to F."""
    return [robot(i + 1, name) for i, name in enumerate('ABCDEF')]


@pytest.fixture
def double_elimination_record(robots):
    """A decided six robot bracket: F won, E second, D third."""
    a, b, c, d, e, f = robots
    games = [
        game_record(1, (a, b), [round_record(3, 1), round_record(2, 0)], 'won', b, (2, 0, 0)),
        game_record(2, (c, d), [round_record(1, 1), round_record(2, 1), round_record(3, 0)], 'won', d, (2, 1, 0)),
        game_record(3, (e, f), [round_record(0, 2), round_record(1, 3)], 'won', f, (2, 0, 0)),
        game_record(4, (a, c), [round_record(2, 1), round_record(0, 2), round_record(3, 1)], 'won', a, (2, 0, 1)),
        game_record(5, (d, f), [round_record(1, 1), round_record(1, 1), round_record(2, 1)], 'won', f, (1, 2, 0)),
        game_record(6, (e, f), [round_record(2, 1), round_record(1, 2), round_record(2, 2)],
                    'won', f, (1, 1, 1), free_throws=(3, 4)),
    ]
    return {
        'robots': robots,
        'games': games,
        'gameTypes': {'1': 'noLoss', '2': 'noLoss', '3': 'noLoss', '4': 'oneLoss', '5': 'semiFinal', '6': 'final'},
        'noLossQueue': [f],
        'oneLossQueue': [],
        'eliminatedRobots': [c, b, a, d, e],
    }


@pytest.fixture
def swiss_record(robots):
    """Five robot Swiss tournament, two rounds played, one bye per round."""
    a, b, c, d, e, f = robots
    robots5 = [a, b, c, d, e]
    games = [
        game_record(101, (a, b), [round_record(2, 0), round_record(3, 1)], 'won', a, (2, 0, 0)),
        game_record(102, (c, d), [round_record(1, 1), round_record(2, 2)], 'tied'),
        game_record(103, (a, c), [round_record(2, 1), round_record(1, 1), round_record(0, 0)],
                    'won', a, (1, 2, 0)),
        game_record(104, (b, e), [round_record(1, 0)]),
    ]
    return {
        'robots': robots5,
        'roundCount': 3,
        'games': games,
        'byes': [{'robotID': e['id']}, {'robotID': d['id']}],
        'robotScores': [
            {'robot': b, 'score': 0, 'tieBreakScore': 1},
            {'robot': a, 'score': 1.7, 'tieBreakScore': 0.5},
            {'robot': c, 'score': 0.8, 'tieBreakScore': 2},
            {'robot': d, 'score': 1.5, 'tieBreakScore': 0.5},
            {'robot': e, 'score': 1, 'tieBreakScore': 1.25},
        ],
    }


@pytest.fixture
def competition_record(robots, double_elimination_record, swiss_record):
    return {
        'name': 'Robot Sumo 2026',
        'robots': robots,
        'doubleEliminationTournament': double_elimination_record,
        'swissSystemTournament': swiss_record,
    }


@pytest.fixture
def snapshot(competition_record):
    return CompetitionSnapshot.from_dict(competition_record)


@pytest.fixture
def summary_file(tmp_path, competition_record):
    """Competition summary JSON written to a temporary file."""
    path = tmp_path / 'competition-state' / 'competition-summary.json'
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(competition_record), encoding='utf-8')
    return str(path)
