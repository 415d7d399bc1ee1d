"""
Build the results view model shown on the live page.

Everything returned here is plain data (strings, numbers, lists, dicts) so
the same structure feeds the Jinja templates, the JSON API and the console
printer.
"""
import logging
from typing import Optional

from .double_elimination import derive_podium, is_final_game, pair_queue, partition_games
from .errors import DataConsistencyError
from .models import CompetitionSnapshot, DoubleEliminationInfo, SwissSystemInfo
from .scoring import (
    BYE_POINTS,
    POINT_TABLE,
    classify_game,
    format_number,
    format_points,
    format_round_history,
    round_to_two_decimal_places,
)
from .swiss import group_swiss_rounds, rank_robot_scores, rounds_for_display

logger = logging.getLogger(__name__)

STATE_INCONSISTENT = 'inconsistent'


def describe_game(game, is_final=False) -> dict:
    """Classify a game, marking it inconsistent instead of inventing points."""
    try:
        return classify_game(game, is_final=is_final)
    except DataConsistencyError as e:
        logger.error(f"Inconsistent game result: {e}")
        robot1, robot2 = game.robots
        return {
            'game_id': game.id,
            'label': f"{robot1.name} vs {robot2.name}",
            'state': STATE_INCONSISTENT,
            'rounds_text': format_round_history(game),
            'result': game.status.result,
            'winner': game.status.winner.name if game.status.winner else None,
            'outcome': None,
            'points': None,
            'points_text': '',
            'error': str(e),
        }


def build_podium_view(de_info: Optional[DoubleEliminationInfo]) -> Optional[dict]:
    podium = derive_podium(de_info)
    if podium is None:
        return None
    return {place: robot.name if robot else None for place, robot in podium.items()}


def build_double_elimination_view(de_info: Optional[DoubleEliminationInfo]) -> Optional[dict]:
    if de_info is None:
        return None

    partitions = partition_games(de_info)

    def describe(games):
        return [describe_game(g, is_final=is_final_game(de_info, g)) for g in games]

    def matches(queue):
        return [[robot.name for robot in pair] for pair in pair_queue(queue)]

    return {
        'final_games': describe(partitions['final']),
        'no_loss_games': describe(partitions['no_loss']),
        'one_loss_games': describe(partitions['one_loss']),
        'no_loss_matches': matches(de_info.no_loss_queue),
        'one_loss_matches': matches(de_info.one_loss_queue),
        'eliminated': [robot.name for robot in de_info.eliminated_robots],
    }


def build_scoreboard_view(swiss_info: SwissSystemInfo) -> list:
    return [
        {
            'rank': row['rank'],
            'name': row['robot'].name,
            'score': format_number(round_to_two_decimal_places(row['score'])),
            'tie_break_score': format_number(round_to_two_decimal_places(row['tie_break_score'])),
        }
        for row in rank_robot_scores(swiss_info.robot_scores)
    ]


def build_swiss_view(swiss_info: Optional[SwissSystemInfo], roster=()) -> Optional[dict]:
    if swiss_info is None:
        return None

    rounds = group_swiss_rounds(
        swiss_info.games,
        len(swiss_info.robots),
        byes=swiss_info.byes,
        robots=roster,
        round_count=swiss_info.round_count,
    )

    return {
        'scoreboard': build_scoreboard_view(swiss_info),
        'rounds': [
            {
                'number': r['number'],
                'round_count': r['round_count'],
                'games': [describe_game(g) for g in r['games']],
                'bye': r['bye'].name if r['bye'] else None,
                'bye_points_text': format_points(BYE_POINTS),
            }
            for r in rounds_for_display(rounds)
        ],
        'point_table': [
            {
                'description': row['description'],
                'winner_points': format_number(row['winner_points']),
                'loser_points': format_number(row['loser_points']),
            }
            for row in POINT_TABLE
        ],
    }


def build_results_view(snapshot: CompetitionSnapshot) -> dict:
    """
    Derive the complete results view of a competition snapshot.

    Returns dict with:
    - 'configured': False when no competition is set up yet; every other
      value is then empty
    - 'name': competition name
    - 'podium': places of the bracket, None until third place is known
    - 'double_elimination': bracket sections, None without a bracket
    - 'swiss': scoreboard, rounds (latest first) and point table, None
      without a Swiss tournament
    """
    if not snapshot.is_configured:
        return {
            'configured': False,
            'name': None,
            'podium': None,
            'double_elimination': None,
            'swiss': None,
        }

    return {
        'configured': True,
        'name': snapshot.name,
        'podium': build_podium_view(snapshot.double_elimination),
        'double_elimination': build_double_elimination_view(snapshot.double_elimination),
        'swiss': build_swiss_view(snapshot.swiss_system, roster=snapshot.robots),
    }
