"""
Game scoring: valid score counts, round history text and outcome points.

A Swiss game (and a non-final bracket game) is worth one point in total,
split between the two robots according to how the rounds went:

    2 out of 2 round wins                     1   / 0
    2 out of 3 round wins and 1 tied round    0.9 / 0.1
    2 out of 3 round wins and 1 lost round    0.8 / 0.2
    1 out of 3 round wins and 2 tied rounds   0.7 / 0.3
    Tie                                       0.5 / 0.5

Final games only show who won; they carry no point annotation.
"""
import math
import sys
from typing import Optional, Sequence, Tuple

from .errors import DataConsistencyError
from .models import Game, GameStatus, RESULT_TIED, RESULT_UNKNOWN, RESULT_WON

STATE_NOT_STARTED = 'not_started'
STATE_IN_PROGRESS = 'in_progress'
STATE_DECIDED = 'decided'

BYE_POINTS = 1
TIE_POINTS = (0.5, 0.5)
STRAIGHT_WIN_POINTS = (1, 0)

# (round wins, round ties, round losses) of the winner in a three round game
THREE_ROUND_POINTS = {
    (2, 1, 0): (0.9, 0.1),
    (2, 0, 1): (0.8, 0.2),
    (1, 2, 0): (0.7, 0.3),
}

POINT_TABLE = [
    {'description': '2 out of 2 round wins', 'winner_points': 1, 'loser_points': 0},
    {'description': '2 out of 3 round wins and 1 tied round', 'winner_points': 0.9, 'loser_points': 0.1},
    {'description': '2 out of 3 round wins and 1 lost round', 'winner_points': 0.8, 'loser_points': 0.2},
    {'description': '1 out of 3 round wins and 2 tied rounds', 'winner_points': 0.7, 'loser_points': 0.3},
    {'description': 'Tie', 'winner_points': 0.5, 'loser_points': 0.5},
]


def count_valid_scores(round_scores: Sequence[Sequence]) -> Tuple[int, int]:
    """Count scores flagged valid on each side of a round, in side order."""
    counts = [0, 0]
    for side, robot_scores in enumerate(list(round_scores or [])[:2]):
        counts[side] = sum(1 for score in robot_scores or [] if score.is_valid)
    return tuple(counts)


def format_round_history(game: Game) -> str:
    """
    Build the running score record of a game, e.g. ``" (3 - 1) (2 - 2) (4 - 3)"``.

    Rounds that have not ended yet are skipped. Free throw scores, when the
    game needed a tiebreak, are appended as a last bracketed pair.
    """
    history = ''
    for game_round in game.rounds:
        if not game_round.has_ended:
            continue
        left, right = count_valid_scores(game_round.scores)
        history += f" ({left} - {right})"

    if game.free_throws is not None:
        left, right = game.free_throws.scores
        history += f" ({left} - {right})"

    return history


def is_started(game: Game) -> bool:
    return bool(game.rounds) and game.rounds[0].has_ended


def calculate_points(game: Game) -> Tuple[float, float]:
    """
    Return the (winner, loser) points of a decided game.

    For a tie both values are 0.5. Raises DataConsistencyError when the
    winner's round tally matches no scoring rule.
    """
    status = game.status
    if status.result == RESULT_TIED:
        return TIE_POINTS
    if status.result != RESULT_WON:
        raise ValueError(f"game {game.id} is not decided")

    if len(game.rounds) == 2:
        return STRAIGHT_WIN_POINTS

    tally = (status.round_win_count, status.round_tie_count, status.round_loss_count)
    points = THREE_ROUND_POINTS.get(tally)
    if points is None:
        raise DataConsistencyError(
            f"game {game.id}: {len(game.rounds)} rounds with a winner tally of "
            f"{tally[0]} wins, {tally[1]} ties, {tally[2]} losses matches no scoring rule"
        )
    return points


def format_number(value) -> str:
    """Render a number without trailing zeros: 1 -> '1', 0.50 -> '0.5'."""
    return f"{value:.2f}".rstrip('0').rstrip('.')


def round_to_two_decimal_places(value: float) -> float:
    """Round half up to two decimals; the epsilon keeps 1.005 from rounding down."""
    return math.floor((value + sys.float_info.epsilon) * 100 + 0.5) / 100


def format_points(points: float) -> str:
    if points == 1:
        return '1 point'
    return f"{format_number(points)} points"


def outcome_phrase(status: GameStatus) -> Optional[str]:
    if status.result == RESULT_WON:
        return f"{status.winner.name} won"
    if status.result == RESULT_TIED:
        return RESULT_TIED
    return None


def classify_game(game: Game, is_final: bool = False) -> dict:
    """
    Classify a game for display.

    Args:
        game: The game to classify.
        is_final: True for final-stage bracket games, which are shown
            without a point annotation.

    Returns dict with:
    - 'game_id': id of the game
    - 'label': "<robot 1> vs <robot 2>"
    - 'state': 'not_started', 'in_progress' or 'decided'
    - 'rounds_text': score history, '' until the first round ended
    - 'result': 'won', 'tied' or None while undecided
    - 'winner': winner name for a won game, else None
    - 'outcome': "<winner> won", "tied" or None
    - 'points': (winner, loser) points, None for finals and undecided games
    - 'points_text': " (0.9 points)" style annotation, '' when there is none

    Raises DataConsistencyError for a decided non-final game whose round
    tally matches no scoring rule.
    """
    robot1, robot2 = game.robots
    classification = {
        'game_id': game.id,
        'label': f"{robot1.name} vs {robot2.name}",
        'state': STATE_NOT_STARTED,
        'rounds_text': '',
        'result': None,
        'winner': None,
        'outcome': None,
        'points': None,
        'points_text': '',
    }

    status = game.status
    if status.result == RESULT_UNKNOWN and not is_started(game):
        return classification

    classification['rounds_text'] = format_round_history(game)
    if status.result == RESULT_UNKNOWN:
        classification['state'] = STATE_IN_PROGRESS
        return classification

    classification['state'] = STATE_DECIDED
    classification['result'] = status.result
    classification['winner'] = status.winner.name if status.winner else None
    classification['outcome'] = outcome_phrase(status)

    if not is_final:
        points = calculate_points(game)
        classification['points'] = points
        classification['points_text'] = f" ({format_points(points[0])})"

    return classification
