"""
Double elimination bracket views.

In double elimination:
- Robots must lose twice to be eliminated
- No-loss side: robots that haven't lost a game yet
- One-loss side: robots that have lost once
- Final games: every stage tagged ``*Final`` (e.g. semi final, final)

The bracket state is position encoded. Each queue lists robots waiting for
their next game on that side in pairing order, and ``eliminated_robots``
records knock-outs earliest first, so its tail holds the lower podium places.
"""
from typing import List, Optional, Sequence

from .errors import DataConsistencyError
from .models import DoubleEliminationInfo, Game, GameStage, Robot


def partition_games(de_info: DoubleEliminationInfo) -> dict:
    """
    Split bracket games by stage, keeping play order within each stage.

    Returns dict with 'no_loss', 'one_loss' and 'final' game lists. Every
    game lands in exactly one list; a game without a known stage raises
    DataConsistencyError.
    """
    partitions = {
        GameStage.NO_LOSS: [],
        GameStage.ONE_LOSS: [],
        GameStage.FINAL: [],
    }
    for game in de_info.games:
        game_type = de_info.game_type(game)
        if game_type is None:
            raise DataConsistencyError(f"bracket game {game.id} has no stage")
        partitions[game_type.stage].append(game)

    return {
        'no_loss': partitions[GameStage.NO_LOSS],
        'one_loss': partitions[GameStage.ONE_LOSS],
        'final': partitions[GameStage.FINAL],
    }


def pair_queue(queue: Sequence[Robot]) -> List[tuple]:
    """
    Pair waiting robots two at a time in queue order.

    An odd robot out is returned as a one-element tuple (awaiting an
    opponent): [A, B, C, D, E] -> [(A, B), (C, D), (E,)].
    """
    return [tuple(queue[i:i + 2]) for i in range(0, len(queue), 2)]


def _eliminated_at(de_info: DoubleEliminationInfo, index: int) -> Optional[Robot]:
    if 0 <= index < len(de_info.eliminated_robots):
        return de_info.eliminated_robots[index]
    return None


def derive_podium(de_info: Optional[DoubleEliminationInfo]) -> Optional[dict]:
    """
    Work out the top three of the bracket.

    The champion is only known once a single robot is left across both
    queues. Second and third place are the last robots eliminated.

    Returns None while third place is undecided, so a podium is never
    shown partially. Otherwise a dict with 'first', 'second' and 'third';
    'first' and 'second' may still be None (shown as unknown).
    """
    if de_info is None:
        return None

    robot_count = len(de_info.robots)
    third = _eliminated_at(de_info, robot_count - 3)
    if third is None:
        return None

    remaining = list(de_info.no_loss_queue) + list(de_info.one_loss_queue)
    first = remaining[0] if len(remaining) == 1 else None

    return {
        'first': first,
        'second': _eliminated_at(de_info, robot_count - 2),
        'third': third,
    }


def is_final_game(de_info: DoubleEliminationInfo, game: Game) -> bool:
    game_type = de_info.game_type(game)
    return game_type is not None and game_type.is_final
