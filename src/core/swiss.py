"""
Swiss-system tournament views: round grouping, byes and the scoreboard.

Games arrive as one flat chronological list. With n robots every round
holds floor(n / 2) games, so game i belongs to round floor(i / (n // 2)).
"""
import logging
from typing import List, Optional, Sequence

from .errors import DataConsistencyError
from .models import Bye, Game, Robot, RobotScore

logger = logging.getLogger(__name__)


def games_per_round(robot_count: int) -> int:
    return robot_count // 2


def resolve_bye(bye: Optional[Bye], robots: Sequence[Robot]) -> Optional[Robot]:
    """Return the robot sitting out, or None when there is no known one."""
    if bye is None:
        return None
    robot = next((r for r in robots if r.id == bye.robot_id), None)
    if robot is None:
        logger.debug("Dropping bye for unknown robot id %s", bye.robot_id)
    return robot


def group_swiss_rounds(games: Sequence[Game], robot_count: int, byes: Sequence[Optional[Bye]] = (),
                       robots: Sequence[Robot] = (), round_count: Optional[int] = None) -> List[dict]:
    """
    Split the flat game list into rounds, oldest round first.

    Args:
        games: All Swiss games in the order they were played.
        robot_count: Number of robots taking part.
        byes: Bye of each round by round index, None where nobody sat out.
        robots: Roster used to resolve bye robot ids.
        round_count: Planned number of rounds, shown as "round x of y".

    Returns a list of dicts with:
    - 'index': zero-based round index
    - 'number': index + 1
    - 'round_count': planned rounds (defaults to the rounds found)
    - 'games': games of the round in play order
    - 'bye': robot sitting out the round, or None

    A round with a resolvable bye is returned even when none of its games
    exist yet.
    """
    per_round = games_per_round(robot_count)
    if games and per_round == 0:
        raise DataConsistencyError(f"{len(games)} Swiss games recorded for {robot_count} robots")

    grouped = []
    for index, game in enumerate(games):
        round_index = index // per_round
        while len(grouped) <= round_index:
            grouped.append([])
        grouped[round_index].append(game)

    resolved_byes = [resolve_bye(bye, robots) for bye in byes]
    bye_rounds = [i for i, robot in enumerate(resolved_byes) if robot is not None]
    total = max([len(grouped)] + [i + 1 for i in bye_rounds])

    rounds = []
    for round_index in range(total):
        rounds.append({
            'index': round_index,
            'number': round_index + 1,
            'round_count': round_count if round_count is not None else total,
            'games': grouped[round_index] if round_index < len(grouped) else [],
            'bye': resolved_byes[round_index] if round_index < len(resolved_byes) else None,
        })
    return rounds


def rounds_for_display(rounds: List[dict]) -> List[dict]:
    """Most recent round first; round numbers and indices are unchanged."""
    return list(reversed(rounds))


def rank_robot_scores(robot_scores: Sequence[RobotScore]) -> List[dict]:
    """
    Order the scoreboard by score, then tie-break score, both descending.

    Entries equal on both keys keep their input order. Returns dicts with
    'rank' (1-based), 'robot', 'score' and 'tie_break_score'.
    """
    ordered = sorted(robot_scores, key=lambda s: (-s.score, -s.tie_break_score))
    return [
        {
            'rank': position + 1,
            'robot': entry.robot,
            'score': entry.score,
            'tie_break_score': entry.tie_break_score,
        }
        for position, entry in enumerate(ordered)
    ]
